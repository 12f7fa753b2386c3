"""Exception hierarchy for exam loading, submission, and session errors."""

from __future__ import annotations


class ExamPortalError(Exception):
    """Base class for all exam portal errors."""


class GatewayError(ExamPortalError):
    """Raised when the persistence backend cannot be reached or rejects a call."""


class ExamLoadError(ExamPortalError):
    """Raised when an exam cannot be loaded for a session."""


class ExamNotFoundError(ExamLoadError):
    """Raised when no exam exists for the requested id or code."""


class EmptyExamError(ExamLoadError):
    """Raised when an exam still has no questions after the bounded retries."""


class ExamUnavailableError(ExamLoadError):
    """Raised when an exam exists but is not open for attempts."""


class AlreadyAttemptedError(ExamLoadError):
    """Raised when the student already has a submission for the exam."""


class RegistrationError(ExamPortalError, ValueError):
    """Raised when the registration details are incomplete."""


class SessionStateError(ExamPortalError, RuntimeError):
    """Raised when a session operation is not valid in the current state."""


class ExamImportError(ExamPortalError):
    """Raised when an exam definition cannot be parsed."""
