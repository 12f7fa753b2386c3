"""Exam gateway that talks to the backend service over HTTP."""

from __future__ import annotations

import logging
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError
import requests

from exam_portal.constants.network_constants import DEFAULT_SERVER_URL, REQUEST_TIMEOUT_SECONDS
from exam_portal.core.exceptions import GatewayError
from exam_portal.core.models import Exam, Submission
from exam_portal.server.schemas import ExamPayload, SubmissionPayload

logger = logging.getLogger(__name__)

_SUBMISSION_LIST = TypeAdapter(list[SubmissionPayload])


class HttpExamGateway:
    """``requests``-based client for the exam backend.

    Transport errors, unexpected status codes and malformed bodies are all
    reported as :class:`GatewayError`. A 404 on a lookup means "not found"
    and is returned as None.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def fetch_exam(self, exam_id: str) -> Exam | None:
        response = self._request("GET", f"/exams/{quote(exam_id, safe='')}")
        if response.status_code == 404:
            return None
        return self._parse_exam(response)

    def find_exam_by_code(self, code: str) -> Exam | None:
        response = self._request("GET", "/exams", params={"code": code})
        if response.status_code == 404:
            return None
        return self._parse_exam(response)

    def fetch_submissions(self, student_id: str) -> list[Submission]:
        response = self._request("GET", f"/students/{quote(student_id, safe='')}/submissions")
        self._raise_for_status(response)
        try:
            payloads = _SUBMISSION_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise GatewayError("Backend returned malformed submissions") from exc
        return [payload.to_submission() for payload in payloads]

    def save_submission(self, submission: Submission) -> None:
        payload = SubmissionPayload.from_submission(submission)
        response = self._request(
            "PUT",
            f"/submissions/{quote(submission.id, safe='')}",
            data=payload.model_dump_json(),
            headers={"Content-Type": "application/json"},
        )
        self._raise_for_status(response)
        logger.info("Backend stored submission %s", submission.id)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._base_url}{path}"
        try:
            return self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise GatewayError(f"Could not reach the exam server: {exc}") from exc

    def _parse_exam(self, response: requests.Response) -> Exam:
        self._raise_for_status(response)
        try:
            return ExamPayload.model_validate_json(response.content).to_exam()
        except ValueError as exc:
            # Covers pydantic validation and model invariant failures.
            raise GatewayError("Backend returned a malformed exam") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise GatewayError(
                f"Exam server responded with {response.status_code}: {_error_detail(response)}"
            ) from exc


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return response.text
