"""Qt UI constants and user-facing messages."""

WINDOW_TITLE: str = "Exam Portal"

REGISTRATION_PROMPT: str = "Please provide your details to start the exam"
REGISTRATION_WARNING: str = (
    "Once you start the exam, do not switch windows, minimise, or exit fullscreen "
    "as it may result in automatic submission after 3 violations."
)
ROLL_NUMBER_LABEL: str = "Roll Number"
ROLL_NUMBER_PLACEHOLDER: str = "Enter your roll number"
PHONE_LABEL: str = "Phone Number"
PHONE_PLACEHOLDER: str = "Enter your phone number"
START_BUTTON: str = "Start Exam"
REQUIRED_INFO_TITLE: str = "Required Information"
REQUIRED_INFO_MESSAGE: str = "Please provide both roll number and phone number to start the exam."

EXAM_STARTED_TEMPLATE: str = "You have {duration} minutes to complete this exam."
QUESTION_COUNTER_TEMPLATE: str = "Question {number} of {total}"
NAVIGATOR_TOOLTIP_TEMPLATE: str = "Go to question {number}"
MARKS_TEMPLATE: str = "{marks} marks"
MULTI_SELECT_BADGE: str = "MSQ - Select Multiple Answers"
PREVIOUS_BUTTON: str = "Previous"
NEXT_BUTTON: str = "Next"
SUBMIT_BUTTON: str = "Submit Exam"
RETRY_SUBMIT_BUTTON: str = "Retry Submission"
ENTER_FULLSCREEN_BUTTON: str = "Enter Fullscreen"
EXIT_FULLSCREEN_BUTTON: str = "Exit Fullscreen"

WARNING_TITLE_TEMPLATE: str = "Warning {count}/{limit}"
WARNING_MESSAGE: str = (
    "Changing windows is not allowed. Your exam will be submitted automatically "
    "after {limit} violations."
)
AUTO_SUBMIT_VIOLATIONS_MESSAGE: str = (
    "Your exam has been submitted due to multiple window focus violations."
)

SUBMITTED_TITLE: str = "Exam submitted"
AUTO_SUBMITTED_TITLE: str = "Time's up! Exam submitted"
SUBMITTED_MESSAGE: str = (
    "Your exam has been submitted successfully. "
    "Results will be available once released by your teacher."
)
SUBMIT_ERROR_TITLE: str = "Error submitting exam"
SUBMIT_ERROR_MESSAGE: str = "There was a problem submitting your exam. Please try again."

COMPLETED_TITLE: str = "Exam Completed"
COMPLETED_MESSAGE: str = "Your exam has been submitted successfully. You can now close this window."
CLOSE_BUTTON: str = "Close"

LOAD_ERROR_TITLE: str = "Exam Not Found"
LOAD_ERROR_ACTION: str = "Return to Dashboard"

LEAVE_CONFIRM_TITLE: str = "Leave exam?"
LEAVE_CONFIRM_MESSAGE: str = "Are you sure you want to leave? Your exam may be auto-submitted."

FULLSCREEN_WARNING_TITLE: str = "Fullscreen Warning"
FULLSCREEN_WARNING_MESSAGE: str = (
    "Unable to enter fullscreen mode. For the best exam experience, please use fullscreen."
)

SUBMIT_CONFIRM_TITLE: str = "Submit exam?"
SUBMIT_CONFIRM_MESSAGE: str = (
    "You have {unanswered} unanswered questions. Once submitted you cannot change your answers."
)
SUBMITTING_MESSAGE: str = "Submitting your answers..."
VIOLATIONS_SUBMITTED_TITLE: str = "Exam auto-submitted"
TIME_REMAINING_TEMPLATE: str = "Time left: {remaining}"
VIOLATION_COUNTER_TEMPLATE: str = "Warnings: {count}/{limit}"
ANSWERED_SUMMARY_TEMPLATE: str = "Answered {answered} of {total} questions."
TIME_WARNING_SECONDS: int = 60
