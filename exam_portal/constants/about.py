"""Static metadata describing the exam portal."""

APP_NAME = "Exam Portal"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Exam Portal runs timed multiple-choice exams in a fullscreen desktop window. "
    "Answers are saved locally as you go and graded when the exam is submitted."
)

INSTRUCTIONS_TEXT = (
    "This exam contains {question_count} questions\n"
    "Total marks: {total_marks}\n"
    "Time limit: {duration} minutes\n"
    "You cannot pause the exam once started\n"
    "The exam will run in fullscreen mode for better focus"
)
