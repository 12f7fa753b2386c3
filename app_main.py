"""Application entry point for the exam portal.

    python app_main.py serve --data-dir exams/
    python app_main.py take --code SCI456 --student-id s1 --student-name "John Doe"
    python app_main.py check exams/science.txt
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from exam_portal.client.http_gateway import HttpExamGateway
from exam_portal.constants.about import APP_NAME, APP_VERSION
from exam_portal.constants.exam_constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_SCRATCH_DIR,
    DEFAULT_SUBMISSIONS_PATH,
)
from exam_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SERVER_URL
from exam_portal.core.exam_importer import load_exam_from_file
from exam_portal.core.exam_session import open_exam_session
from exam_portal.core.exceptions import ExamImportError, ExamLoadError
from exam_portal.core.gateway import resolve_exam_code
from exam_portal.core.models import StudentIdentity
from exam_portal.core.services.scratch_storage import JsonFileScratchStorage
from exam_portal.server.api_server import run_api_server, start_api_server
from exam_portal.server.exam_store import ExamStore
from exam_portal.styling.color_palette import Theme
from exam_portal.ui.exam_window import ExamWindow
from exam_portal.utils.logging_config import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="exam-portal", description=f"{APP_NAME} {APP_VERSION}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the exam backend service.")
    serve.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    serve.add_argument("--submissions-file", type=Path, default=DEFAULT_SUBMISSIONS_PATH)
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)

    take = subparsers.add_parser("take", help="Open the student exam window.")
    target = take.add_mutually_exclusive_group(required=True)
    target.add_argument("--exam-id")
    target.add_argument("--code", help="Join code given by the teacher.")
    take.add_argument("--student-id", required=True)
    take.add_argument("--student-name", default="")
    take.add_argument("--server-url", default=DEFAULT_SERVER_URL)
    take.add_argument("--scratch-dir", type=Path, default=DEFAULT_SCRATCH_DIR)
    take.add_argument(
        "--local-server",
        action="store_true",
        help="Serve exams from --data-dir inside this process instead of --server-url.",
    )
    take.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    take.add_argument("--submissions-file", type=Path, default=DEFAULT_SUBMISSIONS_PATH)
    take.add_argument("--port", type=int, default=DEFAULT_PORT)
    take.add_argument("--dark", action="store_true", help="Use the dark colour theme.")

    check = subparsers.add_parser("check", help="Validate exam definition files.")
    check.add_argument("files", nargs="+", type=Path)
    return parser


def _run_serve(args: argparse.Namespace, logger: logging.Logger) -> int:
    store = ExamStore(args.data_dir, submissions_path=args.submissions_file)
    logger.info("Serving %d exams on %s:%d", len(store.list_exams()), args.host, args.port)
    run_api_server(store, host=args.host, port=args.port)
    return 0


def _run_take(args: argparse.Namespace, logger: logging.Logger) -> int:
    if args.local_server:
        store = ExamStore(args.data_dir, submissions_path=args.submissions_file)
        start_api_server(store, host=DEFAULT_HOST, port=args.port)
        gateway = store
    else:
        gateway = HttpExamGateway(args.server_url)

    app = QApplication(sys.argv)
    window = ExamWindow(theme=Theme.DARK if args.dark else Theme.LIGHT)
    student = StudentIdentity(student_id=args.student_id, display_name=args.student_name)

    try:
        exam_id = args.exam_id or resolve_exam_code(gateway, args.code)
        session = open_exam_session(
            gateway,
            exam_id,
            student,
            scratch_storage=JsonFileScratchStorage(args.scratch_dir),
            clock=window.clock,
            signal_source=window.signal_source,
            presenter=window,
        )
    except ExamLoadError as exc:
        logger.error("Cannot open exam: %s", exc)
        window.show_load_error(str(exc))
    else:
        window.attach_session(session)

    window.show()
    return app.exec()


def _run_check(args: argparse.Namespace, logger: logging.Logger) -> int:
    failures = 0
    for file_path in args.files:
        try:
            exam = load_exam_from_file(file_path).exam
        except (ExamImportError, OSError) as exc:
            logger.error("%s: %s", file_path, exc)
            failures += 1
            continue
        logger.info(
            "%s: exam %s '%s' with %d questions, %d marks, %d minutes",
            file_path,
            exam.id,
            exam.title,
            exam.question_count,
            exam.total_marks,
            exam.duration_minutes,
        )
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    """Parse the command line and run the requested mode."""
    args = _build_parser().parse_args(argv)
    logger = configure_logging(logging.DEBUG if args.debug else logging.INFO)
    logger.info("Starting %s %s (%s)", APP_NAME, APP_VERSION, args.command)

    handlers = {"serve": _run_serve, "take": _run_take, "check": _run_check}
    return handlers[args.command](args, logger)


if __name__ == "__main__":
    sys.exit(main())
