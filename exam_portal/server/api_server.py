"""FastAPI server that serves exams and stores submissions."""

from __future__ import annotations

import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException, Query
import uvicorn

from exam_portal.constants.about import APP_VERSION
from exam_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_portal.core.exceptions import GatewayError
from exam_portal.server.exam_store import ExamStore
from exam_portal.server.schemas import ExamPayload, SubmissionPayload

logger = logging.getLogger(__name__)


def _get_exam_store_dependency(exam_store: ExamStore):
    def dependency() -> ExamStore:
        return exam_store

    return dependency


def create_api_app(exam_store: ExamStore) -> FastAPI:
    """Create a FastAPI application wired to the provided exam store."""
    app = FastAPI(title="Exam Portal API", version=APP_VERSION)
    exam_store_dep = _get_exam_store_dependency(exam_store)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/exams", response_model=ExamPayload)
    def find_exam_by_code(
        code: str = Query(min_length=1),
        store: ExamStore = Depends(exam_store_dep),
    ) -> ExamPayload:
        exam = store.find_exam_by_code(code)
        if exam is None:
            raise HTTPException(status_code=404, detail="No active exam found with this code.")
        return ExamPayload.from_exam(exam)

    @app.get("/exams/{exam_id}", response_model=ExamPayload)
    def get_exam(exam_id: str, store: ExamStore = Depends(exam_store_dep)) -> ExamPayload:
        exam = store.fetch_exam(exam_id)
        if exam is None:
            raise HTTPException(status_code=404, detail="Exam not found")
        return ExamPayload.from_exam(exam)

    @app.get("/students/{student_id}/submissions", response_model=list[SubmissionPayload])
    def list_submissions(
        student_id: str,
        store: ExamStore = Depends(exam_store_dep),
    ) -> list[SubmissionPayload]:
        return [
            SubmissionPayload.from_submission(submission)
            for submission in store.fetch_submissions(student_id)
        ]

    @app.put("/submissions/{submission_id}", response_model=SubmissionPayload)
    def save_submission(
        submission_id: str,
        payload: SubmissionPayload,
        store: ExamStore = Depends(exam_store_dep),
    ) -> SubmissionPayload:
        if payload.id != submission_id:
            raise HTTPException(status_code=422, detail="Submission id does not match the URL.")
        if store.fetch_exam(payload.exam_id) is None:
            raise HTTPException(status_code=422, detail=f"Unknown exam id: {payload.exam_id}")
        try:
            store.save_submission(payload.to_submission())
        except GatewayError as exc:
            logger.error("Could not store submission %s: %s", submission_id, exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return payload

    return app


def start_api_server(
    exam_store: ExamStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(exam_store)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    return thread


def run_api_server(
    exam_store: ExamStore,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    uvicorn.run(create_api_app(exam_store), host=host, port=port, log_level="info")
