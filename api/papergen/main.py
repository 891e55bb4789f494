"""
Main FastAPI Application
Controller layer that validates slot configurations and serves generated papers.
"""
import json
import logging
import os
import tempfile
from pathlib import Path

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel, ValidationError

from papergen.config import get_settings
from papergen.errors import PaperGenError
from papergen.layouts import default_slots, get_layout
from papergen.schemas import (
    BankStatistics,
    ExamConfiguration,
    GeneratedPaper,
    GeneratePaperRequest,
    QuestionBank,
    QuestionFilterRequest,
    ValidationResponse,
)
from papergen.services.doc_generator import generate_docx
from papergen.services.generator import generate_paper
from papergen.services.question_bank import bank_statistics, filter_questions
from papergen.services.validator import find_violations

log = logging.getLogger(__name__)

# Setup Paths
BASE_DIR = Path(__file__).resolve().parents[2]
OUTPUT_DIR = BASE_DIR / "output"

OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def get_runtime_output_dir() -> Path:
    """Resolve output directory for local dev or serverless runtime."""
    if os.getenv("VERCEL"):
        return Path(tempfile.gettempdir()) / "papergen-output"
    return OUTPUT_DIR


async def download_question_bank(bank_url: str) -> QuestionBank:
    """Fetch a published question bank snapshot (JSON) from the processing service."""
    if not bank_url.startswith("http"):
        raise HTTPException(status_code=422, detail="Invalid question_bank_url")

    async with httpx.AsyncClient(timeout=60) as client:
        response = await client.get(bank_url)
        response.raise_for_status()

    try:
        return QuestionBank.model_validate(response.json())
    except (json.JSONDecodeError, ValidationError) as e:
        raise HTTPException(
            status_code=502,
            detail=f"Question bank download failed: invalid snapshot ({str(e).splitlines()[0]})",
        )


def write_docx(paper: GeneratedPaper) -> str:
    """Write a paper to the runtime output dir and return the file name."""
    output_filename = f"{paper.exam_type.value.lower()}_paper_{os.urandom(4).hex()}.docx"
    runtime_output_dir = get_runtime_output_dir()
    runtime_output_dir.mkdir(parents=True, exist_ok=True)
    generate_docx(paper, str(runtime_output_dir / output_filename))
    return output_filename


class RenderDocxRequest(BaseModel):
    paper: GeneratedPaper

# Initialize FastAPI App
app = FastAPI(
    title="Question Paper Generator API",
    description="CIE/SEE question paper assembly from processed question banks",
    version="1.0.0"
)

# CORS Middleware (Allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def read_root():
    """Return API status info."""
    return {"message": "Question Paper Generator API is running."}


@app.get("/api/layouts/{exam_type}")
async def read_layout(exam_type: str, include_optional: bool = True):
    """Return the exam layout and its default slot configuration."""
    try:
        layout = get_layout(exam_type)
    except PaperGenError as e:
        raise HTTPException(status_code=422, detail=e.to_detail())

    return {
        "layout": layout,
        "slots": default_slots(layout.exam_type, include_optional=include_optional),
    }


@app.post("/api/validate", response_model=ValidationResponse)
async def validate_configuration(config: ExamConfiguration):
    """Report every marks and topic violation in a slot configuration."""
    try:
        violations = find_violations(config.exam_type, config.slots)
    except PaperGenError as e:
        raise HTTPException(status_code=422, detail=e.to_detail())

    return ValidationResponse(
        valid=not violations,
        violations=[v.to_detail() for v in violations],
    )


@app.post("/api/generate-paper")
async def generate_paper_endpoint(request: GeneratePaperRequest):
    """
    Generate a question paper from a slot configuration.

    Args:
        request: Exam configuration plus an inline or downloadable question bank.

    Returns:
        JSON response with the generated paper and a DOCX download URL.
    """
    try:
        settings = get_settings()
        if request.deterministic_fallback is not None:
            settings = settings.model_copy(
                update={"deterministic_fallback": request.deterministic_fallback}
            )

        bank = request.question_bank
        if bank is None and request.question_bank_url and request.use_question_bank:
            bank = await download_question_bank(request.question_bank_url)

        paper = generate_paper(
            request.config,
            bank,
            settings,
            use_question_bank=request.use_question_bank,
            exam_date=request.exam_date,
        )

        output_filename = write_docx(paper)

        return {
            "status": "success",
            "message": "Question paper generated successfully",
            "paper": paper,
            "filename": output_filename,
            "download_url": f"/download/{output_filename}",
        }

    except HTTPException as e:
        raise e
    except PaperGenError as e:
        raise HTTPException(status_code=422, detail=e.to_detail())
    except httpx.HTTPError as e:
        raise HTTPException(status_code=502, detail=f"Question bank download failed: {str(e)}")
    except ValueError as e:
        # Environment or configuration errors
        raise HTTPException(status_code=500, detail=f"Configuration error: {str(e)}")
    except Exception as e:
        log.exception("Error during paper generation")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/api/render-docx")
async def render_docx(request: RenderDocxRequest):
    """Render DOCX from a generated paper payload and return the file."""
    try:
        output_filename = write_docx(request.paper)
    except PaperGenError as e:
        raise HTTPException(status_code=422, detail=e.to_detail())

    return FileResponse(
        str(get_runtime_output_dir() / output_filename),
        filename=output_filename,
        media_type=DOCX_MEDIA_TYPE,
    )


@app.post("/api/questions/filter")
async def filter_bank_questions(request: QuestionFilterRequest):
    """Browse a question bank by difficulty, Bloom level, unit and marks."""
    settings = get_settings()
    questions = filter_questions(
        request.question_bank,
        difficulty=request.difficulty,
        bloom_level=request.bloom_level,
        unit=request.unit,
        marks=request.marks,
        tolerance=settings.filter_marks_tolerance,
    )
    return {
        "questions": questions,
        "total_count": len(questions),
        "filters": request.model_dump(exclude={"question_bank"}),
    }


@app.post("/api/questions/stats", response_model=BankStatistics)
async def question_bank_stats(bank: QuestionBank):
    """Summarize a question bank."""
    return bank_statistics(bank)


@app.get("/download/{filename}")
async def download_file(filename: str):
    """
    Download a generated question paper.

    Args:
        filename: Name of the file to download.

    Returns:
        File response with the .docx file.
    """
    file_path = get_runtime_output_dir() / Path(filename).name

    if not file_path.exists():
        raise HTTPException(status_code=404, detail="File not found")

    return FileResponse(
        str(file_path),
        filename=file_path.name,
        media_type=DOCX_MEDIA_TYPE,
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Question Paper Generator API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
