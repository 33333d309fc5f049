"""
Lab Report Validator — FastAPI Server
======================================

RESTful API the upload flow calls right after OCR / parsing.

Endpoints:
    POST /validate          Validate raw text and/or parsed values
    POST /validate/file     Upload a text file for validation
    GET  /categories        Supported lab types and their dictionaries
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
    http://localhost:8000/redoc            # ReDoc (alternative)
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator

from lab_validator import __version__
from lab_validator.categories import definition_for, supported_categories
from lab_validator.exceptions import UnknownCategoryError
from lab_validator.models import LabValidationReport, ValidationErrorPayload
from lab_validator.pipeline import LabReportValidationPipeline

logger = logging.getLogger(__name__)


# ─── Application Lifespan (pre-warm pipeline) ───────────────────────

_pipeline: LabReportValidationPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the pipeline (reads LAB_VALIDATOR_* settings) on startup."""
    global _pipeline  # noqa: PLW0603
    _pipeline = LabReportValidationPipeline()
    yield
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Lab Report Validator API",
    description=(
        "Checks that an uploaded lab report really is the lab type the user "
        "selected. Keyword and parameter matching over OCR text or parsed "
        "values, with confidence scoring and actionable error payloads."
    ),
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(UnknownCategoryError)
async def unknown_category_handler(request: Request, exc: UnknownCategoryError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"code": exc.code, "message": exc.message, "details": exc.details},
    )


# ─── Request / Response Schemas ─────────────────────────────────────


class ValidationMode(str, Enum):
    BLOCK = "block"  # Failed validation → 422 with the error payload
    WARN = "warn"  # Failed validation → 200, error travels inside the report


class ValidateRequest(BaseModel):
    """Request body for the /validate endpoint."""

    category: str = Field(
        ...,
        min_length=1,
        description="Declared lab type: cbc, urinalysis or lipid (display names accepted).",
    )
    raw_text: Optional[str] = Field(
        default=None,
        description="Raw OCR text of the uploaded report.",
    )
    parsed_values: Optional[dict[str, Union[float, str, None]]] = Field(
        default=None,
        description="Parameter name → value, as produced by the parsing stage.",
    )
    mode: ValidationMode = ValidationMode.BLOCK

    model_config = {"json_schema_extra": {"example": {
        "category": "cbc",
        "raw_text": (
            "Complete Blood Count (CBC)\n"
            "Hemoglobin: 14.5 g/dL\n"
            "WBC: 7.5 x 10^9/L\n"
            "RBC: 5.0 x 10^12/L\n"
            "Platelet: 250 x 10^9/L\n"
            "Hematocrit: 42%"
        ),
        "mode": "block",
    }}}

    @model_validator(mode="after")
    def _require_input(self) -> "ValidateRequest":
        if self.raw_text is None and self.parsed_values is None:
            raise ValueError("Provide raw_text, parsed_values, or both")
        return self


class CategoryOut(BaseModel):
    id: str
    display_name: str
    keywords: list[str]
    parameters: list[str]
    expected_parameters: int
    min_parameters: int


class HealthResponse(BaseModel):
    status: str
    version: str
    categories_loaded: int


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_pipeline() -> LabReportValidationPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


def _respond(report: LabValidationReport, mode: ValidationMode) -> Union[LabValidationReport, JSONResponse]:
    """Block (422 + error payload) or pass the report through, per caller's mode."""
    if report.error is not None and mode == ValidationMode.BLOCK:
        logger.warning(
            "Blocked %s upload: %s (%d%%)",
            report.category.value,
            report.error.code.value,
            report.error.details.confidence,
        )
        return JSONResponse(status_code=422, content=report.error.model_dump(mode="json"))
    return report


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post(
    "/validate",
    summary="Validate a lab report against its declared lab type",
    tags=["Validation"],
    response_model=LabValidationReport,
    responses={
        400: {"description": "Unsupported lab type"},
        422: {"model": ValidationErrorPayload, "description": "Upload rejected (block mode)"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
def validate_report(request: ValidateRequest):
    """Score raw OCR text and/or parsed values against the declared lab type.

    Returns the full report with:
    - **is_valid**: `true` if every supplied input matches the lab type
    - **confidence** / **confidence_tier**: weakest validator's score
    - **text_result** / **values_result**: matched keywords and parameters
    - **error**: INVALID_LAB_IMAGE or MISMATCHED_LAB_TYPE payload (warn mode)
    """
    pipeline = _get_pipeline()
    report = pipeline.run(
        request.category,
        raw_text=request.raw_text,
        parsed_values=request.parsed_values,
    )
    return _respond(report, request.mode)


@app.post(
    "/validate/file",
    summary="Validate a lab report from an uploaded text file",
    tags=["Validation"],
    response_model=LabValidationReport,
    responses={
        400: {"description": "Unsupported lab type, or file is not valid UTF-8 text"},
        413: {"description": "File too large (max 1 MB)"},
        422: {"model": ValidationErrorPayload, "description": "Upload rejected (block mode)"},
        503: {"description": "Pipeline not yet initialised"},
    },
)
async def validate_report_file(
    category: str, file: UploadFile, mode: ValidationMode = ValidationMode.BLOCK
):
    """Upload a `.txt` file of OCR output for validation.

    Accepts any text file up to 1 MB.
    """
    if file.size and file.size > 1_048_576:
        raise HTTPException(status_code=413, detail="File too large (max 1 MB)")

    content = await file.read()
    try:
        raw_text = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be UTF-8 encoded text")

    pipeline = _get_pipeline()
    report = await asyncio.to_thread(pipeline.run, category, raw_text)
    return _respond(report, mode)


@app.get(
    "/categories",
    summary="Supported lab types",
    tags=["System"],
)
def list_categories() -> list[CategoryOut]:
    """The closed set of lab types, for validating a declared type before upload."""
    definitions = [definition_for(c) for c in sorted(supported_categories(), key=lambda c: c.value)]
    return [
        CategoryOut(
            id=d.category.value,
            display_name=d.display_name,
            keywords=list(d.keywords),
            parameters=list(d.parameters),
            expected_parameters=d.expected_parameters,
            min_parameters=d.min_parameters,
        )
        for d in definitions
    ]


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and configuration info."""
    _get_pipeline()
    return HealthResponse(
        status="healthy",
        version=__version__,
        categories_loaded=len(supported_categories()),
    )
