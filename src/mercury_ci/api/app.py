"""FastAPI application for Mercury CI.

Exposes the MercuryPipeline operations over HTTP.

Usage (from project root, after installing the package):

    uvicorn mercury_ci.api.app:app --reload

The pipeline is configured from ``MERCURY_*`` environment variables.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from ..exceptions import (
    AnalysisUnavailableError,
    InvalidTransitionError,
    MercuryError,
    NotFoundError,
    UnsupportedFileTypeError,
)
from ..generators.exporter import MemoryExportSink
from ..pipeline import MercuryPipeline


app = FastAPI(title="Mercury CI API", version="0.1.0")

_pipeline: Optional[MercuryPipeline] = None


def get_pipeline() -> MercuryPipeline:
    """Return the process-wide pipeline, creating it on first use."""
    global _pipeline
    if _pipeline is None:
        _pipeline = MercuryPipeline.from_environment()
    return _pipeline


def _to_http(exc: Exception) -> HTTPException:
    """Map pipeline errors onto HTTP status codes."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=exc.message)
    if isinstance(exc, UnsupportedFileTypeError):
        return HTTPException(status_code=415, detail=exc.to_dict())
    if isinstance(exc, (InvalidTransitionError, AnalysisUnavailableError)):
        return HTTPException(status_code=409, detail=exc.message)
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, MercuryError):
        return HTTPException(status_code=500, detail=exc.message)
    return HTTPException(status_code=500, detail=str(exc))


class BriefingRequest(BaseModel):
    """Request body for briefing generation."""

    date: str = Field(..., description="Briefing date, YYYY-MM-DD or DD/MM/YYYY")
    company: Optional[str] = Field(default=None, description="Company the briefing is for")
    sources: Optional[List[str]] = Field(default=None, description="Intelligence sources")


class ReportRequest(BaseModel):
    """Request body for report generation."""

    report_type: str = Field(..., min_length=1, description="Kind of report, e.g. 'market'")
    sections: Optional[List[str]] = None
    file_id: Optional[str] = Field(
        default=None, description="Processed file whose analysis is included"
    )


class DataAnalysisRequest(BaseModel):
    """Request body for the data-analysis tool."""

    data: str = Field(..., description="CSV text with a header row")
    analysis_type: Optional[str] = None
    focus_areas: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# Briefings
# ---------------------------------------------------------------------------


@app.post("/api/briefings")
async def create_briefing(
    request: BriefingRequest,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        briefing = pipeline.generate_briefing(request.date, request.company, request.sources)
    except (MercuryError, ValueError) as exc:
        raise _to_http(exc) from exc
    return JSONResponse(status_code=201, content=briefing.to_dict())


@app.get("/api/briefings")
async def list_briefings(pipeline: MercuryPipeline = Depends(get_pipeline)) -> JSONResponse:
    return JSONResponse(content=[b.to_dict() for b in pipeline.list_briefings()])


@app.get("/api/briefings/archive")
async def list_archived_briefings(
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    return JSONResponse(content=[b.to_dict() for b in pipeline.list_archived_briefings()])


@app.get("/api/briefings/{briefing_id}")
async def get_briefing(
    briefing_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        return JSONResponse(content=pipeline.get_briefing(briefing_id).to_dict())
    except MercuryError as exc:
        raise _to_http(exc) from exc


@app.delete("/api/briefings/{briefing_id}", status_code=204)
async def delete_briefing(
    briefing_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> Response:
    try:
        pipeline.delete_briefing(briefing_id)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@app.post("/api/reports")
async def create_report(
    request: ReportRequest,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        report = pipeline.generate_report(
            request.report_type, sections=request.sections, file_id=request.file_id
        )
    except (MercuryError, ValueError) as exc:
        raise _to_http(exc) from exc
    return JSONResponse(status_code=201, content=report.to_dict())


@app.get("/api/reports")
async def list_reports(pipeline: MercuryPipeline = Depends(get_pipeline)) -> JSONResponse:
    return JSONResponse(content=[r.to_dict() for r in pipeline.list_reports()])


@app.get("/api/reports/{report_id}")
async def get_report(
    report_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        return JSONResponse(content=pipeline.get_report(report_id).to_dict())
    except MercuryError as exc:
        raise _to_http(exc) from exc


@app.get("/api/reports/{report_id}/download")
async def download_report(
    report_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> Response:
    """Download a report rendered as Markdown."""
    sink = MemoryExportSink()
    try:
        pipeline.export_report(report_id, sink=sink)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    artifact = sink.last
    return Response(
        content=artifact.content,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@app.delete("/api/reports/{report_id}", status_code=204)
async def delete_report(
    report_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> Response:
    try:
        pipeline.delete_report(report_id)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


@app.post("/api/files")
async def upload_file(
    file: UploadFile = File(..., description="CSV, text or document file"),
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Upload one file. Unsupported types are refused with 415."""
    data = await file.read()
    try:
        uploaded = pipeline.upload_file(file.filename or "", data)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    return JSONResponse(status_code=201, content=uploaded.to_dict())


@app.post("/api/files/batch")
async def upload_files(
    files: List[UploadFile] = File(...),
    analyse: bool = Form(False),
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Upload several files; unsupported ones are listed as rejected."""
    payload = [(upload.filename or "", await upload.read()) for upload in files]
    outcome = await pipeline.upload_files(payload, analyse=analyse)
    return JSONResponse(content=outcome.to_dict())


@app.get("/api/files")
async def list_files(pipeline: MercuryPipeline = Depends(get_pipeline)) -> JSONResponse:
    return JSONResponse(content=[f.to_dict() for f in pipeline.list_files()])


@app.get("/api/files/{file_id}")
async def get_file(
    file_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        return JSONResponse(content=pipeline.get_file(file_id).to_dict())
    except MercuryError as exc:
        raise _to_http(exc) from exc


@app.post("/api/files/{file_id}/analyse")
async def analyse_file(
    file_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    try:
        uploaded = await pipeline.analyse_file(file_id)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    return JSONResponse(content=uploaded.to_dict())


@app.get("/api/files/{file_id}/export")
async def export_analysis(
    file_id: str,
    format: str = "json",
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> Response:
    """Download a file's analysis as CSV or JSON."""
    sink = MemoryExportSink()
    try:
        pipeline.export_analysis(file_id, format, sink=sink)
    except (MercuryError, ValueError) as exc:
        raise _to_http(exc) from exc
    artifact = sink.last
    return Response(
        content=artifact.content,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@app.delete("/api/files/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> Response:
    try:
        pipeline.delete_file(file_id)
    except MercuryError as exc:
        raise _to_http(exc) from exc
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@app.post("/api/analyse-data")
async def analyse_data(
    request: DataAnalysisRequest,
    pipeline: MercuryPipeline = Depends(get_pipeline),
) -> JSONResponse:
    result = pipeline.analyse_data(request.data, request.analysis_type, request.focus_areas)
    return JSONResponse(content=result.to_dict())


@app.get("/api/stats")
async def get_stats(pipeline: MercuryPipeline = Depends(get_pipeline)) -> JSONResponse:
    stats = pipeline.get_stats().to_dict()
    stats.update({
        "briefings": len(pipeline.list_briefings()),
        "archivedBriefings": len(pipeline.list_archived_briefings()),
        "reports": len(pipeline.list_reports()),
        "files": len(pipeline.list_files()),
    })
    return JSONResponse(content=stats)
