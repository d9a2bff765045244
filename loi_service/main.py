"""
FastAPI application for the LOI document service.

Routes:
- POST /generate-pdf   HTML -> PDF
- POST /generate-docx  Letter of Intent form data -> DOCX
- POST /create-zip     base64 PDFs -> one zip archive
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from loi_service.config import ServiceConfig, load_config
from loi_service.errors import ServiceError, ValidationError
from loi_service.schemas import LetterRequest, PdfRequest, ZipRequest
from loi_service.services.archive_builder import ARCHIVE_FILENAME, build_zip
from loi_service.services.docx_encoder import DOCX_MEDIA_TYPE, encode_docx
from loi_service.services.letter_builder import build_letter
from loi_service.services.pdf_renderer import PdfRenderer, build_renderer

logger = logging.getLogger(__name__)

ENDPOINTS = ["/generate-pdf", "/generate-docx", "/create-zip"]


def get_renderer(request: Request) -> PdfRenderer:
    return request.app.state.renderer


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


def create_app(config: Optional[ServiceConfig] = None, renderer: Optional[PdfRenderer] = None) -> FastAPI:
    """Build the application; `renderer` defaults to the engine named by the config."""
    config = config or load_config()
    renderer = renderer or build_renderer(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The render engine starts on first use; only shutdown is handled here.
        try:
            yield
        finally:
            await app.state.renderer.stop()

    app = FastAPI(
        lifespan=lifespan,
        title="LOI Document Service",
        description="PDF rendering, Letter of Intent DOCX generation and PDF batch archiving",
        version="1.0.0",
    )
    app.state.config = config
    app.state.renderer = renderer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        if exc.status_code >= 500:
            logger.error("request failed", extra={"path": request.url.path, "error": exc.message, "details": exc.details})
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        details = "; ".join(str(e.get("msg")) for e in errors) if errors else None
        return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error", extra={"path": request.url.path})
        return JSONResponse(status_code=500, content={"error": "Internal server error", "details": str(exc)})

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {
            "status": "PDF Service Ready",
            "endpoints": ENDPOINTS,
            "message": "POST html content to /generate-pdf",
        }

    @app.post("/generate-pdf")
    async def generate_pdf(body: PdfRequest, engine: PdfRenderer = Depends(get_renderer)):
        """Render the posted HTML to a US Letter PDF."""
        if not body.html or not body.html.strip():
            raise ValidationError("HTML content required")
        pdf = await engine.render_pdf(body.html)
        return Response(content=pdf, media_type="application/pdf")

    @app.post("/generate-docx")
    async def generate_docx(payload: Any = Body(None)):
        """
        Build the Letter of Intent DOCX.

        Never rejects the body: any missing or unusable field falls back to its default text.
        """
        letter = LetterRequest.from_payload(payload)
        logger.info("generating docx", extra={"address": letter.address_text})
        document = build_letter(letter)
        content = await run_in_threadpool(encode_docx, document)
        filename = f"LOI_{int(time.time() * 1000)}.docx"
        return Response(content=content, media_type=DOCX_MEDIA_TYPE, headers=_attachment(filename))

    @app.post("/create-zip")
    async def create_zip(body: ZipRequest):
        """Bundle base64 PDFs into LOI_Batch.zip; undecodable entries are skipped."""
        entries = body.entries()
        if entries is None:
            raise ValidationError("pdfs array required")
        result = await run_in_threadpool(build_zip, entries)
        headers = _attachment(ARCHIVE_FILENAME)
        headers["X-Skipped-Entries"] = str(len(result.skipped))
        return Response(content=result.content, media_type="application/zip", headers=headers)

    return app
