"""FastAPI server that turns uploaded receipt images into extraction results."""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from strukscan.domain.extraction import ExtractionFailed
from strukscan.runtime.keyword_rules import load_receipt_keywords
from strukscan.runtime.logging import get_logger
from strukscan.runtime.receipt_pipeline import enhance_extraction, extract_receipt_data
from strukscan.runtime.recognizer import (
    DEFAULT_OCR_SERVICE_URL,
    RecognizerFactory,
    RecognizerHandle,
    create_recognizer_factory,
)

logger = get_logger(__name__)

OCR_SERVICE_URL = os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL)
ENHANCE_URL = os.environ.get("STRUKSCAN_ENHANCE_URL") or None


def create_app(
    recognizer_factory: RecognizerFactory | None = None,
    enhance_url: str | None = ENHANCE_URL,
) -> FastAPI:
    """
    Build the scanner app.

    The app owns one RecognizerHandle for its whole lifetime: it is created
    at startup, shared by every request, and released at shutdown.
    """
    factory = recognizer_factory or create_recognizer_factory("service", OCR_SERVICE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        handle = RecognizerHandle(factory)
        app.state.recognizer = handle
        try:
            yield
        finally:
            handle.release()

    app = FastAPI(title="Receipt Scanner", lifespan=lifespan)

    # Plain `def` so recognition runs in the threadpool instead of the event loop.
    @app.post("/scan")
    def scan_receipt(
        request: Request,
        file: UploadFile = File(...),
        max_width: int | None = Form(None, gt=0),
        quality: int | None = Form(None, ge=1, le=100),
    ) -> JSONResponse:
        """Extract structured data from one uploaded receipt image."""
        contents = file.file.read()
        logger.info("Received %s (%d bytes)", file.filename or "upload", len(contents))
        if not contents:
            return JSONResponse({"status": "error", "message": "Uploaded file is empty"}, status_code=400)

        try:
            result = extract_receipt_data(
                contents,
                request.app.state.recognizer,
                max_width=max_width,
                quality=quality,
                keywords=load_receipt_keywords(),
            )
        except ExtractionFailed as e:
            logger.error("Receipt extraction failed: %s", e)
            return JSONResponse({"status": "error", "message": str(e)}, status_code=422)

        if enhance_url:
            result, _ = enhance_extraction(result, enhance_url)

        return JSONResponse(result.to_dict())

    @app.get("/health")
    def health(request: Request) -> dict[str, str]:
        """Health check endpoint."""
        handle: RecognizerHandle = request.app.state.recognizer
        return {"status": "ok", "recognizer": "active" if handle.is_active else "idle"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
