"""FastAPI server exposing receipt extraction over HTTP."""

import os
from json import JSONDecodeError

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from receiptgrid.receipt.formatter import format_extraction
from receiptgrid.receipt.spatial_extraction import extract_receipt
from receiptgrid.receipt.vision_normalization import MissingAnnotationError
from receiptgrid.runtime.extraction_config import load_extraction_config
from receiptgrid.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HOST = os.environ.get("RECEIPTGRID_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.environ.get("RECEIPTGRID_PORT", "8000"))

app = FastAPI(title="Receipt Extraction")


@app.post("/extract")
async def extract(request: Request) -> JSONResponse:
    """Extract a receipt record from a Vision API response body."""
    try:
        payload = await request.json()
    except (JSONDecodeError, UnicodeDecodeError):
        return JSONResponse({"status": "error", "message": "Request body is not valid JSON"}, status_code=400)

    if not isinstance(payload, dict):
        return JSONResponse({"status": "error", "message": "Request body must be a JSON object"}, status_code=400)

    try:
        extraction = extract_receipt(payload, config=load_extraction_config())
    except MissingAnnotationError as e:
        logger.warning("Rejected payload: %s", e)
        return JSONResponse({"status": "error", "message": str(e)}, status_code=422)

    return JSONResponse({"status": "success", "extraction": format_extraction(extraction)})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT)
