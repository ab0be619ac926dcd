from fastapi import FastAPI, Depends, HTTPException, status, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from functools import lru_cache
from datetime import datetime
from typing import Iterator
import uvicorn

from script_extraction_service import (
    ClientSettings,
    ConfigurationError,
    DocumentExtractionClient,
    ExtractionResult,
    ResponseShapeError,
    TransportError,
    __version__
)
from script_extraction_service.utils import configure_logging

from .schemas import HealthResponse, UploadResult

app = FastAPI(
    title="Script Extraction API",
    description="API for uploading PDF scripts and retrieving their plain text",
    version=__version__
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_settings() -> ClientSettings:
    """Settings read once from the environment."""
    return ClientSettings.from_env()


def get_client() -> Iterator[DocumentExtractionClient]:
    """One client, with its own HTTP session, per request."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        raise to_http_error(e)
    with DocumentExtractionClient(settings) as client:
        yield client


async def read_pdf_upload(upload_file: UploadFile) -> bytes:
    """Read an uploaded PDF, rejecting other file types and empty files."""
    if not upload_file.filename or not upload_file.filename.lower().endswith('.pdf'):
        raise HTTPException(status_code=400, detail="Only PDF files are allowed")
    content = await upload_file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return content


def to_http_error(error: Exception) -> HTTPException:
    """Map client failures onto HTTP status codes."""
    if isinstance(error, ConfigurationError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
    if isinstance(error, (TransportError, ResponseShapeError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@app.get("/health", response_model=HealthResponse)
async def health_check(client: DocumentExtractionClient = Depends(get_client)):
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        api_key_configured=client.settings.has_api_key
    )


@app.post("/scripts/extract", response_model=ExtractionResult)
async def extract_script(
    file: UploadFile = File(...),
    client: DocumentExtractionClient = Depends(get_client)
):
    """Upload a PDF script and return its plain text"""
    content = await read_pdf_upload(file)
    try:
        return await client.aextract_text(content, filename=file.filename)
    except (ConfigurationError, TransportError, ResponseShapeError, ValueError) as e:
        raise to_http_error(e)


@app.post("/scripts/upload", response_model=UploadResult)
async def upload_script(
    file: UploadFile = File(...),
    client: DocumentExtractionClient = Depends(get_client)
):
    """Upload a PDF script and return the service's document id"""
    content = await read_pdf_upload(file)
    try:
        doc_id = await client.aupload_document(content, filename=file.filename)
    except (ConfigurationError, TransportError, ResponseShapeError, ValueError) as e:
        raise to_http_error(e)
    return UploadResult(doc_id=doc_id, filename=file.filename)


@app.get("/scripts/{doc_id}/text", response_model=ExtractionResult)
async def get_script_text(doc_id: str, client: DocumentExtractionClient = Depends(get_client)):
    """Return the plain text of a previously uploaded script"""
    try:
        text = await client.afetch_extracted_text(doc_id)
    except (ConfigurationError, TransportError, ResponseShapeError, ValueError) as e:
        raise to_http_error(e)
    return ExtractionResult(doc_id=doc_id, text=text)


if __name__ == "__main__":
    configure_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
