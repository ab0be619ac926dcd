"""HTTP client for the AskYourPDF upload and knowledge-base chat endpoints."""

import asyncio
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Any, Dict, Optional, Type, TypeVar
import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..config import ClientSettings
from ..exceptions import ConfigurationError, ResponseShapeError, TransportError
from ..schemas.payloads import ChatMessage, ChatRequest, ChatResponse, ExtractionResult, UploadResponse
from ..utils.logging import redact_secret

UPLOAD_PATH = "/v1/api/upload"
CHAT_PATH = "/v1/api/knowledge_base_chat"
PDF_MIME_TYPE = "application/pdf"

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class DocumentExtractionClient:
    """Uploads PDFs to AskYourPDF and asks the chat endpoint for their text.

    The client holds only immutable settings and a requests session. requests does not
    document Session as thread-safe, so concurrent callers should each use their own
    client (or pass in their own session).
    """

    def __init__(self, settings: Optional[ClientSettings] = None, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            settings: Client settings. If not provided, they are read from the environment.
            session: HTTP session to send requests with. A private one is created if omitted.
        """
        self.settings = settings or ClientSettings.from_env()
        self._owns_session = session is None
        self.session = session or requests.Session()

    def __enter__(self) -> "DocumentExtractionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    @property
    def upload_url(self) -> str:
        return f"{self.settings.base_url}{UPLOAD_PATH}"

    @property
    def chat_url(self) -> str:
        return f"{self.settings.base_url}{CHAT_PATH}"

    def upload_document(self, file_bytes: bytes, filename: Optional[str] = None) -> str:
        """
        Upload PDF content and return the document id assigned by the service.

        Args:
            file_bytes: Raw PDF content
            filename: Name sent with the file part (defaults to settings.upload_filename)

        Returns:
            The docId from the upload response

        Raises:
            ValueError: If file_bytes is empty
            ConfigurationError: If no API key is configured
            TransportError: On connection failure, timeout or a non-2xx status
            ResponseShapeError: If the response has no docId
        """
        self._require_api_key()
        if not file_bytes:
            raise ValueError("file_bytes must not be empty")

        filename = filename or self.settings.upload_filename
        logger.info(
            "Uploading PDF ({} bytes) to {} with API key {}",
            len(file_bytes),
            self.upload_url,
            redact_secret(self.settings.api_key, self.settings.log_key_prefix),
        )

        payload = self._post(
            self.upload_url,
            operation="PDF upload",
            files={"file": (filename, file_bytes, PDF_MIME_TYPE)},
            headers=self._headers(),
        )
        logger.debug("Upload response data: {}", payload)

        upload = self._parse(payload, UploadResponse, "missing docId")
        if not upload.doc_id:
            raise ResponseShapeError("Invalid response structure: missing docId")
        return upload.doc_id

    def fetch_extracted_text(self, doc_id: str) -> str:
        """
        Ask the knowledge-base chat endpoint for the full text of an uploaded document.

        Args:
            doc_id: Identifier returned by upload_document

        Returns:
            answer.message from the chat response, unmodified

        Raises:
            ValueError: If doc_id is empty
            ConfigurationError: If no API key is configured
            TransportError: On connection failure, timeout or a non-2xx status
            ResponseShapeError: If the response has no answer.message
        """
        self._require_api_key()
        if not doc_id:
            raise ValueError("doc_id must not be empty")

        logger.info("Fetching script content for docId: {}", doc_id)

        request = ChatRequest(
            documents=[doc_id],
            messages=[ChatMessage(sender="User", message=self.settings.extraction_prompt)],
            stream=False,
        )
        payload = self._post(
            self.chat_url,
            operation="Script content request",
            json=request.model_dump(),
            headers=self._headers({"Content-Type": "application/json"}),
        )

        chat = self._parse(payload, ChatResponse, "missing answer.message")
        if chat.answer is None or not chat.answer.message:
            raise ResponseShapeError("Invalid response: missing answer.message")
        return chat.answer.message

    def extract_text(self, file_bytes: bytes, filename: Optional[str] = None) -> ExtractionResult:
        """Upload a PDF and fetch its text in one go."""
        doc_id = self.upload_document(file_bytes, filename=filename)
        text = self.fetch_extracted_text(doc_id)
        return ExtractionResult(doc_id=doc_id, text=text, filename=filename or self.settings.upload_filename)

    async def aupload_document(self, file_bytes: bytes, filename: Optional[str] = None) -> str:
        return await asyncio.to_thread(self.upload_document, file_bytes, filename)

    async def afetch_extracted_text(self, doc_id: str) -> str:
        return await asyncio.to_thread(self.fetch_extracted_text, doc_id)

    async def aextract_text(self, file_bytes: bytes, filename: Optional[str] = None) -> ExtractionResult:
        return await asyncio.to_thread(self.extract_text, file_bytes, filename)

    def _require_api_key(self) -> None:
        if not self.settings.has_api_key:
            raise ConfigurationError("AskYourPDF API key is not configured")

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        # requests sets the multipart Content-Type (with boundary) for file uploads
        headers = {
            "x-api-key": self.settings.api_key,
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _post(self, url: str, operation: str, **kwargs) -> Any:
        """Send a POST and return the decoded JSON body, translating transport failures."""
        timeout = self.settings.timeout
        try:
            response = self._send_within_deadline(url, timeout, **kwargs)
        except requests.Timeout as e:
            logger.error("{} timed out after {}s: {}", operation, timeout, e)
            raise TransportError(f"{operation} failed: timed out after {timeout}s") from e
        except requests.RequestException as e:
            logger.error("{} error: {}", operation, e)
            raise TransportError(f"{operation} failed: {e}") from e

        logger.info("{} response status: {}", operation, response.status_code)

        if not 200 <= response.status_code < 300:
            body = _response_body(response)
            logger.error("{} error: status={} data={}", operation, response.status_code, body)
            raise TransportError(
                f"{operation} failed: request failed with status code {response.status_code}",
                status_code=response.status_code,
                body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("{} returned a non-JSON body: {}", operation, response.text[:500])
            raise ResponseShapeError(f"Invalid response: body is not JSON ({operation})") from e

    def _send_within_deadline(self, url: str, timeout: float, **kwargs) -> requests.Response:
        """
        POST and read the whole body, giving up once `timeout` seconds have passed in total.

        requests applies its timeout per connect and per socket read only, so the request
        runs in a worker thread and the caller stops waiting at the deadline.

        Raises:
            requests.Timeout: If no complete response arrived before the deadline
        """
        in_flight = []

        def send() -> requests.Response:
            response = self.session.post(url, timeout=timeout, stream=True, **kwargs)
            in_flight.append(response)
            response.content  # read the body before the deadline passes
            return response

        executor = ThreadPoolExecutor(max_workers=1)
        future = executor.submit(send)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError:
            # unblocks the worker if it is still reading the body
            for response in in_flight:
                response.close()
            raise requests.Timeout(f"no complete response within {timeout}s") from None
        finally:
            executor.shutdown(wait=False)

    @staticmethod
    def _parse(payload: Any, model: Type[PayloadT], missing: str) -> PayloadT:
        if not isinstance(payload, dict):
            raise ResponseShapeError(f"Invalid response structure: {missing}")
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            raise ResponseShapeError(
                f"Invalid response structure: {field} has an unexpected type ({error['msg']})"
            ) from e


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
