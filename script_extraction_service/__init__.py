"""Script Extraction Service - PDF upload and text retrieval through AskYourPDF."""

from .config import ClientSettings
from .core import DocumentExtractionClient
from .exceptions import ConfigurationError, ExtractionServiceError, ResponseShapeError, TransportError
from .schemas import ExtractionResult

__version__ = "1.0.0"
__all__ = [
    'ClientSettings',
    'DocumentExtractionClient',
    'ExtractionResult',
    'ExtractionServiceError',
    'ConfigurationError',
    'TransportError',
    'ResponseShapeError'
]
