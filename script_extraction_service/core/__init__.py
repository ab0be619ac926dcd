from .client import DocumentExtractionClient

__all__ = ['DocumentExtractionClient']
