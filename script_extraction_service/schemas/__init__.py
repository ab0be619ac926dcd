"""Payload schemas for the script extraction service."""

from .payloads import ChatAnswer, ChatMessage, ChatRequest, ChatResponse, ExtractionResult, UploadResponse

__all__ = ['ChatAnswer', 'ChatMessage', 'ChatRequest', 'ChatResponse', 'ExtractionResult', 'UploadResponse']
