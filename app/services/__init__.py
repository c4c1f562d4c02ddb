"""Business logic services."""

from app.services.document_reader import DocumentReader, UploadedFile
from app.services.openai_service import OpenAIHealthClient
from app.services.pdf_service import PDFService

__all__ = ["DocumentReader", "UploadedFile", "OpenAIHealthClient", "PDFService"]
