"""Turns an uploaded file into content the AI extraction call can consume."""

import base64
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.logging import logger
from app.services.pdf_service import PDFService
from app.shared.exceptions import ExtractionFailedException


SUPPORTED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif"}
SUPPORTED_PDF_EXTENSIONS = {".pdf"}
SUPPORTED_TEXT_EXTENSIONS = {".txt", ".md", ".csv"}
ALL_SUPPORTED_EXTENSIONS = SUPPORTED_IMAGE_EXTENSIONS | SUPPORTED_PDF_EXTENSIONS | SUPPORTED_TEXT_EXTENSIONS

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


class UploadedFile(BaseModel):
    """Raw upload as received from the client."""
    file_name: str
    content_type: Optional[str] = None
    data: bytes


class EncodedImage(BaseModel):
    mime_type: str
    data: str  # base64

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class DocumentContent(BaseModel):
    """What the AI sees of an upload: text, tables and/or page images."""
    file_name: str
    text: str = ""
    tables: List[List[List[Optional[str]]]] = Field(default_factory=list)
    images: List[EncodedImage] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.text.strip() or self.tables or self.images)


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    return Path(filename).suffix.lower()


def is_supported_file(filename: str) -> bool:
    return get_file_extension(filename) in ALL_SUPPORTED_EXTENSIONS


class DocumentReader:
    """Reads images, PDFs and plain-text uploads."""

    def __init__(self, max_pdf_pages: int = 5):
        self.max_pdf_pages = max_pdf_pages

    def read(self, upload: UploadedFile) -> DocumentContent:
        """
        Build AI-ready content for an upload.

        Raises:
            ExtractionFailedException: unsupported format, or nothing readable
        """
        ext = get_file_extension(upload.file_name)
        if ext not in ALL_SUPPORTED_EXTENSIONS:
            raise ExtractionFailedException(
                "Unsupported file type. Accepted formats: PDF, PNG, JPG, JPEG, WEBP, GIF, TXT"
            )
        if not upload.data:
            raise ExtractionFailedException("The uploaded file is empty")

        if ext in SUPPORTED_IMAGE_EXTENSIONS:
            content = self._read_image(upload, ext)
        elif ext in SUPPORTED_PDF_EXTENSIONS:
            content = self._read_pdf(upload)
        else:
            content = DocumentContent(
                file_name=upload.file_name,
                text=upload.data.decode("utf-8", errors="replace"),
            )

        if content.is_empty:
            raise ExtractionFailedException("No readable content was found in the uploaded file")
        return content

    @staticmethod
    def _read_image(upload: UploadedFile, ext: str) -> DocumentContent:
        mime_type = IMAGE_MIME_TYPES.get(ext, "image/png")
        return DocumentContent(
            file_name=upload.file_name,
            images=[EncodedImage(mime_type=mime_type, data=base64.b64encode(upload.data).decode("utf-8"))],
        )

    def _read_pdf(self, upload: UploadedFile) -> DocumentContent:
        data = upload.data
        if PDFService.get_page_count(data) == 0:
            raise ExtractionFailedException("Invalid PDF file or no pages found")
        if PDFService.check_encryption(data):
            raise ExtractionFailedException("Password-protected PDFs are not supported")

        text = PDFService.extract_text(data)
        tables = PDFService.extract_tables(data)

        images: List[EncodedImage] = []
        if PDFService.looks_scanned(data):
            pages = PDFService.render_pages(data, max_pages=self.max_pdf_pages)
            images = [
                EncodedImage(mime_type="image/png", data=base64.b64encode(page).decode("utf-8"))
                for page in pages
            ]

        logger.info(
            f"Read PDF {upload.file_name}: {len(text)} chars, {len(tables)} tables, {len(images)} page images"
        )
        return DocumentContent(file_name=upload.file_name, text=text, tables=tables, images=images)
