"""PDF processing service using PyMuPDF and pdfplumber."""

import io
from typing import List, Optional

import fitz  # PyMuPDF
import pdfplumber

from app.core.logging import logger


class PDFService:
    """Text, table and page-image extraction from in-memory PDF bytes."""

    @staticmethod
    def _open(data: bytes) -> fitz.Document:
        return fitz.open(stream=data, filetype="pdf")

    @staticmethod
    def get_page_count(data: bytes) -> int:
        """Get number of pages in PDF, 0 if it cannot be opened."""
        try:
            with PDFService._open(data) as doc:
                return doc.page_count
        except Exception as e:
            logger.error(f"Error getting page count: {e}")
            return 0

    @staticmethod
    def check_encryption(data: bytes) -> bool:
        """Check if PDF is encrypted/password-protected."""
        try:
            with PDFService._open(data) as doc:
                return doc.needs_pass
        except Exception as e:
            logger.error(f"Error checking PDF encryption: {e}")
            return False

    @staticmethod
    def extract_text(data: bytes) -> str:
        """
        Extract text from PDF using PyMuPDF.
        Returns extracted text or empty string if extraction fails.
        """
        try:
            with PDFService._open(data) as doc:
                return "".join(page.get_text() for page in doc).strip()
        except Exception as e:
            logger.error(f"Error extracting text from PDF: {e}")
            return ""

    @staticmethod
    def extract_tables(data: bytes) -> List[List[List[Optional[str]]]]:
        """
        Extract tables from PDF using pdfplumber.
        Returns list of tables, where each table is a list of rows.
        """
        tables = []
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for page in pdf.pages:
                    page_tables = page.extract_tables()
                    if page_tables:
                        tables.extend(page_tables)
        except Exception as e:
            logger.error(f"Error extracting tables from PDF: {e}")

        return tables

    @staticmethod
    def looks_scanned(data: bytes) -> bool:
        """
        Check if PDF appears to be scanned or image-based.
        Returns True if text extraction yields very little text but pages exist.
        """
        try:
            with PDFService._open(data) as doc:
                page_count = doc.page_count
                total_text = ""
                total_images = 0
                for page in doc:
                    total_text += page.get_text()
                    total_images += len(page.get_images())

            # Heuristic: under 100 chars per page on average, or embedded images
            text_per_page = len(total_text.strip()) / max(page_count, 1)
            return text_per_page < 100 or total_images > 0

        except Exception as e:
            logger.error(f"Error checking for images in PDF: {e}")
            return True  # Assume needs vision if we can't determine

    @staticmethod
    def render_pages(data: bytes, max_pages: int = 5) -> List[bytes]:
        """Render the first ``max_pages`` pages to PNG bytes for the vision model."""
        images = []
        try:
            with PDFService._open(data) as doc:
                for page_num, page in enumerate(doc):
                    if page_num >= max_pages:
                        logger.warning(f"PDF has {doc.page_count} pages, rendering first {max_pages}")
                        break
                    # 2x zoom for better OCR
                    pix = page.get_pixmap(matrix=fitz.Matrix(2.0, 2.0))
                    images.append(pix.tobytes("png"))
        except Exception as e:
            logger.error(f"Error converting PDF to images: {e}")

        return images
