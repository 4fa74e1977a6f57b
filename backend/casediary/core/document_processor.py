import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import docx2txt
import pypdf
import pytesseract
from PIL import Image

from casediary.core import config
from casediary.models.documents import ExtractedDocument

# Set up logging
logger = logging.getLogger("document_processor")

TEXT_EXTENSIONS = [".txt"]
DOCX_EXTENSIONS = [".docx"]
PDF_EXTENSIONS = [".pdf"]
IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"]
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS + DOCX_EXTENSIONS + PDF_EXTENSIONS + IMAGE_EXTENSIONS


class UnsupportedFileTypeError(ValueError):
    """Raised for uploads that cannot be converted to text."""


class DocumentProcessor:
    """
    Converts uploaded documents to plain text for review.

    PDFs use their text layer unless it is too sparse, in which case the
    page images are run through OCR. Images always go through OCR.
    """

    def __init__(self, ocr_min_chars_per_page: Optional[int] = None):
        self.ocr_min_chars_per_page = (
            ocr_min_chars_per_page if ocr_min_chars_per_page is not None else config.ocr_min_chars_per_page
        )

    def check_supported(self, filename: str) -> str:
        ext = Path(filename).suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            logger.warning(f"❌ UNSUPPORTED FILE FORMAT: {ext or filename}")
            raise UnsupportedFileTypeError(
                f"Unsupported file type '{ext or filename}'. Please upload a PDF, DOCX, TXT or image file."
            )
        return ext

    def extract_text(self, file_path: str) -> ExtractedDocument:
        """
        Extract text from various document formats.
        """
        ext = self.check_supported(file_path)
        name = Path(file_path).name

        if ext in PDF_EXTENSIONS:
            text, used_ocr = self._extract_from_pdf(file_path)
        elif ext in TEXT_EXTENSIONS:
            text, used_ocr = self._extract_from_txt(file_path), False
        elif ext in DOCX_EXTENSIONS:
            text, used_ocr = self._extract_from_docx(file_path), False
        else:
            text, used_ocr = self._extract_from_image(file_path), True

        return ExtractedDocument(filename=name, text=text, characters=len(text), used_ocr=used_ocr)

    async def extract_upload(self, filename: str, data: bytes) -> ExtractedDocument:
        """
        Extract text from uploaded bytes.

        The type is checked before anything is written; extraction runs in a
        worker thread so OCR does not block the event loop.
        """
        ext = self.check_supported(filename)
        logger.info(f"📤 EXTRACTING UPLOAD: filename={filename}, bytes={len(data)}")

        fd, tmp_path = tempfile.mkstemp(suffix=ext)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            result = await asyncio.to_thread(self.extract_text, tmp_path)
        finally:
            os.unlink(tmp_path)

        return result.model_copy(update={"filename": filename})

    def _extract_from_pdf(self, file_path: str):
        """
        Extract text from PDF, falling back to OCR for scanned documents.

        When the text layer is too sparse, each page's embedded images are
        OCR'd and whichever of the two readings is longer is kept for that page.
        """
        logger.info(f"🔄 EXTRACTING TEXT FROM PDF: {file_path}")
        with open(file_path, "rb") as f:
            pdf = pypdf.PdfReader(f)
            total_pages = len(pdf.pages)
            page_texts = []
            for i, page in enumerate(pdf.pages):
                if i % 5 == 0:  # Log progress every 5 pages
                    logger.info(f"📄 PDF EXTRACTION PROGRESS: page {i+1}/{total_pages}")
                page_texts.append(page.extract_text() or "")

            text = "".join(t + "\n" for t in page_texts)
            if len(text.strip()) >= self.ocr_min_chars_per_page * total_pages:
                logger.info(f"✅ PDF EXTRACTION COMPLETED: {total_pages} pages, {len(text)} characters")
                return text, False

            logger.info(f"🔍 SCANNED PDF DETECTED: {len(text.strip())} characters over {total_pages} pages, using OCR")
            used_ocr = False
            combined = ""
            for i, page in enumerate(pdf.pages):
                ocr_text = "".join(pytesseract.image_to_string(image_file.image) + "\n" for image_file in page.images)
                if len(ocr_text.strip()) > len(page_texts[i].strip()):
                    combined += ocr_text
                    used_ocr = True
                else:
                    combined += page_texts[i] + "\n"
                logger.info(f"📄 PDF OCR PROGRESS: page {i+1}/{total_pages}")

        logger.info(f"✅ PDF OCR COMPLETED: {total_pages} pages, {len(combined)} characters, used_ocr={used_ocr}")
        return combined, used_ocr

    def _extract_from_txt(self, file_path: str) -> str:
        """Extract text from a text file."""
        logger.info(f"🔄 EXTRACTING TEXT FROM TXT: {file_path}")
        with open(file_path, "r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
        logger.info(f"✅ TXT EXTRACTION COMPLETED: {len(text)} characters")
        return text

    def _extract_from_docx(self, file_path: str) -> str:
        """Extract text from a Word document."""
        logger.info(f"🔄 EXTRACTING TEXT FROM DOCX: {file_path}")
        text = docx2txt.process(file_path)
        logger.info(f"✅ DOCX EXTRACTION COMPLETED: {len(text)} characters")
        return text

    def _extract_from_image(self, file_path: str) -> str:
        """Extract text from an image using Tesseract OCR."""
        logger.info(f"🔄 EXTRACTING TEXT FROM IMAGE: {file_path}")
        with Image.open(file_path) as image:
            text = pytesseract.image_to_string(image)
        logger.info(f"✅ TEXT EXTRACTED FROM IMAGE: length={len(text)}")
        return text
