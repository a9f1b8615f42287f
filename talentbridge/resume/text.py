"""
Document-to-text conversion for uploaded CVs (PDF only)
"""
import io

import pdfplumber

from talentbridge.exceptions import FileProcessingError
from talentbridge.simple_logger import get_logger

logger = get_logger("resume")


def extract_pdf_text(content: bytes) -> str:
    """Extract plain text from PDF bytes using pdfplumber"""
    try:
        with pdfplumber.open(io.BytesIO(content)) as pdf:
            text = ""
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text += page_text + "\n"
    except Exception as e:
        raise FileProcessingError(f"Could not read PDF: {e}") from e

    logger.info(f"Extracted {len(text)} characters from PDF")
    return text
