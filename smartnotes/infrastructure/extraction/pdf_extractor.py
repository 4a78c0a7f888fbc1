import os
import PyPDF2
from PyPDF2.errors import PyPdfError
from smartnotes.core.domain.errors import ExtractionError
from smartnotes.core.interfaces.ports import IDocumentExtractor

class PdfExtractor(IDocumentExtractor):
    """Text layer of a PDF, one block per page. Scanned pages yield nothing."""

    EXTENSIONS = (".pdf",)

    def supports(self, path: str) -> bool:
        return path.lower().endswith(self.EXTENSIONS)

    def extract_text(self, path: str) -> str:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Document not found at {path}")

        try:
            text_parts = []
            with open(path, 'rb') as f:
                reader = PyPDF2.PdfReader(f)
                for page in reader.pages:
                    page_text = page.extract_text()
                    if page_text and page_text.strip():
                        text_parts.append(page_text.strip())
        except (PyPdfError, ValueError) as e:
            raise ExtractionError(f"PDF extraction failed: {e}")
        return '\n\n'.join(text_parts)
