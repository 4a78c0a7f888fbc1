import os
from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from smartnotes.core.domain.errors import ExtractionError
from smartnotes.core.interfaces.ports import IDocumentExtractor

class DocxExtractor(IDocumentExtractor):
    """Paragraph text of a Word document; empty paragraphs are skipped."""

    EXTENSIONS = (".docx",)

    def supports(self, path: str) -> bool:
        return path.lower().endswith(self.EXTENSIONS)

    def extract_text(self, path: str) -> str:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Document not found at {path}")

        try:
            doc = Document(path)
        except (PackageNotFoundError, KeyError, ValueError) as e:
            raise ExtractionError(f"DOCX extraction failed: {e}")
        paragraphs = [p.text for p in doc.paragraphs if p.text.strip()]
        return '\n\n'.join(paragraphs)
