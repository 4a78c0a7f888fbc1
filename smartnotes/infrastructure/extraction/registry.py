import os
from typing import List, Optional, Sequence
from smartnotes.core.domain.errors import ExtractionError
from smartnotes.core.interfaces.ports import IDocumentExtractor
from smartnotes.infrastructure.extraction.docx_extractor import DocxExtractor
from smartnotes.infrastructure.extraction.image_extractor import ImageOcrExtractor
from smartnotes.infrastructure.extraction.pdf_extractor import PdfExtractor
from smartnotes.infrastructure.extraction.text_extractor import PlainTextExtractor

class ExtractorRegistry(IDocumentExtractor):
    """Picks the extractor for a file by its extension."""

    def __init__(self, extractors: Optional[Sequence[IDocumentExtractor]] = None):
        if extractors is None:
            extractors = [PlainTextExtractor(), PdfExtractor(), DocxExtractor(), ImageOcrExtractor()]
        self.extractors = list(extractors)

    def extractor_for(self, path: str) -> Optional[IDocumentExtractor]:
        for extractor in self.extractors:
            if extractor.supports(path):
                return extractor
        return None

    def supports(self, path: str) -> bool:
        return self.extractor_for(path) is not None

    def extract_text(self, path: str) -> str:
        extractor = self.extractor_for(path)
        if extractor is None:
            raise ExtractionError(f"Unsupported file type: {os.path.basename(path)}")
        return extractor.extract_text(path)

    def list_documents(self, directory: str) -> List[str]:
        """Every importable file below directory (recursive), sorted."""
        documents = []
        for root, _, files in os.walk(directory):
            for file in files:
                if self.supports(file):
                    documents.append(os.path.join(root, file))
        return sorted(documents)
