import os
from smartnotes.core.interfaces.ports import IDocumentExtractor

class PlainTextExtractor(IDocumentExtractor):
    """Reads plain text and Markdown files as-is."""

    EXTENSIONS = (".txt", ".md", ".markdown")

    def supports(self, path: str) -> bool:
        return path.lower().endswith(self.EXTENSIONS)

    def extract_text(self, path: str) -> str:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Document not found at {path}")

        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            return f.read()
