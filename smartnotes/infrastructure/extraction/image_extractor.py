import os
from smartnotes.core.domain.errors import ExtractionError
from smartnotes.core.interfaces.ports import IDocumentExtractor

class ImageOcrExtractor(IDocumentExtractor):
    """
    OCR for photos and scans via Tesseract. pytesseract and Pillow come
    from the optional `ocr` extra, and the tesseract binary must be on PATH.
    """

    EXTENSIONS = (".png", ".jpg", ".jpeg")

    def __init__(self, language: str = "eng"):
        self.language = language

    def supports(self, path: str) -> bool:
        return path.lower().endswith(self.EXTENSIONS)

    def extract_text(self, path: str) -> str:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Document not found at {path}")

        try:
            import pytesseract
            from PIL import Image
        except ImportError:
            raise ExtractionError("OCR needs pytesseract and Pillow. Install with: pip install smartnotes[ocr]")

        try:
            with Image.open(path) as image:
                return pytesseract.image_to_string(image, lang=self.language).strip()
        except pytesseract.TesseractNotFoundError:
            raise ExtractionError("Tesseract is not installed or not on PATH")
        except (pytesseract.TesseractError, OSError) as e:
            raise ExtractionError(f"OCR failed: {e}")
