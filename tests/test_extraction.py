import os
import shutil
import tempfile
import unittest
from unittest.mock import patch
import pytesseract
from docx import Document
from PIL import Image
from smartnotes.core.domain.errors import ExtractionError, ValidationError
from smartnotes.core.services.library_service import NoteLibrary
from smartnotes.infrastructure.extraction.docx_extractor import DocxExtractor
from smartnotes.infrastructure.extraction.image_extractor import ImageOcrExtractor
from smartnotes.infrastructure.extraction.pdf_extractor import PdfExtractor
from smartnotes.infrastructure.extraction.registry import ExtractorRegistry
from smartnotes.infrastructure.extraction.text_extractor import PlainTextExtractor

def write_pdf(path, page_texts):
    """Writes a minimal PDF with one Helvetica text line per page."""
    page_count = len(page_texts)
    font_id = 3 + 2 * page_count
    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [%s] /Count %d >>" % (
            " ".join(f"{3 + 2 * i} 0 R" for i in range(page_count)), page_count),
    ]
    for i, text in enumerate(page_texts):
        content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET" if text else ""
        objects.append(
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents {4 + 2 * i} 0 R "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> >>"
        )
        objects.append(f"<< /Length {len(content)} >>\nstream\n{content}\nendstream")
    objects.append("<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode("latin-1")
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("latin-1")
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode("latin-1")
    with open(path, 'wb') as f:
        f.write(out)
    return path

class ExtractionTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def path(self, relative):
        path = os.path.join(self.tmpdir, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        return path

    def write(self, relative, data):
        path = self.path(relative)
        mode = 'wb' if isinstance(data, bytes) else 'w'
        with open(path, mode) as f:
            f.write(data)
        return path

class TestPlainTextExtractor(ExtractionTestCase):
    def test_extract(self):
        path = self.write("b/notes.md", "# Heading")
        self.assertEqual(PlainTextExtractor().extract_text(path), "# Heading")

    def test_supports(self):
        extractor = PlainTextExtractor()
        self.assertTrue(extractor.supports("README.MD"))
        self.assertFalse(extractor.supports("paper.pdf"))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            PlainTextExtractor().extract_text(os.path.join(self.tmpdir, "missing.txt"))

class TestPdfExtractor(ExtractionTestCase):
    def test_extracts_each_page(self):
        path = write_pdf(self.path("lecture.pdf"), ["First page", "", "Third page"])

        text = PdfExtractor().extract_text(path)

        parts = text.split("\n\n")
        self.assertEqual(len(parts), 2)
        self.assertIn("First page", parts[0])
        self.assertIn("Third page", parts[1])

    def test_scanned_pdf_yields_no_text(self):
        path = write_pdf(self.path("scan.pdf"), [""])
        self.assertEqual(PdfExtractor().extract_text(path), "")

    def test_broken_pdf(self):
        path = self.write("broken.pdf", b"this is not a pdf")
        with self.assertRaises(ExtractionError):
            PdfExtractor().extract_text(path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            PdfExtractor().extract_text(self.path("missing.pdf"))

class TestDocxExtractor(ExtractionTestCase):
    def test_extracts_paragraphs(self):
        doc = Document()
        doc.add_paragraph("Introduction")
        doc.add_paragraph("   ")
        doc.add_paragraph("Details follow here.")
        path = self.path("report.docx")
        doc.save(path)

        self.assertEqual(DocxExtractor().extract_text(path), "Introduction\n\nDetails follow here.")

    def test_broken_docx(self):
        path = self.write("broken.docx", b"not a zip archive")
        with self.assertRaises(ExtractionError):
            DocxExtractor().extract_text(path)

class TestImageOcrExtractor(ExtractionTestCase):
    def setUp(self):
        super().setUp()
        self.image_path = self.path("photo.png")
        Image.new("RGB", (20, 20), "white").save(self.image_path)

    @patch("pytesseract.image_to_string")
    def test_ocr(self, mock_ocr):
        mock_ocr.return_value = "  Whiteboard notes \n"

        text = ImageOcrExtractor(language="deu").extract_text(self.image_path)

        self.assertEqual(text, "Whiteboard notes")
        self.assertEqual(mock_ocr.call_args[1], {"lang": "deu"})

    @patch("pytesseract.image_to_string")
    def test_missing_tesseract(self, mock_ocr):
        mock_ocr.side_effect = pytesseract.TesseractNotFoundError()
        with self.assertRaises(ExtractionError):
            ImageOcrExtractor().extract_text(self.image_path)

class TestExtractorRegistry(ExtractionTestCase):
    def test_picks_extractor_by_type(self):
        registry = ExtractorRegistry()
        self.assertIsInstance(registry.extractor_for("Paper.PDF"), PdfExtractor)
        self.assertIsInstance(registry.extractor_for("report.docx"), DocxExtractor)
        self.assertIsInstance(registry.extractor_for("scan.jpeg"), ImageOcrExtractor)
        self.assertIsInstance(registry.extractor_for("notes.md"), PlainTextExtractor)
        self.assertIsNone(registry.extractor_for("archive.zip"))

    def test_unsupported_file(self):
        path = self.write("archive.zip", b"PK")
        with self.assertRaises(ExtractionError):
            ExtractorRegistry().extract_text(path)

    def test_list_documents(self):
        a = self.write("b/notes.md", "# Heading")
        b = write_pdf(self.path("a.pdf"), ["text"])
        self.write("archive.zip", b"PK")

        self.assertEqual(ExtractorRegistry().list_documents(self.tmpdir), sorted([a, b]))

    def test_library_imports_word_document(self):
        doc = Document()
        doc.add_paragraph("Meeting minutes")
        path = self.path("Team Sync.docx")
        doc.save(path)
        library = NoteLibrary(autosave=False)

        note = library.import_file(path, ExtractorRegistry(), folder_path="/work")

        self.assertEqual(note.title, "Team Sync")
        self.assertEqual(note.content, "Meeting minutes")
        self.assertEqual(note.folder_path, "/work")

    def test_library_rejects_pdf_without_text(self):
        path = write_pdf(self.path("scan.pdf"), [""])
        library = NoteLibrary(autosave=False)
        with self.assertRaises(ValidationError):
            library.import_file(path, ExtractorRegistry())
        self.assertEqual(library.notes, [])

if __name__ == '__main__':
    unittest.main()
