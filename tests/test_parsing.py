import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.errors import ParseFailureError, UnsupportedFormatError  # noqa: E402
from app.parsing.models import ParsedDoc  # noqa: E402
from app.parsing.parse import parse_document, source_type_for  # noqa: E402


class ParsingFacadeTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp_dir = Path(self._tmp.name)

    def test_parse_txt_returns_text_verbatim(self):
        content = "Line one\n- Bullet item\nLine three"
        tmp_path = self.tmp_dir / "resume.txt"
        tmp_path.write_text(content, encoding="utf-8")

        parsed = parse_document(str(tmp_path))
        self.assertEqual(parsed.source_type, "txt")
        self.assertEqual(parsed.text, content)
        self.assertEqual(parsed.parsing_warnings, [])
        self.assertEqual(set(ParsedDoc.model_fields), {"source_type", "text", "parsing_warnings"})

    def test_parse_docx_joins_paragraphs(self):
        from docx import Document

        tmp_path = self.tmp_dir / "resume.docx"
        document = Document()
        document.add_paragraph("Jane Smith")
        document.add_paragraph("   ")
        document.add_paragraph("Skills: Python, SQL")
        document.save(str(tmp_path))

        parsed = parse_document(tmp_path)
        self.assertEqual(parsed.source_type, "docx")
        self.assertEqual(parsed.text, "Jane Smith\nSkills: Python, SQL")
        self.assertEqual(parsed.parsing_warnings, [])

    def test_empty_docx_reports_warning(self):
        from docx import Document

        tmp_path = self.tmp_dir / "empty.docx"
        Document().save(str(tmp_path))

        parsed = parse_document(tmp_path)
        self.assertEqual(parsed.text, "")
        self.assertEqual(parsed.parsing_warnings, ["No extractable text found in Word document."])

    def test_unreadable_word_file_raises_parse_failure(self):
        tmp_path = self.tmp_dir / "resume.doc"
        tmp_path.write_bytes(b"\xd0\xcf\x11\xe0 legacy binary content")

        with self.assertRaises(ParseFailureError) as ctx:
            parse_document(tmp_path)
        self.assertEqual(str(ctx.exception), "Error parsing resume file")
        self.assertEqual(ctx.exception.status_code, 422)

    def test_unsupported_extension(self):
        tmp_path = self.tmp_dir / "resume.rtf"
        tmp_path.write_text("{\\rtf1 hello}", encoding="utf-8")

        with self.assertRaises(UnsupportedFormatError):
            parse_document(tmp_path)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            parse_document(self.tmp_dir / "missing.txt")

    def test_source_type_is_case_insensitive(self):
        self.assertEqual(source_type_for("CV.PDF"), "pdf")
        self.assertEqual(source_type_for("cv.Docx"), "docx")
        with self.assertRaises(UnsupportedFormatError):
            source_type_for("cv")


if __name__ == "__main__":
    unittest.main()
