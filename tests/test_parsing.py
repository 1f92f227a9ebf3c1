import io
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing.parse import parse_resume_file, resume_extension  # noqa: E402


class ResumeFileParsingTests(unittest.TestCase):
    def test_txt_is_trimmed(self):
        parsed = parse_resume_file("resume.txt", b"\n  Jane Doe\n- Built a React project\n\n")
        self.assertEqual(parsed.text, "Jane Doe\n- Built a React project")
        self.assertEqual(parsed.parsing_warnings, [])

    def test_markdown_resume(self):
        parsed = parse_resume_file("Resume.MD", b"# Jane Doe\n\n## Skills\nPython, SQL")
        self.assertIn("Python, SQL", parsed.text)

    def test_docx_paragraphs_are_joined(self):
        from docx import Document

        document = Document()
        document.add_paragraph("Jane Doe")
        document.add_paragraph("   ")
        document.add_paragraph("Python developer")
        buffer = io.BytesIO()
        document.save(buffer)

        parsed = parse_resume_file("resume.docx", buffer.getvalue())
        self.assertEqual(parsed.text, "Jane Doe\nPython developer")
        self.assertEqual(parsed.parsing_warnings, [])

    def test_broken_pdf_becomes_warning(self):
        parsed = parse_resume_file("resume.pdf", b"this is not a pdf")
        self.assertEqual(parsed.text, "")
        self.assertEqual(len(parsed.parsing_warnings), 1)
        self.assertTrue(parsed.parsing_warnings[0].startswith("PDF parsing failed"))

    def test_unsupported_extension_raises(self):
        with self.assertRaises(ValueError):
            parse_resume_file("resume.rtf", b"hello")
        with self.assertRaises(ValueError):
            parse_resume_file(None, b"hello")

    def test_resume_extension(self):
        self.assertEqual(resume_extension(" CV.PDF "), ".pdf")
        self.assertEqual(resume_extension("noext"), "")
        self.assertEqual(resume_extension(None), "")


if __name__ == "__main__":
    unittest.main()
