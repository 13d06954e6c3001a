"""
Pytest configuration for local imports and shared fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def build_template_pdf(pagesize: tuple[float, float], pages: int = 1) -> bytes:
	"""
	Build a plain certificate template PDF.

	Args:
		pagesize: Page size in points.
		pages: Number of pages.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=pagesize)
	page_width, page_height = pagesize
	for _ in range(pages):
		pdf.setFillColorRGB(0.1, 0.2, 0.4)
		pdf.rect(0, 0, page_width, page_height, stroke=0, fill=1)
		pdf.setFillColorRGB(1.0, 1.0, 1.0)
		pdf.setFont("Helvetica", 18)
		pdf.drawCentredString(page_width / 2.0, page_height * 0.7, "THIS CERTIFICATE IS AWARDED TO")
		pdf.showPage()
	pdf.save()
	return buffer.getvalue()


@pytest.fixture
def template_bytes() -> bytes:
	"""
	A4 landscape one-page template.
	"""
	return build_template_pdf(reportlab.lib.pagesizes.landscape(reportlab.lib.pagesizes.A4))


@pytest.fixture
def letter_template_bytes() -> bytes:
	"""
	US letter portrait two-page template.
	"""
	return build_template_pdf(reportlab.lib.pagesizes.letter, pages=2)
