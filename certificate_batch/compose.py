"""
Stamp a name glyph onto a copy of the certificate template.
"""

# Standard Library
import io

# PIP3 modules
import PIL.Image
import pypdf
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import certificate_batch as cb
import certificate_batch.config
import certificate_batch.errors


GlyphImage = cb.config.GlyphImage
CompositionError = cb.errors.CompositionError


#============================================
def load_template(template_bytes: bytes) -> pypdf.PdfReader:
	"""
	Parse a private copy of the template bytes.

	Every call parses a fresh copy, so a page changed for one certificate
	never shows up in the next.

	Args:
		template_bytes: Template PDF bytes.

	Returns:
		PdfReader over a copy of the bytes.
	"""
	buffer = io.BytesIO(bytes(template_bytes))
	reader = pypdf.PdfReader(buffer)
	if len(reader.pages) == 0:
		raise CompositionError("Template has no pages")
	return reader


#============================================
def get_page_size(page: pypdf.PageObject) -> tuple[float, float]:
	"""
	Read the page width and height in points.

	Args:
		page: PDF page.

	Returns:
		Tuple of (width, height).
	"""
	return (float(page.mediabox.width), float(page.mediabox.height))


#============================================
def compute_glyph_origin(page_width: float, baseline_y: float, glyph: GlyphImage) -> tuple[float, float]:
	"""
	Compute the bottom-left corner of the glyph on the page.

	The glyph is always centered horizontally; baseline_y is the vertical
	center of the glyph.

	Args:
		page_width: Page width in points.
		baseline_y: Vertical reference in points, origin at bottom-left.
		glyph: Glyph image.

	Returns:
		Tuple of (x, y).
	"""
	x = (page_width - glyph.width) / 2.0
	y = baseline_y - glyph.height / 2.0
	return (x, y)


#============================================
def build_glyph_overlay(
	glyph: GlyphImage,
	page_width: float,
	page_height: float,
	x: float,
	y: float,
) -> pypdf.PageObject:
	"""
	Build a one-page PDF holding just the glyph image.

	Args:
		glyph: Glyph image.
		page_width: Page width in points.
		page_height: Page height in points.
		x: Image x origin.
		y: Image y origin.

	Returns:
		PDF page object.
	"""
	image = PIL.Image.open(io.BytesIO(glyph.data))
	image.load()
	image_reader = reportlab.lib.utils.ImageReader(image)

	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	pdf.drawImage(
		image_reader,
		x,
		y,
		width=glyph.width,
		height=glyph.height,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def compose_certificate(template_bytes: bytes, glyph: GlyphImage, baseline_y: float) -> bytes:
	"""
	Build one certificate PDF from the template and a name glyph.

	Only the first page is stamped. The page width comes from the parsed
	template.

	Args:
		template_bytes: Template PDF bytes, never modified.
		glyph: Glyph image.
		baseline_y: Vertical center of the name in points.

	Returns:
		Certificate PDF bytes.
	"""
	try:
		reader = load_template(template_bytes)
		writer = pypdf.PdfWriter(clone_from=reader)
		page = writer.pages[0]
		page_width, page_height = get_page_size(page)
		x, y = compute_glyph_origin(page_width, baseline_y, glyph)
		overlay = build_glyph_overlay(glyph, page_width, page_height, x, y)
		page.merge_page(overlay)
		output = io.BytesIO()
		writer.write(output)
	except CompositionError:
		raise
	# pypdf raises arbitrary exception types on damaged files
	except Exception as error:
		raise CompositionError(f"Could not compose certificate: {error}") from error
	return output.getvalue()
