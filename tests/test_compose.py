import io
import random

import pypdf
import pytest

import certificate_batch.compose
import certificate_batch.config
import certificate_batch.errors
import certificate_batch.glyph


#============================================
def count_page_images(pdf_bytes: bytes) -> int:
	"""
	Count image XObjects on the first page.

	Args:
		pdf_bytes: PDF bytes.

	Returns:
		Number of images.
	"""
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	return len(reader.pages[0].images)


#============================================
def test_glyph_origin_math() -> None:
	"""
	Ensure the glyph is centered horizontally and around baseline_y vertically.
	"""
	glyph = certificate_batch.config.GlyphImage(data=b"", width=200.0, height=90.0)
	x, y = certificate_batch.compose.compute_glyph_origin(842.0, 285.0, glyph)
	assert x == 321.0
	assert y == 240.0
	x, y = certificate_batch.compose.compute_glyph_origin(100.0, 10.0, glyph)
	assert x == -50.0
	assert y == -35.0


#============================================
def test_compose_single_page_with_image(template_bytes: bytes) -> None:
	"""
	Ensure the certificate keeps the page and gains one embedded image.
	"""
	glyph = certificate_batch.glyph.rasterize_name("Ana Souza", 60, "#FFFFFF")
	output = certificate_batch.compose.compose_certificate(template_bytes, glyph, 285.0)
	reader = pypdf.PdfReader(io.BytesIO(output))
	assert len(reader.pages) == 1
	width, height = certificate_batch.compose.get_page_size(reader.pages[0])
	assert abs(width - 841.89) < 0.01
	assert abs(height - 595.28) < 0.01
	assert count_page_images(template_bytes) == 0
	assert count_page_images(output) == 1


#============================================
def test_compose_keeps_other_pages(letter_template_bytes: bytes) -> None:
	"""
	Ensure only the first page is stamped.
	"""
	glyph = certificate_batch.glyph.rasterize_name("Ana", 40)
	output = certificate_batch.compose.compose_certificate(letter_template_bytes, glyph, 400.0)
	reader = pypdf.PdfReader(io.BytesIO(output))
	assert len(reader.pages) == 2
	assert len(reader.pages[0].images) == 1
	assert len(reader.pages[1].images) == 0


#============================================
def test_compose_runs_are_independent(template_bytes: bytes) -> None:
	"""
	Ensure each certificate comes from a fresh parse of the template.
	"""
	original = bytes(template_bytes)
	first_glyph = certificate_batch.glyph.rasterize_name("Ana Souza", 60)
	second_glyph = certificate_batch.glyph.rasterize_name("Beatriz Lima", 60)
	first = certificate_batch.compose.compose_certificate(template_bytes, first_glyph, 285.0)
	second = certificate_batch.compose.compose_certificate(template_bytes, second_glyph, 285.0)
	assert template_bytes == original
	assert count_page_images(first) == 1
	assert count_page_images(second) == 1

	# changing one parsed template must not reach the next parse
	reader = certificate_batch.compose.load_template(template_bytes)
	reader.pages[0].mediabox.upper_right = (100, 100)
	again = certificate_batch.compose.load_template(template_bytes)
	assert float(again.pages[0].mediabox.width) > 800


#============================================
def test_compose_accepts_bytearray(template_bytes: bytes) -> None:
	"""
	Ensure a mutable buffer is copied and left untouched.
	"""
	buffer = bytearray(template_bytes)
	glyph = certificate_batch.glyph.rasterize_name("Ana", 50)
	output = certificate_batch.compose.compose_certificate(buffer, glyph, 285.0)
	assert bytes(buffer) == template_bytes
	assert count_page_images(output) == 1


#============================================
def test_compose_bad_template() -> None:
	"""
	Ensure parse failures raise CompositionError.
	"""
	glyph = certificate_batch.glyph.rasterize_name("Ana", 50)
	with pytest.raises(certificate_batch.errors.CompositionError):
		certificate_batch.compose.compose_certificate(b"this is not a pdf", glyph, 285.0)


#============================================
def test_compose_bad_glyph(template_bytes: bytes) -> None:
	"""
	Ensure embedding failures raise CompositionError.
	"""
	glyph = certificate_batch.config.GlyphImage(data=b"not a png", width=10.0, height=10.0)
	with pytest.raises(certificate_batch.errors.CompositionError):
		certificate_batch.compose.compose_certificate(template_bytes, glyph, 285.0)


#============================================
def corrupt_bytes(data: bytes, seed: int, count: int = 5) -> bytes:
	"""
	Overwrite a few random bytes of a PDF.

	Args:
		data: Original bytes.
		seed: Random seed.
		count: Number of bytes to overwrite.

	Returns:
		Damaged copy.
	"""
	rng = random.Random(seed)
	damaged = bytearray(data)
	for _ in range(count):
		damaged[rng.randrange(len(damaged))] = rng.randrange(256)
	return bytes(damaged)


#============================================
def test_damaged_templates_raise_composition_error(template_bytes: bytes) -> None:
	"""
	Ensure any failure on a damaged template surfaces as CompositionError.
	"""
	glyph = certificate_batch.glyph.rasterize_name("Ana", 50)
	for seed in range(60):
		damaged = corrupt_bytes(template_bytes, seed)
		try:
			certificate_batch.compose.compose_certificate(damaged, glyph, 285.0)
		except certificate_batch.errors.CompositionError:
			pass


#============================================
def test_unexpected_pypdf_errors_are_wrapped(template_bytes: bytes, monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	Ensure exception types outside pypdf's own hierarchy become CompositionError.
	"""
	def broken_merge(self, page2, *args, **kwargs):
		raise AttributeError("'DictionaryObject' object has no attribute 'get_data'")

	monkeypatch.setattr(pypdf.PageObject, "merge_page", broken_merge)
	glyph = certificate_batch.glyph.rasterize_name("Ana", 50)
	with pytest.raises(certificate_batch.errors.CompositionError):
		certificate_batch.compose.compose_certificate(template_bytes, glyph, 285.0)

	def unsupported_merge(self, page2, *args, **kwargs):
		raise NotImplementedError("unsupported filter")

	monkeypatch.setattr(pypdf.PageObject, "merge_page", unsupported_merge)
	with pytest.raises(certificate_batch.errors.CompositionError):
		certificate_batch.compose.compose_certificate(template_bytes, glyph, 285.0)
