"""
Render participant names into PNG glyph images.
"""

# Standard Library
import io
import os
import pathlib
import re

# PIP3 modules
import PIL.features
import PIL.Image
import PIL.ImageDraw
import PIL.ImageFont

# local repo modules
import certificate_batch as cb
import certificate_batch.config
import certificate_batch.errors


GlyphImage = cb.config.GlyphImage
RenderingUnavailable = cb.errors.RenderingUnavailable

DEFAULT_COLOR = cb.config.DEFAULT_COLOR
DEFAULT_FONT_FAMILY = cb.config.DEFAULT_FONT_FAMILY
FONT_PATH_ENV = cb.config.FONT_PATH_ENV
FONT_SEARCH_PATHS = cb.config.FONT_SEARCH_PATHS
GLYPH_OVERSAMPLE = cb.config.GLYPH_OVERSAMPLE
GLYPH_PADDING_FACTOR = cb.config.GLYPH_PADDING_FACTOR
GLYPH_HEIGHT_FACTOR = cb.config.GLYPH_HEIGHT_FACTOR

FontType = PIL.ImageFont.FreeTypeFont | PIL.ImageFont.TransposedFont | PIL.ImageFont.ImageFont

LINE_BREAK_PATTERN = re.compile(r"[\r\n\t\f\v]")

# keyed by (font path or "", pixel size)
_font_cache: dict[tuple[str, float], FontType] = {}


#============================================
def find_font_path(font_path: str | None = None) -> pathlib.Path | None:
	"""
	Locate the decorative name font file.

	Args:
		font_path: Explicit font path, checked first.

	Returns:
		Existing font path or None.
	"""
	candidates: list[str] = []
	if font_path:
		candidates.append(font_path)
	env_path = os.environ.get(FONT_PATH_ENV)
	if env_path:
		candidates.append(env_path)
	candidates.extend(FONT_SEARCH_PATHS)
	for candidate in candidates:
		path = pathlib.Path(candidate).expanduser()
		if path.is_file():
			return path
	return None


#============================================
def load_name_font(size: float, font_path: str | None = None) -> FontType:
	"""
	Load the name font at a pixel size, waiting for the file to load.

	Falls back to Pillow's bundled scalable font when the decorative
	font cannot be loaded.

	Args:
		size: Font size in pixels.
		font_path: Optional explicit font path.

	Returns:
		Pillow font.
	"""
	if not PIL.features.check_module("freetype2"):
		raise RenderingUnavailable("Pillow was built without FreeType support")
	path = find_font_path(font_path)
	cache_key = (str(path) if path else "", size)
	if cache_key in _font_cache:
		return _font_cache[cache_key]
	font: FontType | None = None
	if path is not None:
		try:
			font = PIL.ImageFont.truetype(str(path), size)
		except OSError as error:
			print(f"Font load failed for {path}: {error}")
	else:
		print(f"Font '{DEFAULT_FONT_FAMILY}' not found, using the built-in font")
	if font is None:
		font = PIL.ImageFont.load_default(size=size)
	_font_cache[cache_key] = font
	return font


#============================================
def clear_font_cache() -> None:
	"""
	Forget loaded fonts.
	"""
	_font_cache.clear()


#============================================
def rasterize_name(
	text: str,
	font_size: float,
	color: str = DEFAULT_COLOR,
	font_path: str | None = None,
) -> GlyphImage:
	"""
	Render a name as a transparent PNG.

	The text is drawn at twice the font size and the reported size is
	halved, so the image lands on the page at font size scale with extra
	pixel density.

	Args:
		text: Name to draw.
		font_size: Font size in page points.
		color: Fill color "#RRGGBB".
		font_path: Optional explicit font path.

	Returns:
		GlyphImage with PNG bytes and logical width/height.
	"""
	# drawn on one line, like a canvas fillText
	text = LINE_BREAK_PATTERN.sub(" ", text)
	font = load_name_font(font_size * GLYPH_OVERSAMPLE, font_path)
	measured_width = font.getlength(text)
	padding = font_size * GLYPH_PADDING_FACTOR
	surface_width = max(1, int(measured_width + padding * 2))
	surface_height = max(1, int(font_size * GLYPH_HEIGHT_FACTOR))

	try:
		image = PIL.Image.new("RGBA", (surface_width, surface_height), (0, 0, 0, 0))
		draw = PIL.ImageDraw.Draw(image)
	except MemoryError as error:
		raise ValueError(f"Name too large, cannot allocate a {surface_width}x{surface_height} surface") from error

	draw.text(
		(surface_width / 2.0, surface_height / 2.0),
		text,
		fill=color,
		font=font,
		anchor="mm",
	)

	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	return GlyphImage(
		data=buffer.getvalue(),
		width=surface_width / GLYPH_OVERSAMPLE,
		height=surface_height / GLYPH_OVERSAMPLE,
	)
