"""
Resolve where and how large the name is drawn on the template.
"""

# Standard Library
import base64
import collections.abc
import dataclasses
import io
import json
import math
import numbers
import subprocess
import typing

# PIP3 modules
import fitz
import PIL.Image

# local repo modules
import certificate_batch as cb
import certificate_batch.config
import certificate_batch.errors


LayoutConfig = cb.config.LayoutConfig
LayoutSuggestionFailed = cb.errors.LayoutSuggestionFailed
default_layout = cb.config.default_layout

DEFAULT_X = cb.config.DEFAULT_X
DEFAULT_Y = cb.config.DEFAULT_Y
DEFAULT_FONT_SIZE = cb.config.DEFAULT_FONT_SIZE
DEFAULT_COLOR = cb.config.DEFAULT_COLOR
DEFAULT_FONT_FAMILY = cb.config.DEFAULT_FONT_FAMILY
PREVIEW_SCALE = cb.config.PREVIEW_SCALE
PREVIEW_JPEG_QUALITY = cb.config.PREVIEW_JPEG_QUALITY
SUGGESTION_TIMEOUT = cb.config.SUGGESTION_TIMEOUT

Suggester = typing.Callable[[str], typing.Mapping[str, object]]


#============================================
def render_template_preview(template_bytes: bytes, scale: float = PREVIEW_SCALE) -> PIL.Image.Image:
	"""
	Render the first template page to an image.

	Args:
		template_bytes: Template PDF bytes.
		scale: Zoom factor over 72 dpi.

	Returns:
		PIL image.
	"""
	document = fitz.open(stream=bytes(template_bytes), filetype="pdf")
	try:
		page = document[0]
		matrix = fitz.Matrix(scale, scale)
		pixmap = page.get_pixmap(matrix=matrix, alpha=False)
		image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	finally:
		document.close()
	return image


#============================================
def encode_preview_jpeg(image: PIL.Image.Image, quality: int = PREVIEW_JPEG_QUALITY) -> str:
	"""
	Encode a preview image as base64 JPEG text.

	Args:
		image: Preview image.
		quality: JPEG quality.

	Returns:
		Base64 string without a data URL prefix.
	"""
	buffer = io.BytesIO()
	image.convert("RGB").save(buffer, format="JPEG", quality=quality)
	return base64.b64encode(buffer.getvalue()).decode("ascii")


#============================================
def _number_or_default(payload: typing.Mapping[str, object], key: str, default_value: float) -> float:
	value = payload.get(key)
	if value is None or value == "":
		return default_value
	if isinstance(value, bool) or not isinstance(value, (numbers.Real, str)):
		raise LayoutSuggestionFailed(f"Field '{key}' is not a number: {value!r}")
	try:
		number = float(value)
	except ValueError as error:
		raise LayoutSuggestionFailed(f"Field '{key}' is not a number: {value!r}") from error
	if math.isnan(number) or math.isinf(number):
		raise LayoutSuggestionFailed(f"Field '{key}' is not finite")
	# zero means "no answer" and falls back like a missing field
	if number == 0:
		return default_value
	return number


#============================================
def coerce_suggestion(payload: typing.Mapping[str, object] | None) -> LayoutConfig:
	"""
	Turn a suggestion payload into a layout.

	Color and font family are always replaced by the house values; only
	the geometry and size come from the suggestion.

	Args:
		payload: Decoded suggestion with x, y, fontSize.

	Returns:
		LayoutConfig.
	"""
	if not payload:
		raise LayoutSuggestionFailed("Empty layout suggestion")
	if not isinstance(payload, collections.abc.Mapping):
		raise LayoutSuggestionFailed(f"Layout suggestion is not an object: {type(payload).__name__}")
	font_size = _number_or_default(payload, "fontSize", DEFAULT_FONT_SIZE)
	if font_size < 0:
		font_size = DEFAULT_FONT_SIZE
	return LayoutConfig(
		x=_number_or_default(payload, "x", DEFAULT_X),
		y=_number_or_default(payload, "y", DEFAULT_Y),
		font_size=font_size,
		color=DEFAULT_COLOR,
		font_family=DEFAULT_FONT_FAMILY,
	)


#============================================
def build_command_suggester(command: list[str], timeout: float = SUGGESTION_TIMEOUT) -> Suggester:
	"""
	Wrap an external command as a layout suggester.

	The command gets the base64 JPEG preview on stdin and must print a
	JSON object with x, y, fontSize, color and fontFamily.

	Args:
		command: Command and arguments.
		timeout: Seconds before the command is abandoned.

	Returns:
		Suggester callable.
	"""
	def suggest(preview_base64: str) -> typing.Mapping[str, object]:
		try:
			result = subprocess.run(
				command,
				input=preview_base64,
				capture_output=True,
				text=True,
				timeout=timeout,
				check=False,
			)
		except subprocess.TimeoutExpired as error:
			raise LayoutSuggestionFailed(f"Layout suggestion timed out after {timeout}s") from error
		except OSError as error:
			raise LayoutSuggestionFailed(f"Layout suggestion command failed: {error}") from error
		if result.returncode != 0:
			message = result.stderr.strip() or f"exit code {result.returncode}"
			raise LayoutSuggestionFailed(f"Layout suggestion command failed: {message}")
		text = result.stdout.strip()
		if not text:
			raise LayoutSuggestionFailed("Empty layout suggestion")
		try:
			return json.loads(text)
		except json.JSONDecodeError as error:
			raise LayoutSuggestionFailed(f"Layout suggestion is not JSON: {error}") from error

	return suggest


#============================================
def resolve_layout(
	template_bytes: bytes | None = None,
	suggester: Suggester | None = None,
) -> LayoutConfig:
	"""
	Resolve the layout for a run, falling back to the fixed default.

	Never raises; any suggestion failure is reported and replaced by the
	default layout.

	Args:
		template_bytes: Template PDF bytes for the preview.
		suggester: Optional layout suggestion service.

	Returns:
		LayoutConfig.
	"""
	if suggester is None or template_bytes is None:
		return default_layout()
	try:
		preview = encode_preview_jpeg(render_template_preview(template_bytes))
		return coerce_suggestion(suggester(preview))
	# the suggester is third-party code, so any failure means "no suggestion"
	except Exception as error:
		print(f"Layout analysis failed, using default layout: {error}")
		return default_layout()


#============================================
def adjust_layout(
	config: LayoutConfig,
	x: float | None = None,
	y: float | None = None,
	font_size: float | None = None,
) -> LayoutConfig:
	"""
	Apply user adjustments before a run starts.

	Args:
		config: Resolved layout.
		x: Optional x override.
		y: Optional y override.
		font_size: Optional font size override.

	Returns:
		New LayoutConfig.
	"""
	changes: dict[str, float] = {}
	if x is not None:
		changes["x"] = x
	if y is not None:
		changes["y"] = y
	if font_size is not None:
		changes["font_size"] = font_size
	adjusted = dataclasses.replace(config, **changes)
	adjusted.validate()
	return adjusted
