"""
Shared configuration and constants.
"""

import dataclasses
import re


DEFAULT_X = 421.0
DEFAULT_Y = 285.0
DEFAULT_FONT_SIZE = 65.0
DEFAULT_COLOR = "#FFFFFF"
DEFAULT_FONT_FAMILY = "Great Vibes"

GLYPH_OVERSAMPLE = 2
GLYPH_PADDING_FACTOR = 0.5
GLYPH_HEIGHT_FACTOR = 3

FONT_PATH_ENV = "CERTIFICATE_FONT_PATH"
FONT_SEARCH_PATHS = (
	"fonts/GreatVibes-Regular.ttf",
	"~/.fonts/GreatVibes-Regular.ttf",
	"~/.local/share/fonts/GreatVibes-Regular.ttf",
	"/usr/share/fonts/truetype/great-vibes/GreatVibes-Regular.ttf",
	"/usr/share/fonts/TTF/GreatVibes-Regular.ttf",
	"/Library/Fonts/GreatVibes-Regular.ttf",
)

PREVIEW_SCALE = 1.5
PREVIEW_JPEG_QUALITY = 80
SUGGESTION_TIMEOUT = 30.0

NAME_HEADERS = ("nome", "Nome", "name", "Name")
ENTRY_NUMBER_WIDTH = 3
PROGRESS_BAR_WIDTH = 20

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclasses.dataclass
class Participant:
	name: str
	extra: dict[str, object] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
	x: float
	y: float
	font_size: float
	color: str = DEFAULT_COLOR
	font_family: str = DEFAULT_FONT_FAMILY

	def validate(self) -> None:
		"""
		Check the invariants of a layout.

		Placement is not checked against page bounds; an off-page name is
		a valid if visually wrong result.
		"""
		if not self.font_size > 0:
			raise ValueError(f"Font size must be positive: {self.font_size}")
		if not HEX_COLOR_PATTERN.match(self.color or ""):
			raise ValueError(f"Color must be #RRGGBB: {self.color!r}")


@dataclasses.dataclass
class GlyphImage:
	data: bytes
	width: float
	height: float


@dataclasses.dataclass
class GenerationProgress:
	total: int = 0
	current: int = 0
	status: str = ""
	skipped: list[str] = dataclasses.field(default_factory=list)

	def reset(self, total: int = 0) -> None:
		self.total = total
		self.current = 0
		self.status = ""
		self.skipped = []

	@property
	def percent(self) -> float:
		if self.total <= 0:
			return 0.0
		return self.current / self.total * 100.0


@dataclasses.dataclass
class ArchiveEntry:
	file_name: str
	content: bytes


#============================================
def default_layout() -> LayoutConfig:
	"""
	Build the fixed centered layout used when no suggestion is available.

	Returns:
		LayoutConfig.
	"""
	return LayoutConfig(
		x=DEFAULT_X,
		y=DEFAULT_Y,
		font_size=DEFAULT_FONT_SIZE,
		color=DEFAULT_COLOR,
		font_family=DEFAULT_FONT_FAMILY,
	)
