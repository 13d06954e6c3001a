"""
Participant name cleanup and archive file naming.
"""

# Standard Library
import re
import unicodedata

# local repo modules
import certificate_batch as cb
import certificate_batch.config


ENTRY_NUMBER_WIDTH = cb.config.ENTRY_NUMBER_WIDTH

INVISIBLE_CHARS_PATTERN = re.compile("[\u200b-\u200d\ufeff]")
UNSAFE_FILE_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9]")


#============================================
def sanitize_name(raw: object) -> str:
	"""
	Clean a raw name value into a display string.

	Spreadsheet cells are untyped, so any value is accepted.

	Args:
		raw: Cell value or text line.

	Returns:
		Name without zero-width characters or surrounding whitespace.
	"""
	if raw is None:
		return ""
	text = str(raw)
	text = INVISIBLE_CHARS_PATTERN.sub("", text)
	return text.strip()


#============================================
def strip_diacritics(value: str) -> str:
	"""
	Drop combining marks after canonical decomposition.

	Args:
		value: Input text.

	Returns:
		Text without accents.
	"""
	decomposed = unicodedata.normalize("NFD", value)
	return "".join(char for char in decomposed if not unicodedata.combining(char))


#============================================
def safe_file_stem(name: str) -> str:
	"""
	Turn a name into a file name stem of [a-zA-Z0-9_] only.

	Args:
		name: Participant name.

	Returns:
		File name stem.
	"""
	return UNSAFE_FILE_CHARS_PATTERN.sub("_", strip_diacritics(name))


#============================================
def build_entry_name(index: int, name: str) -> str:
	"""
	Build the archive entry name for a certificate.

	Args:
		index: 1-based position in the participant list.
		name: Participant name.

	Returns:
		Name like "001_Joao_da_Silva.pdf".
	"""
	return f"{index:0{ENTRY_NUMBER_WIDTH}d}_{safe_file_stem(name)}.pdf"
