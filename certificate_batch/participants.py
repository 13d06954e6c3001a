"""
Participant list import from spreadsheets and plain text.
"""

# Standard Library
import csv
import io
import pathlib
import zipfile

# PIP3 modules
import openpyxl
import openpyxl.utils.exceptions

# local repo modules
import certificate_batch as cb
import certificate_batch.config
import certificate_batch.errors
import certificate_batch.names


Participant = cb.config.Participant
NAME_HEADERS = cb.config.NAME_HEADERS
SpreadsheetParseError = cb.errors.SpreadsheetParseError
EmptyParticipantList = cb.errors.EmptyParticipantList
sanitize_name = cb.names.sanitize_name

SPREADSHEET_SUFFIXES = (".xlsx", ".xlsm")
CSV_SUFFIXES = (".csv",)
TEXT_SUFFIXES = (".txt",)


#============================================
def is_empty_cell(value: object) -> bool:
	"""
	Check whether a cell value counts as empty.

	Args:
		value: Cell value.

	Returns:
		True for None and blank strings.
	"""
	if value is None:
		return True
	if isinstance(value, str) and not value.strip():
		return True
	return False


#============================================
def pick_name_value(row: dict[str, object]) -> object:
	"""
	Pick the raw name value from a row.

	The first non-empty column among the known name headers wins, else
	the first non-empty cell of the row.

	Args:
		row: Row keyed by header.

	Returns:
		Raw cell value or None.
	"""
	for header in NAME_HEADERS:
		value = row.get(header)
		if not is_empty_cell(value):
			return value
	for value in row.values():
		if not is_empty_cell(value):
			return value
	return None


#============================================
def build_participants(rows: list[dict[str, object]]) -> list[Participant]:
	"""
	Turn header-keyed rows into participants.

	Args:
		rows: Rows keyed by header.

	Returns:
		Participants with non-empty names, in row order.
	"""
	participants: list[Participant] = []
	for row in rows:
		name = sanitize_name(pick_name_value(row))
		if not name:
			continue
		participants.append(Participant(name=name, extra=dict(row)))
	return participants


#============================================
def rows_from_table(table: list[tuple[object, ...]]) -> list[dict[str, object]]:
	"""
	Key table rows by the header row, skipping blank rows.

	Args:
		table: Raw rows, header first.

	Returns:
		List of row dictionaries.
	"""
	if not table:
		return []
	headers: list[str] = []
	for index, cell in enumerate(table[0]):
		header = sanitize_name(cell)
		if not header:
			header = f"column_{index + 1}"
		headers.append(header)
	rows: list[dict[str, object]] = []
	for raw_row in table[1:]:
		row = {
			headers[index]: value
			for index, value in enumerate(raw_row)
			if index < len(headers) and not is_empty_cell(value)
		}
		if row:
			rows.append(row)
	return rows


#============================================
def parse_xlsx(data: bytes) -> list[Participant]:
	"""
	Read participants from the first sheet of an Excel workbook.

	Args:
		data: Workbook bytes.

	Returns:
		Participants.
	"""
	try:
		workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
		try:
			worksheet = workbook.worksheets[0]
			table = [tuple(row) for row in worksheet.iter_rows(values_only=True)]
		finally:
			workbook.close()
	except (
		openpyxl.utils.exceptions.InvalidFileException,
		zipfile.BadZipFile,
		IndexError,
		KeyError,
		OSError,
		ValueError,
	) as error:
		raise SpreadsheetParseError(f"Could not read spreadsheet: {error}") from error
	return build_participants(rows_from_table(table))


#============================================
def parse_csv(data: bytes) -> list[Participant]:
	"""
	Read participants from CSV bytes with a header row.

	Args:
		data: CSV bytes, UTF-8 with or without BOM.

	Returns:
		Participants.
	"""
	try:
		text = data.decode("utf-8-sig")
	except UnicodeDecodeError as error:
		raise SpreadsheetParseError(f"CSV is not UTF-8: {error}") from error
	sample = text[:4096]
	try:
		dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
	except csv.Error:
		dialect = csv.excel
	try:
		table = [tuple(row) for row in csv.reader(io.StringIO(text), dialect)]
	except csv.Error as error:
		raise SpreadsheetParseError(f"Could not read CSV: {error}") from error
	return build_participants(rows_from_table(table))


#============================================
def parse_name_lines(text: str) -> list[Participant]:
	"""
	Read one participant per line from manually entered text.

	Args:
		text: Newline-delimited names.

	Returns:
		Participants.
	"""
	participants: list[Participant] = []
	for line in text.splitlines():
		name = sanitize_name(line)
		if name:
			participants.append(Participant(name=name))
	return participants


#============================================
def require_participants(participants: list[Participant]) -> list[Participant]:
	"""
	Reject a participant list with nobody in it.

	Args:
		participants: Parsed participants.

	Returns:
		The same list.
	"""
	if not participants:
		raise EmptyParticipantList("No participants found in the list.")
	return participants


#============================================
def load_participants(path: pathlib.Path) -> list[Participant]:
	"""
	Load participants from a spreadsheet, CSV or text file.

	Args:
		path: Participant list path.

	Returns:
		Non-empty participant list.
	"""
	suffix = path.suffix.lower()
	try:
		data = path.read_bytes()
	except OSError as error:
		raise SpreadsheetParseError(f"Could not open {path}: {error}") from error
	if suffix in SPREADSHEET_SUFFIXES:
		participants = parse_xlsx(data)
	elif suffix in CSV_SUFFIXES:
		participants = parse_csv(data)
	elif suffix in TEXT_SUFFIXES:
		try:
			participants = parse_name_lines(data.decode("utf-8-sig"))
		except UnicodeDecodeError as error:
			raise SpreadsheetParseError(f"Text list is not UTF-8: {error}") from error
	else:
		raise SpreadsheetParseError(f"Unsupported participant list format: {path.suffix}")
	return require_participants(participants)
