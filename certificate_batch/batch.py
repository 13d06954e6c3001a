"""
Batch generation of certificates into a ZIP archive.
"""

# Standard Library
import io
import typing
import zipfile

# local repo modules
import certificate_batch as cb
import certificate_batch.compose
import certificate_batch.config
import certificate_batch.errors
import certificate_batch.glyph
import certificate_batch.names


Participant = cb.config.Participant
LayoutConfig = cb.config.LayoutConfig
GenerationProgress = cb.config.GenerationProgress
ArchiveEntry = cb.config.ArchiveEntry
CompositionError = cb.errors.CompositionError
RenderingUnavailable = cb.errors.RenderingUnavailable
EmptyParticipantList = cb.errors.EmptyParticipantList
BatchGenerationFailed = cb.errors.BatchGenerationFailed

DEFAULT_COLOR = cb.config.DEFAULT_COLOR
PROGRESS_BAR_WIDTH = cb.config.PROGRESS_BAR_WIDTH

# failures that only cost the current participant its certificate
ITEM_ERRORS = (CompositionError, OSError, ValueError)

ProgressCallback = typing.Callable[[int], None]


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def generate_entry(
	index: int,
	participant: Participant,
	template_bytes: bytes,
	config: LayoutConfig,
	font_path: str | None = None,
) -> ArchiveEntry:
	"""
	Generate the certificate for one participant.

	Args:
		index: 1-based position in the participant list.
		participant: Participant to stamp.
		template_bytes: Template PDF bytes.
		config: Layout for the run.
		font_path: Optional explicit font path.

	Returns:
		ArchiveEntry.
	"""
	glyph = cb.glyph.rasterize_name(
		participant.name,
		config.font_size,
		config.color or DEFAULT_COLOR,
		font_path=font_path,
	)
	content = cb.compose.compose_certificate(template_bytes, glyph, config.y)
	return ArchiveEntry(
		file_name=cb.names.build_entry_name(index, participant.name),
		content=content,
	)


#============================================
def generate_batch(
	template_bytes: bytes,
	participants: list[Participant],
	config: LayoutConfig,
	on_progress: ProgressCallback | None = None,
	progress: GenerationProgress | None = None,
	font_path: str | None = None,
) -> bytes:
	"""
	Generate one certificate per participant and pack them into a ZIP.

	Participants are processed one at a time in list order. A participant
	whose certificate fails is reported and skipped. on_progress is called
	once per participant, skipped or not, after its entry is settled.

	Args:
		template_bytes: Template PDF bytes, never modified.
		participants: Ordered participants.
		config: Layout for the run, fixed for its duration.
		on_progress: Called with the 1-based count of attempted participants.
		progress: Optional progress state updated in place.
		font_path: Optional explicit font path.

	Returns:
		ZIP archive bytes, possibly with no entries.
	"""
	if not participants:
		raise EmptyParticipantList("No participants to generate certificates for.")
	config.validate()
	total = len(participants)
	if progress is not None:
		progress.reset(total)

	buffer = io.BytesIO()
	try:
		with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
			for index, participant in enumerate(participants, start=1):
				try:
					entry = generate_entry(index, participant, template_bytes, config, font_path)
				except ITEM_ERRORS as error:
					entry = None
					message = f"Skipped {index:03d} '{participant.name}': {error}"
					print(message)
					if progress is not None:
						progress.skipped.append(message)
				if entry is not None:
					archive.writestr(entry.file_name, entry.content)
				if progress is not None:
					progress.current = index
					progress.status = f"Generating certificate {index} of {total}"
				if on_progress is not None:
					on_progress(index)
	except RenderingUnavailable as error:
		raise BatchGenerationFailed(f"Rendering unavailable: {error}") from error
	except (zipfile.LargeZipFile, OSError, ValueError) as error:
		raise BatchGenerationFailed(f"Could not write archive: {error}") from error

	if progress is not None:
		done = total - len(progress.skipped)
		progress.status = f"Generated {done} of {total} certificates"
	return buffer.getvalue()
