"""
CLI entry points for batch certificate generation.
"""

# Standard Library
import argparse
import pathlib
import shlex
import time

# local repo modules
import certificate_batch as cb
import certificate_batch.batch
import certificate_batch.config
import certificate_batch.errors
import certificate_batch.layout
import certificate_batch.participants


GenerationProgress = cb.config.GenerationProgress
LayoutConfig = cb.config.LayoutConfig
CertificateError = cb.errors.CertificateError
Participant = cb.config.Participant

SUGGESTION_TIMEOUT = cb.config.SUGGESTION_TIMEOUT


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Stamp participant names onto a PDF certificate template.")
	parser.add_argument("template", help="Certificate template PDF.")
	parser.add_argument("participants", nargs="?", default=None, help="Participant list (.xlsx, .csv or .txt).")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("--names", dest="names", default=None, help="Newline-separated names, instead of a list file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output ZIP path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-x", "--x", dest="x", type=float, default=None, help="Name x position in points (informational).")
	layout_group.add_argument("-y", "--y", dest="y", type=float, default=None, help="Name vertical center in points.")
	layout_group.add_argument("-s", "--font-size", dest="font_size", type=float, default=None, help="Font size in points.")
	layout_group.add_argument("-f", "--font", dest="font_path", default=None, help="Path to the name font file.")

	suggest_group = parser.add_argument_group("Layout suggestion")
	suggest_group.add_argument(
		"--suggest-command",
		dest="suggest_command",
		default=None,
		help="Command that reads a base64 JPEG preview on stdin and prints a JSON layout.",
	)
	suggest_group.add_argument(
		"--suggest-timeout",
		dest="suggest_timeout",
		type=float,
		default=SUGGESTION_TIMEOUT,
		help="Seconds to wait for the suggestion command.",
	)

	args = parser.parse_args(argv)
	if args.participants is None and args.names is None:
		parser.error("either a participant list or --names is required")
	return args


#============================================
def load_participant_input(args: argparse.Namespace) -> list[Participant]:
	"""
	Load participants from the list file or the --names text.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Non-empty participant list.
	"""
	if args.names is not None:
		participants = cb.participants.parse_name_lines(args.names)
		return cb.participants.require_participants(participants)
	return cb.participants.load_participants(pathlib.Path(args.participants))


#============================================
def build_layout(args: argparse.Namespace, template_bytes: bytes) -> LayoutConfig:
	"""
	Resolve the layout and apply user adjustments.

	Args:
		args: Parsed argparse namespace.
		template_bytes: Template PDF bytes.

	Returns:
		LayoutConfig for the run.
	"""
	suggester = None
	if args.suggest_command:
		command = shlex.split(args.suggest_command)
		suggester = cb.layout.build_command_suggester(command, args.suggest_timeout)
	config = cb.layout.resolve_layout(template_bytes, suggester)
	return cb.layout.adjust_layout(config, x=args.x, y=args.y, font_size=args.font_size)


#============================================
def run_pipeline(args: argparse.Namespace) -> GenerationProgress:
	"""
	Run layout, participant loading and generation.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Final progress state.
	"""
	template_path = pathlib.Path(args.template)
	output_path = pathlib.Path(args.output_path)
	print("Certificate batch generation")
	print(f"Template: {template_path}")
	print(f"Output ZIP: {output_path}")

	try:
		template_bytes = template_path.read_bytes()
	except OSError as error:
		raise CertificateError(f"Could not read template {template_path}: {error}") from error

	start_time = time.perf_counter()
	participants = load_participant_input(args)
	print(f"Participants: {len(participants)}")

	config = build_layout(args, template_bytes)
	print(f"Layout: y={config.y:.1f} font_size={config.font_size:.1f} color={config.color} font={config.font_family}")

	progress = GenerationProgress()
	total = len(participants)
	print_progress = cb.batch.print_progress
	print_progress("Certificates", 0, total)
	generate_start = time.perf_counter()
	archive = cb.batch.generate_batch(
		template_bytes,
		participants,
		config,
		on_progress=lambda current: print_progress("Certificates", current, total),
		progress=progress,
		font_path=args.font_path,
	)
	generate_end = time.perf_counter()
	print()

	try:
		output_path.parent.mkdir(parents=True, exist_ok=True)
		output_path.write_bytes(archive)
	except OSError as error:
		raise CertificateError(f"Could not write archive {output_path}: {error}") from error

	print(progress.status)
	if progress.skipped:
		print(f"Skipped participants: {len(progress.skipped)}")
	total_time = time.perf_counter() - start_time
	print(
		"Timing: generate={:.2f}s total={:.2f}s".format(
			generate_end - generate_start,
			total_time,
		)
	)
	print(f"Archive written: {output_path}")
	return progress


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except CertificateError as error:
		print(f"Error: {error}")
		raise SystemExit(1) from error
	except ValueError as error:
		print(f"Invalid layout: {error}")
		raise SystemExit(1) from error
