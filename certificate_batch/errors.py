"""
Error types raised by the certificate pipeline.
"""


class CertificateError(Exception):
	"""
	Base class for pipeline errors.
	"""


class RenderingUnavailable(CertificateError):
	"""
	No text drawing surface can be created in this environment.
	"""


class CompositionError(CertificateError):
	"""
	One certificate could not be built from the template.
	"""


class LayoutSuggestionFailed(CertificateError):
	"""
	The layout suggestion service failed or returned a bad payload.
	"""


class SpreadsheetParseError(CertificateError):
	"""
	The participant list could not be read.
	"""


class EmptyParticipantList(CertificateError):
	"""
	The participant list holds no usable names.
	"""


class BatchGenerationFailed(CertificateError):
	"""
	The whole batch had to stop.
	"""
