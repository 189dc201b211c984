"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InputFileError(PipelineError):
    """Raised when the inbound file fails its pre-flight checks."""

    error_code = "INPUT_FILE_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that halt the whole run."""

    error_code = "STAGE_ERROR"


class FatalIOError(StageError):
    """Raised when opening, reading or writing a data file fails."""

    error_code = "FATAL_IO"


class PipelineAborted(StageError):
    """Raised inside a stage when the run has been cancelled."""

    error_code = "PIPELINE_ABORTED"


class RecordError(PipelineError):
    """Base class for failures isolated to a single input line."""

    error_code = "RECORD_ERROR"


class MalformedLineError(RecordError):
    """Raised when a line cannot be split into an account record."""

    error_code = "MALFORMED_LINE"


class InvalidIdentifierError(RecordError):
    """Raised when an account id is not a positive integer."""

    error_code = "INVALID_IDENTIFIER"


class EnrichmentError(PipelineError):
    """Base class for status lookup failures."""

    error_code = "ENRICHMENT_FAILURE"


class InvalidInputError(EnrichmentError):
    """Raised when a record cannot be looked up at all."""

    error_code = "INVALID_INPUT"


class RemoteFailureError(EnrichmentError):
    """Raised for transport failures and unusable remote responses."""

    error_code = "REMOTE_FAILURE"
