"""Application constants."""

USER_AGENT = "account-merge/1.0"
DELIMITER = ","
QUOTE = '"'
INBOUND_HEADER_PREFIX = "account id,account name,first name,created on"
OUTBOUND_HEADER = "Account ID,First Name,Created On,Status,Status Set On"
MIN_RECORD_FIELDS = 4
BYTES_PER_MEGABYTE = 1024 * 1024
DEFAULT_ENCODING = "utf-8"
SUPPORTED_ENCODINGS = {
    "UTF-8": "utf-8",
    "UTF-16": "utf-16",
    "UTF-16LE": "utf-16-le",
    "UTF-16BE": "utf-16-be",
    "US-ASCII": "ascii",
    "ISO-8859-1": "latin-1",
}
EXIT_SUCCESS = 0
EXIT_USAGE = 2
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "worker",
    "event",
    "status",
    "line_number",
    "rows_in",
    "rows_out",
    "error_code",
    "duration_ms",
    "message",
)
