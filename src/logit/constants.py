"""
Library-wide constants for logit.

Defaults used by the configuration models and the sink implementations.
"""

# File size constants (bytes)
BYTES_PER_MB = 1024 * 1024

# Rotation defaults
DEFAULT_MAX_FILE_SIZE_BYTES = 100 * BYTES_PER_MB
MIN_MAX_FILE_SIZE_BYTES = 1
DEFAULT_MAX_BACKUPS = 10
DEFAULT_ROTATION_INTERVAL = "24h"
DEFAULT_LOG_DIRECTORY = "logs"
LOG_FILE_EXTENSION = ".log"
COMPRESSED_EXTENSION = ".gz"
LOG_FILE_DATE_FORMAT = "%Y-%m-%d"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%f"

# Console rendering
DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Crash reporting
DEFAULT_REPORT_TIMEOUT_SECONDS = 2.0
DEFAULT_ESCALATION_QUEUE_SIZE = 1000
DEFAULT_FLUSH_TIMEOUT_SECONDS = 5.0
MAX_REPORT_TIMEOUT_SECONDS = 30.0

# Process exit status used by fatal()
FATAL_EXIT_CODE = 1
