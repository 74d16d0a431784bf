# topmark:header:start
#
#   project      : DwtGuard
#   file         : exit_codes.py
#   file_relpath : src/dwtguard/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the DwtGuard CLI.

DwtGuard aligns with the BSD `sysexits` convention where practical, so that other
tooling can interpret failures consistently. ``WOULD_CHANGE = 2`` signals a dry
run in which files would be rewritten; Click also uses 2 for its own usage
errors, so tests assert ``result.exception is None`` to tell them apart.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the DwtGuard CLI.

    Attributes:
        SUCCESS: Successful execution with no findings.
        FAILURE: Generic failure, also used when ``check`` reports warnings or
            ``guard`` finds an edit to protected text.
        WOULD_CHANGE: Dry run: changes would be written if ``--apply`` were set.
        USAGE_ERROR: Command-line invocation error. Mirrors BSD ``EX_USAGE (64)``.
        ENCODING_ERROR: Text decoding error. Mirrors BSD ``EX_DATAERR (65)``.
        FILE_NOT_FOUND: Input file or declared template does not exist. Mirrors
            BSD ``EX_NOINPUT (66)``.
        UNSUPPORTED_FILE_TYPE: Document is not of the kind the command needs
            (e.g. not an instance). Mirrors BSD ``EX_UNAVAILABLE (69)``.
        PIPELINE_ERROR: Internal failure. Mirrors BSD ``EX_SOFTWARE (70)``.
        IO_ERROR: I/O error reading/writing a file. Mirrors BSD ``EX_IOERR (74)``.
        PERMISSION_DENIED: Insufficient permissions. Mirrors BSD ``EX_NOPERM (77)``.
        CONFIG_ERROR: Malformed or invalid configuration. Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last resort).
    """

    SUCCESS = 0
    FAILURE = 1
    WOULD_CHANGE = 2

    # sysexits-aligned values
    USAGE_ERROR = 64  # EX_USAGE
    ENCODING_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    UNSUPPORTED_FILE_TYPE = 69  # EX_UNAVAILABLE
    PIPELINE_ERROR = 70  # EX_SOFTWARE
    IO_ERROR = 74  # EX_IOERR
    PERMISSION_DENIED = 77  # EX_NOPERM
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
