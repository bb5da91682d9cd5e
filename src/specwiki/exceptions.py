"""Exception hierarchy for specwiki.

All exceptions inherit from :class:`SpecwikiError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specwiki.exit_codes`.
The top-level error handler in :func:`specwiki.app.main` catches
``SpecwikiError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Unresolved schema references are *not* errors: they are left in the model
as bare names and render as empty tables.

Subclass hierarchy::

    SpecwikiError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- DocumentError       (exit 7)
    |   +-- ShapeError      (exit 8)
    +-- DocumentReadError   (exit 9)
    +-- OutputWriteError    (exit 9)
    +-- ConfigError         (exit 1)
"""

from specwiki.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_SHAPE_ERROR,
)


class SpecwikiError(Exception):
    """Base exception for all specwiki errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specwiki.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecwikiError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class DocumentError(SpecwikiError):
    """Raised when the source document is malformed, empty, or not a mapping."""

    exit_code = EXIT_DOCUMENT_ERROR


class ShapeError(DocumentError):
    """Raised when a recognised key holds a value of the wrong node kind.

    For example a ``required`` entry that is a mapping instead of a list.
    The message names the dotted location of the offending node.
    """

    exit_code = EXIT_SHAPE_ERROR


class DocumentReadError(SpecwikiError):
    """Raised when the source document cannot be read (file, URL, or stdin)."""

    exit_code = EXIT_IO_ERROR


class OutputWriteError(SpecwikiError):
    """Raised when the rendered markup cannot be written to its destination."""

    exit_code = EXIT_IO_ERROR


class ConfigError(SpecwikiError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
