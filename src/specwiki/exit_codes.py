"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specwiki.exceptions.SpecwikiError` subclass.
Shell wrappers can inspect the exit code to tell a malformed document from
an unreadable one without parsing stderr.

Example::

    $ specwiki convert --in broken.yml
    $ echo $?
    7   # EXIT_DOCUMENT_ERROR -- the document could not be parsed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_DOCUMENT_ERROR = 7
"""The source document could not be parsed."""

EXIT_SHAPE_ERROR = 8
"""A recognised key in the source document holds the wrong kind of value."""

EXIT_IO_ERROR = 9
"""The source document could not be read or the output could not be written."""
