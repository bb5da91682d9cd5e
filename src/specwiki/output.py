"""Terminal output for the specwiki CLI.

Rendered markup, inspect tables and config dumps are the program's product
and go to **stdout**. Progress notes and errors go to **stderr**, so that
``specwiki convert doc.yml - > page.txt`` captures nothing but the page.

Whether stdout gets Rich styling depends on :class:`OutputFormat`: ``AUTO``
picks Rich for an interactive terminal and plain text for a pipe. Colour is
off when ``--no-color`` is given, ``NO_COLOR`` is set or ``TERM=dumb``.

Commands talk to one shared :class:`OutputManager`, installed by
:func:`~specwiki.app.main_callback` with :func:`set_output` and reached
through the module functions at the bottom of this file.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How data written to stdout is presented."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def color_disabled() -> bool:
    """True when the environment asks for no colour (``NO_COLOR`` or ``TERM=dumb``)."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _stdout_is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


class OutputManager:
    """Writes data to stdout and diagnostics to stderr.

    Args:
        format: Requested presentation of stdout data.
        no_color: Force colour off regardless of the environment.
        quiet: Drop informational and success notes. Errors still print.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
    ) -> None:
        self._colorless = no_color or color_disabled()
        self._quiet = quiet
        if format != OutputFormat.AUTO:
            self._format = format
        elif _stdout_is_tty() and not self._colorless:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._colorless,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, no_color=self._colorless, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def stderr_console(self) -> Console:
        """Console for diagnostics; the logging handler writes here too."""
        return self._stderr

    # stdout

    def print_data(self, text: str) -> None:
        """Write *text* to stdout as is, ending it with a newline if it lacks one."""
        sys.stdout.write(text if text.endswith("\n") else text + "\n")
        sys.stdout.flush()

    def format_response(self, data: Any) -> None:
        """Write a dict or list to stdout.

        JSON mode writes indented JSON, Rich mode the same JSON highlighted.
        Plain mode writes one ``key<TAB>value`` line per dict entry, or one
        line per list item.
        """
        if self._format == OutputFormat.PLAIN:
            if isinstance(data, dict):
                lines = [f"{key}\t{value}" for key, value in data.items()]
            elif isinstance(data, list):
                lines = [str(item) for item in data]
            else:
                lines = [str(data)]
            for line in lines:
                self.print_data(line)
            return

        dumped = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(dumped)
        else:
            self._stdout.print(Syntax(dumped, "json", theme="monokai", word_wrap=True))

    def print_table(self, headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
        """Write rows to stdout.

        JSON mode emits a list of objects keyed by *headers*; plain mode
        emits tab-separated lines with a header line first. *title* is only
        shown by the Rich table.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps([dict(zip(headers, row)) for row in rows], indent=2, ensure_ascii=False))
            return
        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(*headers, title=title, header_style="bold cyan")
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # stderr

    def info(self, message: str) -> None:
        if not self._quiet:
            self._note(message, "", "")

    def success(self, message: str) -> None:
        if not self._quiet:
            self._note(message, "", "green")

    def error(self, message: str) -> None:
        """Report a failure. Printed even in quiet mode."""
        self._note(message, "Error: ", "bold red")

    def _note(self, message: str, label: str, style: str) -> None:
        if self._colorless:
            print(label + message, file=sys.stderr, flush=True)
            return
        text = escape(message)
        if style and label:
            text = f"[{style}]{escape(label)}[/{style}]{text}"
        elif style:
            text = f"[{style}]{text}[/{style}]"
        self._stderr.print(text, highlight=False)


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the shared manager, creating an ``AUTO`` one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the shared manager (tests call this between cases)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)
