"""Text rendering of the canonical result tree.

`Printer` is a `ResultVisitor`: it receives the collector's pre-order walk and
delegates each line to a `PrintFormat`. `SimplePrintFormat` writes the plain
report::

    - RootSpec [FAIL]
        Expected '20' but was '10'
      - Child A
      - Child B

    3 specs, 1 failures

Spec lines are indented two spaces per nesting level. Failure messages use the
owning spec's indent plus a fixed four spaces. A non-empty tree is separated
from the summary by one empty line; an empty collector prints only the summary.
Write errors from the sink propagate unchanged.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import List, TextIO

from nestspec.results.collector import ResultCollector

INDENT = "  "
ERROR_OFFSET = "    "
FAIL_MARKER = " [FAIL]"


class PrintFormat(ABC):
    """Line-level output contract used by `Printer`."""

    @abstractmethod
    def print_spec(self, depth: int, name: str, failed: bool) -> None:
        """Emit the line for one spec."""

    @abstractmethod
    def print_error(self, depth: int, message: str) -> None:
        """Emit one failure message belonging to the spec at `depth`."""

    @abstractmethod
    def print_summary(self, total_specs: int, total_failures: int) -> None:
        """Emit the closing summary."""


class SimplePrintFormat(PrintFormat):
    """Plain-text report written to a text stream."""

    def __init__(self, out: TextIO) -> None:
        self._out = out
        self._has_specs = False

    def print_spec(self, depth: int, name: str, failed: bool) -> None:
        self._has_specs = True
        marker = FAIL_MARKER if failed else ""
        self._out.write(f"{INDENT * depth}- {name}{marker}\n")

    def print_error(self, depth: int, message: str) -> None:
        self._out.write(f"{INDENT * depth}{ERROR_OFFSET}{message}\n")

    def print_summary(self, total_specs: int, total_failures: int) -> None:
        if self._has_specs:
            self._out.write("\n")
        self._out.write(f"{total_specs} specs, {total_failures} failures\n")


class Printer:
    """Visitor that renders specs and their failures through a `PrintFormat`."""

    def __init__(self, print_format: PrintFormat) -> None:
        self._format = print_format

    def visit_spec(self, depth: int, name: str, errors: List[str]) -> None:
        self._format.print_spec(depth, name, bool(errors))
        for message in errors:
            self._format.print_error(depth, message)

    def visit_end(self, total_specs: int, total_failures: int) -> None:
        self._format.print_summary(total_specs, total_failures)


def render_report(results: ResultCollector) -> str:
    """Return the plain-text report for `results`."""
    out = io.StringIO()
    results.visit(Printer(SimplePrintFormat(out)))
    return out.getvalue()
