"""
Kaleido Error Hierarchy
=======================

This module defines the exception hierarchy for the Kaleido front end.
All exceptions inherit from KaleidoError, allowing callers to catch all
front-end errors with a single except clause if desired.

Exception Hierarchy
-------------------
KaleidoError (base)
├── KSyntaxError - lexer/parser syntax errors
├── ConfigError - invalid front-end configuration
├── ParserStateError - parser used before its lookahead was primed
└── KaleidoCompilationError - aggregate report of collected errors

Error Message Format
--------------------
Syntax errors carry source location information and follow this format:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing

Example:
    <stdin>:1:5: error: expected ')'
        (1+2
            ^
"""

from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class KaleidoError(Exception):
    """
    Base exception for all Kaleido front-end errors.

        try:
            parse_definition_source("def f(x) x*2").unwrap()
        except KaleidoError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Syntax Errors
# =============================================================================

class KSyntaxError(KaleidoError):
    """
    Syntax error detected by the parser.

    The message is the fixed, human-readable description of the construct
    that was expected (e.g. "expected ')'"). Formatting with location,
    source context and hint only affects str(error); the raw text stays
    available as `message`.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            <stdin>:2:7: error: Expected ')' or ',' in argument list
                foo(1 2)
                      ^
        """
        parts = []

        # Location prefix
        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class KaleidoCompilationError(KaleidoError):
    """
    Aggregate error wrapping a pre-formatted report from ErrorCollector.
    """

    def __init__(self, report: str, errors: Optional[List[KaleidoError]] = None):
        self.report = report
        self.errors = errors or []
        super().__init__(report)

    @property
    def summary(self) -> str:
        """The closing count line of the report (e.g. "2 errors")."""
        return self.report.splitlines()[-1]


# =============================================================================
# Usage Errors
# =============================================================================

class ConfigError(KaleidoError):
    """
    Invalid front-end configuration.

    Raised when a FrontendConfig is built with an unusable precedence
    table or anonymous function name.
    """

    def __init__(self, setting: str, reason: str):
        self.setting = setting
        self.reason = reason
        super().__init__(f"invalid configuration for '{setting}': {reason}")


class ParserStateError(KaleidoError):
    """Parser entry point called before prime() fetched the first token."""
    pass


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects syntax errors for batch reporting.

    The driver keeps parsing after a failed construct, so it uses this
    to report every error found in the input rather than just the first.

    Example:
        collector = ErrorCollector()
        result = parser.parse_definition()
        if not result.ok:
            collector.add(result.error)

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self):
        self.errors: List[KaleidoError] = []

    def add(self, error: KaleidoError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display, followed by a summary line."""
        lines = []
        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")
        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise a KaleidoCompilationError if any errors were collected."""
        if self.has_errors():
            raise KaleidoCompilationError(self.report(), list(self.errors))
