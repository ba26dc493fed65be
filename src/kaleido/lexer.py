"""
Kaleido Lexer (Tokenizer)
=========================

This module implements a streaming lexer for the Kaleido language. It
pulls characters one at a time from a text source and turns them into
tokens on demand for the parser.

Token Categories
----------------
- Keywords: def, extern
- Identifiers: [a-zA-Z][a-zA-Z0-9]*
- Numbers: [0-9.]+ (converted with leading-prefix semantics, see below)
- Symbols: any other single character ( ) , ; + - * < ...

Comments
--------
'#' starts a comment that runs to the end of the line. Comments are
fully transparent: the lexer skips them and returns the next real token.

Number Conversion
-----------------
The scanner accepts any run of digits and '.', so malformed literals
such as "1.2.3" still form a single NUMBER token. The text is converted
the way C's strtod does: the longest valid numeric prefix wins and a
text with no valid prefix converts to 0.0.

| Text    | Value |
|---------|-------|
| 42      | 42.0  |
| 1.5     | 1.5   |
| .5      | 0.5   |
| 1.2.3   | 1.2   |
| .       | 0.0   |

Example Usage
-------------
>>> from kaleido.lexer import Lexer
>>> lexer = Lexer("def f(x) x+1", "test.k")
>>> for token in lexer.tokenize():
...     print(token)
Token(DEF, 'def', 1:1)
Token(IDENTIFIER, 'f', 1:5)
Token(SYMBOL, '(', 1:6)
Token(IDENTIFIER, 'x', 1:7)
Token(SYMBOL, ')', 1:8)
Token(IDENTIFIER, 'x', 1:10)
Token(SYMBOL, '+', 1:11)
Token(NUMBER, 1.0, 1:12)
Token(EOF, 1:13)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterator, TextIO
import io
import logging
import re
import string

from kaleido.errors import SourceLocation

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the Kaleido language.

    Everything that is not a keyword, identifier, number or end of input
    is a SYMBOL carrying the single character it was read from.
    """
    EOF = auto()            # End of input
    DEF = auto()            # def
    EXTERN = auto()         # extern
    IDENTIFIER = auto()     # Function/variable names
    NUMBER = auto()         # Numeric literals (float)
    SYMBOL = auto()         # Operators, punctuation, unknown characters


KEYWORDS: dict[str, TokenKind] = {
    "def": TokenKind.DEF,
    "extern": TokenKind.EXTERN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token read from the source.

    Tokens compare equal on kind and value only, so token sequences from
    inputs that differ in layout or comments can be compared directly.

    Attributes:
        kind: The TokenKind classification
        value: Identifier text, float value, symbol character, or None
        line: Line number of the first character (1-indexed)
        column: Column number of the first character (1-indexed)
        filename: Name of the source
    """
    kind: TokenKind
    value: str | float | None
    line: int = field(default=1, compare=False)
    column: int = field(default=1, compare=False)
    filename: str = field(default="<input>", compare=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value is not None:
            if isinstance(self.value, float):
                return f"Token({self.kind.name}, {self.value}, {self.line}:{self.column})"
            return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_symbol(self, char: str) -> bool:
        """Return True if this token is the symbol `char`."""
        return self.kind == TokenKind.SYMBOL and self.value == char

    def describe(self) -> str:
        """Short human-readable form used in diagnostics."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.NUMBER:
            return f"number {self.value:g}"
        return f"'{self.value}'"


# =============================================================================
# Number Conversion
# =============================================================================

# Longest valid prefix accepted by strtod for text made of digits and '.'
_NUMBER_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_number(text: str) -> float:
    """
    Convert scanned number text to a float with strtod prefix semantics.

    Args:
        text: A run of digits and '.' characters

    Returns:
        The value of the longest valid numeric prefix, or 0.0 if none
    """
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        logger.debug(f"Number literal {text!r} has no numeric prefix, using 0.0")
        return 0.0
    if match.end() != len(text):
        logger.debug(f"Number literal {text!r} truncated to {match.group()!r}")
    return float(match.group())


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Streaming tokenizer for Kaleido source.

    The lexer reads exactly one character past the end of each token and
    keeps it as its cursor, so scanning resumes correctly on the next call.
    Each instance owns its cursor; independent sessions never share state.

    The lexer never raises on malformed input: anything it does not
    recognise becomes a SYMBOL token.

    Usage:
        lexer = Lexer(sys.stdin, "<stdin>")
        token = lexer.next_token()

    Attributes:
        filename: Name of the source (for error reporting)
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits

    # Characters that make up a number literal
    NUMBER_CHARS = string.digits + "."

    # C-locale whitespace; other Unicode spaces are symbols
    WHITESPACE = string.whitespace

    def __init__(self, source: str | TextIO, filename: str = "<input>"):
        """
        Initialize the lexer.

        Args:
            source: Source text, or a text stream read one character at a time
            filename: Name of the source (for error messages)
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self._stream = source
        self.filename = filename

        # Pending character; "" once the stream is exhausted
        self._last_char = " "

        # Position of the pending character
        self._line = 1
        self._column = 0

        # Text read so far on the current line, for error context
        self._line_chars: list[str] = []

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens up to and including the first EOF token.

        Yields:
            Token objects representing each lexical element
        """
        while True:
            token = self.next_token()
            yield token
            if token.kind == TokenKind.EOF:
                return

    def next_token(self) -> Token:
        """
        Read and return the next token from the source.

        Once the source is exhausted every call returns an EOF token.
        """
        while True:
            while self._last_char and self._last_char in self.WHITESPACE:
                self._advance()

            char = self._last_char
            line, column = self._line, self._column

            if char and char in self.IDENT_START:
                return self._scan_identifier(line, column)

            if char and char in self.NUMBER_CHARS:
                return self._scan_number(line, column)

            if char == "#":
                self._skip_comment()
                continue

            if not char:
                return self._make_token(TokenKind.EOF, None, line, column)

            self._advance()
            return self._make_token(TokenKind.SYMBOL, char, line, column)

    def current_line_text(self) -> str:
        """Return the text read so far on the current line."""
        return "".join(self._line_chars).rstrip("\r\n")

    @property
    def line(self) -> int:
        """Line number of the pending character."""
        return self._line

    # =========================================================================
    # Character Access
    # =========================================================================

    def _advance(self) -> str:
        """
        Read the next character into the cursor and return it.

        Updates line and column tracking for error reporting.
        """
        if self._last_char == "\n":
            self._line += 1
            self._column = 0
            self._line_chars = []

        self._last_char = self._stream.read(1)
        self._column += 1
        if self._last_char:
            self._line_chars.append(self._last_char)
        return self._last_char

    def _make_token(
        self,
        kind: TokenKind,
        value: str | float | None,
        line: int,
        column: int,
    ) -> Token:
        return Token(kind=kind, value=value, line=line, column=column, filename=self.filename)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_identifier(self, line: int, column: int) -> Token:
        """
        Scan an identifier or keyword.

        The first character is already known to be a letter; the rest
        may be letters or digits.
        """
        chars = [self._last_char]
        while (char := self._advance()) and char in self.IDENT_CHARS:
            chars.append(char)

        name = "".join(chars)
        kind = KEYWORDS.get(name, TokenKind.IDENTIFIER)
        return self._make_token(kind, name, line, column)

    def _scan_number(self, line: int, column: int) -> Token:
        """Scan a run of digits and '.' characters as one number."""
        chars = [self._last_char]
        while (char := self._advance()) and char in self.NUMBER_CHARS:
            chars.append(char)

        value = parse_number("".join(chars))
        return self._make_token(TokenKind.NUMBER, value, line, column)

    def _skip_comment(self) -> None:
        """Skip a '#' comment up to, not including, the end of the line."""
        while (char := self._advance()) and char not in "\r\n":
            pass


def tokenize_source(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize a complete source string.

    Args:
        source: The Kaleido source text
        filename: Source name for token locations

    Returns:
        All tokens, ending with the EOF token
    """
    return list(Lexer(source, filename).tokenize())
