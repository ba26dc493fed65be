# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the Kaleido streaming lexer.
#
# Test coverage includes:
#   - Identifiers and the def/extern keywords
#   - Number scanning and strtod-style prefix conversion
#   - Symbols, including unknown characters
#   - '#' comments and their transparency
#   - End-of-input behaviour and streaming from text streams
#   - Token locations
# =============================================================================

import io

import pytest
from kaleido.lexer import Lexer, Token, TokenKind, parse_number, tokenize_source


# =============================================================================
# Helper Function
# =============================================================================

def tokenize(source: str) -> list:
    """
    Helper to tokenize and drop the trailing EOF token.
    Tests are focused on meaningful tokens, not the terminator.
    """
    return [t for t in tokenize_source(source, "<test>") if t.kind != TokenKind.EOF]


def kinds_and_values(source: str) -> list:
    return [(t.kind, t.value) for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize_source("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF
        assert tokens[0].value is None

    def test_whitespace_only(self):
        """Whitespace of every kind is skipped."""
        assert tokenize("  \t\n\r\n  ") == []

    def test_vertical_tab_and_form_feed_are_whitespace(self):
        assert kinds_and_values("a\x0b\x0cb") == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.IDENTIFIER, "b"),
        ]

    @pytest.mark.parametrize("char", ["\x1c", "\x1f", "\x85", "\u00a0", "\u2003"])
    def test_non_ascii_spaces_are_symbols(self, char):
        """Only C-locale whitespace is skipped."""
        assert kinds_and_values(f"a{char}b") == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.SYMBOL, char),
            (TokenKind.IDENTIFIER, "b"),
        ]

    def test_identifier(self):
        tokens = tokenize("foo")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.IDENTIFIER
        assert tokens[0].value == "foo"

    def test_identifier_with_digits(self):
        """Identifiers may contain digits after the first letter."""
        assert kinds_and_values("x1y22") == [(TokenKind.IDENTIFIER, "x1y22")]

    def test_identifier_cannot_start_with_digit(self):
        """A leading digit starts a number instead."""
        assert kinds_and_values("1abc") == [
            (TokenKind.NUMBER, 1.0),
            (TokenKind.IDENTIFIER, "abc"),
        ]

    def test_underscore_is_a_symbol(self):
        """Only letters and digits form identifiers."""
        assert kinds_and_values("_a") == [
            (TokenKind.SYMBOL, "_"),
            (TokenKind.IDENTIFIER, "a"),
        ]

    def test_keywords(self):
        assert kinds_and_values("def extern") == [
            (TokenKind.DEF, "def"),
            (TokenKind.EXTERN, "extern"),
        ]

    @pytest.mark.parametrize("text", ["define", "externs", "Def", "EXTERN", "de"])
    def test_keyword_lookalikes_are_identifiers(self, text):
        """Keywords must match exactly."""
        assert kinds_and_values(text) == [(TokenKind.IDENTIFIER, text)]


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Test number scanning and conversion."""

    def test_integer(self):
        tokens = tokenize("42")
        assert tokens[0].kind == TokenKind.NUMBER
        assert tokens[0].value == 42.0
        assert isinstance(tokens[0].value, float)

    def test_decimal(self):
        assert kinds_and_values("3.25") == [(TokenKind.NUMBER, 3.25)]

    def test_leading_dot(self):
        assert kinds_and_values(".5") == [(TokenKind.NUMBER, 0.5)]

    def test_trailing_dot(self):
        assert kinds_and_values("5.") == [(TokenKind.NUMBER, 5.0)]

    def test_multiple_dots_form_one_token(self):
        """Malformed numbers are a single token converted by prefix."""
        assert kinds_and_values("1.2.3") == [(TokenKind.NUMBER, 1.2)]

    def test_lone_dot_is_zero(self):
        assert kinds_and_values(".") == [(TokenKind.NUMBER, 0.0)]

    def test_number_followed_by_operator(self):
        assert kinds_and_values("2*3") == [
            (TokenKind.NUMBER, 2.0),
            (TokenKind.SYMBOL, "*"),
            (TokenKind.NUMBER, 3.0),
        ]


class TestParseNumber:
    """Test the strtod-style conversion on its own."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0", 0.0),
            ("17", 17.0),
            ("1.5", 1.5),
            (".25", 0.25),
            ("1.2.3", 1.2),
            ("1..5", 1.0),
            ("12.34.", 12.34),
            (".", 0.0),
            ("..5", 0.0),
        ],
    )
    def test_prefix_conversion(self, text, expected):
        assert parse_number(text) == expected

    def test_truncation_is_logged(self, caplog):
        caplog.set_level("DEBUG", logger="kaleido.lexer")
        parse_number("1.2.3")
        assert "truncated" in caplog.text


# =============================================================================
# Symbol Tests
# =============================================================================

class TestSymbols:
    """Test single-character symbol tokens."""

    def test_punctuation_and_operators(self):
        tokens = tokenize("(),;+-*<")
        assert [t.kind for t in tokens] == [TokenKind.SYMBOL] * 8
        assert [t.value for t in tokens] == list("(),;+-*<")

    def test_unknown_characters_are_symbols(self):
        """The lexer never rejects input."""
        assert kinds_and_values("@ / $") == [
            (TokenKind.SYMBOL, "@"),
            (TokenKind.SYMBOL, "/"),
            (TokenKind.SYMBOL, "$"),
        ]

    def test_is_symbol(self):
        token = tokenize("(")[0]
        assert token.is_symbol("(")
        assert not token.is_symbol(")")
        assert not tokenize("x")[0].is_symbol("x")

    def test_trailing_symbol_before_eof(self):
        """A final symbol is returned before EOF."""
        tokens = tokenize_source("x;")
        assert [(t.kind, t.value) for t in tokens] == [
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.SYMBOL, ";"),
            (TokenKind.EOF, None),
        ]


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test '#' comment handling."""

    def test_comment_is_transparent(self):
        assert tokenize_source("1 # comment\n+2") == tokenize_source("1\n+2")

    def test_comment_only(self):
        assert tokenize("# nothing here") == []

    def test_comment_at_end_of_input(self):
        assert kinds_and_values("x # trailing") == [(TokenKind.IDENTIFIER, "x")]

    def test_comment_ends_at_carriage_return(self):
        assert kinds_and_values("# first\ry") == [(TokenKind.IDENTIFIER, "y")]

    def test_consecutive_comments(self):
        source = "# one\n# two\n\n# three\ndef"
        assert kinds_and_values(source) == [(TokenKind.DEF, "def")]

    def test_hash_inside_expression(self):
        assert kinds_and_values("a+# rest of line\nb") == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.SYMBOL, "+"),
            (TokenKind.IDENTIFIER, "b"),
        ]


# =============================================================================
# Streaming Behaviour Tests
# =============================================================================

class TestStreaming:
    """Test end-of-input handling and incremental reading."""

    def test_eof_is_repeated(self):
        lexer = Lexer("x")
        assert lexer.next_token().kind == TokenKind.IDENTIFIER
        assert lexer.next_token().kind == TokenKind.EOF
        assert lexer.next_token().kind == TokenKind.EOF

    def test_tokenize_stops_after_eof(self):
        tokens = list(Lexer("a b").tokenize())
        assert [t.kind for t in tokens] == [
            TokenKind.IDENTIFIER,
            TokenKind.IDENTIFIER,
            TokenKind.EOF,
        ]

    def test_reads_from_text_stream(self):
        stream = io.StringIO("extern sin(a)")
        tokens = list(Lexer(stream).tokenize())
        assert [t.value for t in tokens] == ["extern", "sin", "(", "a", ")", None]

    def test_reads_one_character_past_token(self):
        """The lexer only consumes what it needs from the stream."""
        stream = io.StringIO("abc def ghi")
        lexer = Lexer(stream)
        assert lexer.next_token().value == "abc"
        assert stream.tell() == 4

    def test_lexers_do_not_share_state(self):
        first = Lexer("alpha beta")
        second = Lexer("1 2")
        assert first.next_token().value == "alpha"
        assert second.next_token().value == 1.0
        assert first.next_token().value == "beta"
        assert second.next_token().value == 2.0


# =============================================================================
# Location Tests
# =============================================================================

class TestLocations:
    """Test token line/column tracking."""

    def test_first_token_location(self):
        token = tokenize("def")[0]
        assert (token.line, token.column) == (1, 1)

    def test_column_tracking(self):
        tokens = tokenize("def f(x) x+1")
        assert [t.column for t in tokens] == [1, 5, 6, 7, 8, 10, 11, 12]

    def test_line_tracking(self):
        tokens = tokenize("def f(x)\n  x+1")
        x_token = tokens[5]
        assert x_token.value == "x"
        assert (x_token.line, x_token.column) == (2, 3)

    def test_eof_location(self):
        eof = tokenize_source("ab")[-1]
        assert (eof.line, eof.column) == (1, 3)

    def test_location_property(self):
        token = Lexer("  foo", "prog.k").next_token()
        assert str(token.location) == "prog.k:1:3"

    def test_locations_ignored_in_equality(self):
        assert Token(TokenKind.IDENTIFIER, "x", 1, 1) == Token(TokenKind.IDENTIFIER, "x", 9, 9)

    def test_current_line_text(self):
        lexer = Lexer("first line\nsecond line")
        for _ in range(3):
            lexer.next_token()
        assert lexer.current_line_text().startswith("second")

    def test_token_repr(self):
        tokens = tokenize_source("x 2")
        assert repr(tokens[0]) == "Token(IDENTIFIER, 'x', 1:1)"
        assert repr(tokens[1]) == "Token(NUMBER, 2.0, 1:3)"
        assert repr(tokens[2]) == "Token(EOF, 1:4)"
