"""
Kaleido Recursive Descent Parser
================================

This module implements the parser for the Kaleido language. It pulls
tokens one at a time from a Lexer through a single-token lookahead and
builds AST nodes.

Grammar (Simplified EBNF)
-------------------------
definition      ::= 'def' prototype expression
external        ::= 'extern' prototype
toplevelexpr    ::= expression
prototype       ::= IDENTIFIER '(' IDENTIFIER* ')'

expression      ::= primary binoprhs
binoprhs        ::= (BINOP primary)*
primary         ::= identifierexpr | numberexpr | parenexpr
identifierexpr  ::= IDENTIFIER | IDENTIFIER '(' (expression (',' expression)*)? ')'
numberexpr      ::= NUMBER
parenexpr       ::= '(' expression ')'

Binary Operators
----------------
Binary expressions are parsed by precedence climbing over the table in
FrontendConfig.binop_precedence (default: < 10, + 20, - 30, * 40).
Operators of equal precedence associate to the left. Any token that is
not in the table ends the expression.

Results
-------
Public parse methods never raise on bad input. They return a ParseResult
holding either the node or the KSyntaxError that stopped the first
failing production. After a failure the lookahead is left on the
offending token; recovery is up to the caller (see kaleido.driver).

Parentheses and call arguments nest at most FrontendConfig.max_nesting
levels deep. Deeper input fails with "expression nested too deeply".

Example Usage
-------------
>>> from kaleido.lexer import Lexer
>>> from kaleido.parser import Parser
>>> parser = Parser(Lexer("def f(x) x*2"))
>>> parser.prime()
Token(DEF, 'def', 1:1)
>>> result = parser.parse_definition()
>>> result.value.prototype
Prototype(name='f', parameters=('x',))
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Generic, Optional, TypeVar
import logging

from kaleido.config import FrontendConfig
from kaleido.errors import KSyntaxError, ParserStateError
from kaleido.lexer import Lexer, Token, TokenKind
from kaleido.ast import (
    Expression,
    NumberLiteral,
    VariableReference,
    BinaryExpression,
    CallExpression,
    Prototype,
    Function,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Parse Result
# =============================================================================

@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """
    Outcome of one parse entry point: a node, or the error that stopped it.

    Attributes:
        value: The parsed node (None on failure)
        error: The syntax error (None on success)
    """
    value: Optional[T] = None
    error: Optional[KSyntaxError] = None

    @property
    def ok(self) -> bool:
        """True if parsing succeeded."""
        return self.error is None

    def unwrap(self) -> T:
        """
        Return the parsed value.

        Raises:
            KSyntaxError: If parsing failed
        """
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "ParseResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: KSyntaxError) -> "ParseResult[T]":
        return cls(error=error)


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Recursive descent parser for Kaleido.

    Each parser owns its lookahead token and reads from its own lexer, so
    any number of sessions can run side by side. prime() must be called
    once before the first parse call.

    Attributes:
        lexer: Token source
        config: Session configuration (precedence table, anonymous name)
        current: The lookahead token (None until primed)
    """

    def __init__(self, lexer: Lexer, config: Optional[FrontendConfig] = None):
        """
        Initialize the parser.

        Args:
            lexer: The lexer to pull tokens from
            config: Front-end configuration (uses defaults if None)
        """
        self.lexer = lexer
        self.config = config or FrontendConfig()
        self.current: Optional[Token] = None
        self._depth = 0

        # Snapshot of the precedence table, read-only for the whole session
        self._precedence = MappingProxyType(dict(self.config.binop_precedence))

    @property
    def precedence_table(self) -> MappingProxyType:
        return self._precedence

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def prime(self) -> Token:
        """Fetch the first lookahead token. Call once before parsing."""
        return self.advance()

    def advance(self) -> Token:
        """Consume the lookahead token and fetch the next one."""
        self.current = self.lexer.next_token()
        return self.current

    def token_precedence(self) -> int:
        """
        Precedence of the lookahead token as a binary operator.

        Returns:
            The table precedence, or -1 for anything that is not a
            known operator symbol
        """
        token = self.current
        if token is None or token.kind != TokenKind.SYMBOL:
            return -1
        return self._precedence.get(token.value, -1)

    def _error(self, message: str) -> KSyntaxError:
        """Create a syntax error located at the lookahead token."""
        token = self.current
        source_line = None
        if token.line == self.lexer.line:
            source_line = self.lexer.current_line_text()
        return KSyntaxError(
            message,
            token.location,
            hint=f"found {token.describe()}",
            source_line=source_line,
        )

    # =========================================================================
    # Public Entry Points
    # =========================================================================

    def parse_expression(self) -> ParseResult[Expression]:
        """Parse one expression."""
        return self._run("expression", self._parse_expression)

    def parse_prototype(self) -> ParseResult[Prototype]:
        """Parse a prototype: name '(' params ')'."""
        return self._run("prototype", self._parse_prototype)

    def parse_definition(self) -> ParseResult[Function]:
        """Parse a function definition starting at the 'def' keyword."""
        return self._run("definition", self._parse_definition)

    def parse_extern(self) -> ParseResult[Prototype]:
        """Parse an extern declaration starting at the 'extern' keyword."""
        return self._run("extern", self._parse_extern)

    def parse_top_level_expression(self) -> ParseResult[Function]:
        """Parse an expression and wrap it in an anonymous function."""
        return self._run("top-level expression", self._parse_top_level_expression)

    def _run(self, production: str, parse: Callable[[], T]) -> ParseResult[T]:
        if self.current is None:
            raise ParserStateError(f"cannot parse {production}: call prime() first")
        try:
            return ParseResult.success(parse())
        except KSyntaxError as e:
            logger.debug(f"Failed to parse {production}: {e.message} at {e.location}")
            return ParseResult.failure(e)
        except RecursionError:
            # max_nesting is set higher than the interpreter stack allows
            error = self._error("expression nested too deeply")
            logger.debug(f"Failed to parse {production}: stack exhausted at {error.location}")
            return ParseResult.failure(error)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """expression ::= primary binoprhs"""
        lhs = self._parse_primary()
        return self._parse_binop_rhs(0, lhs)

    def _parse_primary(self) -> Expression:
        """
        Dispatch on the lookahead token to the matching primary form.

        Parentheses and call arguments recurse back here, so this is
        where nesting depth is counted against config.max_nesting.
        """
        token = self.current
        if self._depth >= self.config.max_nesting:
            raise self._error("expression nested too deeply")

        self._depth += 1
        try:
            if token.kind == TokenKind.IDENTIFIER:
                return self._parse_identifier_expression()

            if token.kind == TokenKind.NUMBER:
                self.advance()
                return NumberLiteral(token.value, location=token.location)

            if token.is_symbol("("):
                return self._parse_paren_expression()

            raise self._error("unknown token when expecting an expression")
        finally:
            self._depth -= 1

    def _parse_paren_expression(self) -> Expression:
        """parenexpr ::= '(' expression ')'"""
        self.advance()  # consume (
        expr = self._parse_expression()

        if not self.current.is_symbol(")"):
            raise self._error("expected ')'")
        self.advance()  # consume )
        return expr

    def _parse_identifier_expression(self) -> Expression:
        """Variable reference, or a call if the name is followed by '('."""
        token = self.current
        name = token.value
        self.advance()  # consume identifier

        if not self.current.is_symbol("("):
            return VariableReference(name, location=token.location)

        self.advance()  # consume (
        arguments = []
        if not self.current.is_symbol(")"):
            while True:
                arguments.append(self._parse_expression())

                if self.current.is_symbol(")"):
                    break
                if not self.current.is_symbol(","):
                    raise self._error("Expected ')' or ',' in argument list")
                self.advance()  # consume ,

        self.advance()  # consume )
        return CallExpression(name, tuple(arguments), location=token.location)

    def _parse_binop_rhs(self, min_precedence: int, lhs: Expression) -> Expression:
        """
        Fold binary operators onto `lhs` by precedence climbing.

        Operators binding weaker than `min_precedence` are left for the
        caller. When the operator after the right operand binds tighter
        than the current one, the right operand absorbs it first.

        Args:
            min_precedence: Weakest operator this call may consume
            lhs: Expression parsed so far
        """
        while True:
            precedence = self.token_precedence()
            if precedence < min_precedence:
                return lhs

            operator = self.current
            self.advance()  # consume operator

            rhs = self._parse_primary()

            if precedence < self.token_precedence():
                rhs = self._parse_binop_rhs(precedence + 1, rhs)

            lhs = BinaryExpression(operator.value, lhs, rhs, location=operator.location)

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def _parse_prototype(self) -> Prototype:
        """prototype ::= IDENTIFIER '(' IDENTIFIER* ')'"""
        token = self.current
        if token.kind != TokenKind.IDENTIFIER:
            raise self._error("Expected function name in prototype")
        self.advance()  # consume name

        if not self.current.is_symbol("("):
            raise self._error("Expected '(' in prototype")

        parameters = []
        while self.advance().kind == TokenKind.IDENTIFIER:
            parameters.append(self.current.value)

        if not self.current.is_symbol(")"):
            raise self._error("Expected ')' in prototype")
        self.advance()  # consume )

        return Prototype(token.value, tuple(parameters), location=token.location)

    def _parse_definition(self) -> Function:
        """definition ::= 'def' prototype expression"""
        start = self.current
        self.advance()  # consume def
        prototype = self._parse_prototype()
        body = self._parse_expression()
        return Function(prototype, body, location=start.location)

    def _parse_extern(self) -> Prototype:
        """external ::= 'extern' prototype"""
        self.advance()  # consume extern
        return self._parse_prototype()

    def _parse_top_level_expression(self) -> Function:
        """toplevelexpr ::= expression, wrapped in a zero-parameter function"""
        start = self.current
        body = self._parse_expression()
        prototype = Prototype(self.config.anonymous_name, (), location=start.location)
        return Function(prototype, body, location=start.location)


# =============================================================================
# Convenience Functions
# =============================================================================

def _parse_source(
    source: str,
    entry: Callable[[Parser], ParseResult],
    filename: str,
    config: Optional[FrontendConfig],
) -> ParseResult:
    parser = Parser(Lexer(source, filename), config)
    parser.prime()
    return entry(parser)


def parse_expression_source(
    source: str,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> ParseResult[Expression]:
    """
    Parse one expression from source text with a fresh lexer/parser pair.

    Example:
        >>> parse_expression_source("1+2*3").value
        BinaryExpression(operator='+', left=NumberLiteral(value=1.0), ...)
    """
    return _parse_source(source, Parser.parse_expression, filename, config)


def parse_prototype_source(
    source: str,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> ParseResult[Prototype]:
    """Parse one prototype from source text."""
    return _parse_source(source, Parser.parse_prototype, filename, config)


def parse_definition_source(
    source: str,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> ParseResult[Function]:
    """Parse one 'def' definition from source text."""
    return _parse_source(source, Parser.parse_definition, filename, config)


def parse_extern_source(
    source: str,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> ParseResult[Prototype]:
    """Parse one 'extern' declaration from source text."""
    return _parse_source(source, Parser.parse_extern, filename, config)


def parse_top_level_source(
    source: str,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> ParseResult[Function]:
    """Parse one top-level expression from source text."""
    return _parse_source(source, Parser.parse_top_level_expression, filename, config)
