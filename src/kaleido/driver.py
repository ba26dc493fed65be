"""
Kaleido Top-Level Driver
========================

This module implements the top-level read/parse loop. It dispatches each
top-level construct to the matching parser entry point and reports the
outcome:

    EOF       -> stop
    ';'       -> ignored
    'def'     -> Parser.parse_definition
    'extern'  -> Parser.parse_extern
    otherwise -> Parser.parse_top_level_expression

Error Recovery
--------------
When a construct fails to parse, the driver reports the error, discards
exactly one token, and resumes at the next token. The grammar functions
themselves never recover.

Usage
-----
>>> from kaleido.driver import Driver
>>> result = Driver("def f(x) x*2; f(4)").run()
>>> [item.kind for item in result.items]
['definition', 'expression']
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, TextIO
import logging

from kaleido.ast import Function, Prototype
from kaleido.config import FrontendConfig
from kaleido.errors import ErrorCollector, KaleidoError
from kaleido.lexer import Lexer, TokenKind
from kaleido.parser import Parser, ParseResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TopLevelItem:
    """
    One successfully parsed top-level construct.

    Attributes:
        kind: "definition", "extern" or "expression"
        node: Function for definitions and expressions, Prototype for externs
    """
    kind: str
    node: Function | Prototype


@dataclass
class DriverResult:
    """
    Everything a driver run produced.

    Attributes:
        items: Parsed constructs in source order
        errors: Syntax errors that were reported and recovered from
    """
    items: list[TopLevelItem] = field(default_factory=list)
    errors: list[KaleidoError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def definitions(self) -> list[Function]:
        return [item.node for item in self.items if item.kind == "definition"]

    @property
    def externs(self) -> list[Prototype]:
        return [item.node for item in self.items if item.kind == "extern"]

    @property
    def expressions(self) -> list[Function]:
        return [item.node for item in self.items if item.kind == "expression"]


class Driver:
    """
    Runs the top-level loop over one source.

    Messages ("Parsed a function definition.", error reports, prompts)
    go to the `emit` callback; the default discards them, so the driver
    can be used as a plain library call.

    Attributes:
        parser: The parser for this session
        config: Front-end configuration
        interactive: If True, emit the prompt before each construct
    """

    MESSAGES = {
        "definition": "Parsed a function definition.",
        "extern": "Parsed an extern.",
        "expression": "Parsed a top-level expr.",
    }

    def __init__(
        self,
        source: str | TextIO,
        filename: str = "<stdin>",
        config: Optional[FrontendConfig] = None,
        emit: Optional[Callable[[str], None]] = None,
        interactive: bool = False,
        prompt: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the driver.

        Args:
            source: Source text or a text stream
            filename: Source name for diagnostics
            config: Front-end configuration (uses defaults if None)
            emit: Callback receiving each output message
            interactive: Emit config.prompt before each construct
            prompt: Callback receiving the prompt text (defaults to emit)
        """
        self.config = config or FrontendConfig()
        self.parser = Parser(Lexer(source, filename), self.config)
        self.interactive = interactive
        self._emit = emit or (lambda message: None)
        self._emit_prompt = prompt or self._emit
        self._errors = ErrorCollector()

    @property
    def errors(self) -> ErrorCollector:
        return self._errors

    def run(self) -> DriverResult:
        """
        Parse top-level constructs until end of input.

        Returns:
            DriverResult with the parsed items and recovered errors
        """
        result = DriverResult()
        self._errors.clear()

        self._prompt()
        self.parser.prime()

        while True:
            token = self.parser.current

            if token.kind == TokenKind.EOF:
                break

            if token.is_symbol(";"):
                self.parser.advance()
            elif token.kind == TokenKind.DEF:
                self._handle("definition", self.parser.parse_definition, result)
            elif token.kind == TokenKind.EXTERN:
                self._handle("extern", self.parser.parse_extern, result)
            else:
                self._handle("expression", self.parser.parse_top_level_expression, result)

            self._prompt()

        result.errors = list(self._errors.errors)
        logger.debug(
            f"Driver finished: {len(result.items)} items, {len(result.errors)} errors"
        )
        return result

    def _handle(
        self,
        kind: str,
        parse: Callable[[], ParseResult],
        result: DriverResult,
    ) -> None:
        outcome = parse()

        if outcome.ok:
            result.items.append(TopLevelItem(kind, outcome.value))
            logger.info(f"Parsed {kind} '{self._item_name(outcome.value)}'")
            self._emit(self.MESSAGES[kind])
            return

        self._errors.add(outcome.error)
        logger.warning(f"Skipping token after error: {outcome.error.message}")
        self._emit(str(outcome.error))

        # Skip one token for error recovery
        self.parser.advance()

    def _prompt(self) -> None:
        if self.interactive:
            self._emit_prompt(self.config.prompt)

    @staticmethod
    def _item_name(node: Function | Prototype) -> str:
        if isinstance(node, Function):
            return node.prototype.name
        return node.name


def run_source(
    source: str | TextIO,
    filename: str = "<input>",
    config: Optional[FrontendConfig] = None,
) -> DriverResult:
    """Run the top-level loop over `source` without any output."""
    return Driver(source, filename, config).run()
