"""
Kaleido - Front End for a Minimal Expression Language
=====================================================

This package implements the lexer, AST and parser for Kaleido, a small
expression-oriented language with a single numeric type. Source text is
turned into typed expression and declaration nodes ready for a
downstream code generator.

Pipeline
--------
    Source → Lexer → Parser → AST (Function / Prototype nodes)

Language
--------
    # Scale a value
    def scale(x k) x*k
    extern sin(a)
    sin(1.5)*2

- Definitions: 'def' name(params) body-expression
- Externs: 'extern' name(params)
- Top-level expressions: wrapped in an anonymous zero-parameter function
- Binary operators: < + - * (see kaleido.config for precedences)

Usage
-----
>>> from kaleido import parse_definition_source
>>> result = parse_definition_source("def f(x) x*2")
>>> result.ok
True
>>> result.value.prototype.name
'f'

Or use the command-line tool:
    $ kparse program.k
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from kaleido.errors import (
    KaleidoError,
    KSyntaxError,
    ConfigError,
    ParserStateError,
    KaleidoCompilationError,
    SourceLocation,
    ErrorCollector,
)
from kaleido.config import FrontendConfig, DEFAULT_BINOP_PRECEDENCE, ANONYMOUS_FUNCTION_NAME
from kaleido.lexer import Lexer, Token, TokenKind, parse_number, tokenize_source
from kaleido.ast import (
    Expression,
    NumberLiteral,
    VariableReference,
    BinaryExpression,
    CallExpression,
    Prototype,
    Function,
    ASTVisitor,
    ASTPrinter,
    format_expression,
)
from kaleido.parser import (
    Parser,
    ParseResult,
    parse_expression_source,
    parse_prototype_source,
    parse_definition_source,
    parse_extern_source,
    parse_top_level_source,
)
from kaleido.driver import Driver, DriverResult, TopLevelItem, run_source

__all__ = [
    # Version
    "__version__",
    # Errors
    "KaleidoError",
    "KSyntaxError",
    "ConfigError",
    "ParserStateError",
    "KaleidoCompilationError",
    "SourceLocation",
    "ErrorCollector",
    # Configuration
    "FrontendConfig",
    "DEFAULT_BINOP_PRECEDENCE",
    "ANONYMOUS_FUNCTION_NAME",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "parse_number",
    "tokenize_source",
    # AST
    "Expression",
    "NumberLiteral",
    "VariableReference",
    "BinaryExpression",
    "CallExpression",
    "Prototype",
    "Function",
    "ASTVisitor",
    "ASTPrinter",
    "format_expression",
    # Parser
    "Parser",
    "ParseResult",
    "parse_expression_source",
    "parse_prototype_source",
    "parse_definition_source",
    "parse_extern_source",
    "parse_top_level_source",
    # Driver
    "Driver",
    "DriverResult",
    "TopLevelItem",
    "run_source",
]
