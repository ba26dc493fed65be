"""
Kaleido Front End - Configuration
=================================

Configuration for a parse session. Values can come from:
- Default values (defined here)
- Environment variables (FrontendConfig.from_env)
- Command-line options (kparse overrides individual fields)

The binary operator precedence table is fixed for the language:

| Operator | Precedence |
|----------|------------|
| <        | 10         |
| +        | 20         |
| -        | 30         |
| *        | 40         |

Higher binds tighter. '-' binds tighter than '+', so
"a+b-c" groups as "a+(b-c)".
"""

from dataclasses import dataclass, field
import logging
import os
import string

from kaleido.errors import ConfigError


# Operator character -> binding strength
DEFAULT_BINOP_PRECEDENCE: dict[str, int] = {
    "<": 10,
    "+": 20,
    "-": 30,
    "*": 40,
}

# Name given to the synthetic prototype wrapping a top-level expression.
# Not a valid identifier in the language.
ANONYMOUS_FUNCTION_NAME = "__anon_expr"

DEFAULT_PROMPT = "ready> "

# Deepest chain of nested primaries (parentheses, call arguments) accepted
# before the parser reports an error.
DEFAULT_MAX_NESTING = 100

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class FrontendConfig:
    """
    Configuration for a lexer/parser session.

    Attributes:
        binop_precedence: Operator character -> positive precedence
        anonymous_name: Prototype name used for top-level expressions
        prompt: Prompt emitted by the driver in interactive mode
        log_level: Default logging level name for the CLI
        max_nesting: Deepest nesting of parentheses and calls the parser accepts
    """

    binop_precedence: dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_BINOP_PRECEDENCE)
    )
    anonymous_name: str = ANONYMOUS_FUNCTION_NAME
    prompt: str = DEFAULT_PROMPT
    log_level: str = "WARNING"
    max_nesting: int = DEFAULT_MAX_NESTING

    def __post_init__(self):
        for operator, precedence in self.binop_precedence.items():
            if not isinstance(operator, str) or len(operator) != 1 or operator in string.whitespace:
                raise ConfigError(
                    "binop_precedence",
                    f"operator {operator!r} must be a single non-space character",
                )
            # bool is an int subclass but never a meaningful precedence
            if isinstance(precedence, bool) or not isinstance(precedence, int) or precedence <= 0:
                raise ConfigError(
                    "binop_precedence",
                    f"precedence for {operator!r} must be a positive integer, got {precedence!r}",
                )

        if not isinstance(self.anonymous_name, str) or not self.anonymous_name:
            raise ConfigError("anonymous_name", "must be a non-empty string")

        self.log_level = self.log_level.upper()
        if self.log_level not in _LOG_LEVELS:
            raise ConfigError("log_level", f"unknown level {self.log_level!r}")

        if isinstance(self.max_nesting, bool) or not isinstance(self.max_nesting, int) or self.max_nesting <= 0:
            raise ConfigError(
                "max_nesting", f"must be a positive integer, got {self.max_nesting!r}"
            )

    @property
    def logging_level(self) -> int:
        """Numeric logging level for logging.basicConfig."""
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls) -> "FrontendConfig":
        """
        Create FrontendConfig from environment variables.

        Environment variables (all optional):
            KALEIDO_PROMPT: Interactive prompt text
            KALEIDO_ANON_NAME: Anonymous top-level function name
            KALEIDO_LOG_LEVEL: Logging level name (e.g. "INFO")
            KALEIDO_MAX_NESTING: Nesting limit for expressions

        Returns:
            FrontendConfig with values from environment variables
        """
        config = cls()

        if prompt := os.environ.get("KALEIDO_PROMPT"):
            config.prompt = prompt

        if anonymous_name := os.environ.get("KALEIDO_ANON_NAME"):
            config.anonymous_name = anonymous_name

        if log_level := os.environ.get("KALEIDO_LOG_LEVEL"):
            if log_level.upper() in _LOG_LEVELS:
                config.log_level = log_level.upper()

        if max_nesting := os.environ.get("KALEIDO_MAX_NESTING"):
            if max_nesting.isdigit() and int(max_nesting) > 0:
                config.max_nesting = int(max_nesting)

        return config
