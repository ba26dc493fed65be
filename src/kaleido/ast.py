"""
Kaleido Abstract Syntax Tree (AST) Definitions
==============================================

This module defines the node types produced by the Kaleido parser,
ready for a downstream code generator.

Node Set
--------
Expressions (the closed union `Expression`)
├── NumberLiteral - numeric constant (float)
├── VariableReference - reference to a named value
├── BinaryExpression - binary operator applied to two operands
└── CallExpression - call of a named function with arguments
Declarations
├── Prototype - function name and parameter names
└── Function - prototype paired with a single body expression

Design Notes
------------
- Nodes are frozen dataclasses; children are held directly, so a tree
  owns all of its nodes and contains no sharing or cycles
- Consumers dispatch on the concrete class (isinstance or ASTVisitor)
- Each node may carry its source location; locations are excluded from
  equality so trees compare structurally
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from kaleido.errors import SourceLocation


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral:
    """
    Numeric literal expression.

    Attributes:
        value: The literal value
    """
    value: float
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class VariableReference:
    """
    Reference to a named value.

    Attributes:
        name: The referenced name
    """
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class BinaryExpression:
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The operator character
        left: Left operand expression
        right: Right operand expression
    """
    operator: str
    left: "Expression"
    right: "Expression"
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class CallExpression:
    """
    Function call expression.

    Attributes:
        callee: Name of the function to call
        arguments: Argument expressions in call order
    """
    callee: str
    arguments: tuple["Expression", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


Expression = Union[NumberLiteral, VariableReference, BinaryExpression, CallExpression]

EXPRESSION_TYPES = (NumberLiteral, VariableReference, BinaryExpression, CallExpression)


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class Prototype:
    """
    Function prototype: the name and parameter names, without a body.

    Duplicate parameter names are not rejected here.

    Attributes:
        name: Function name
        parameters: Parameter names in declaration order
    """
    name: str
    parameters: tuple[str, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @property
    def arity(self) -> int:
        """Number of declared parameters."""
        return len(self.parameters)


@dataclass(frozen=True)
class Function:
    """
    Function definition. The body is always exactly one expression.

    Attributes:
        prototype: The function's prototype
        body: The body expression
    """
    prototype: Prototype
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.prototype.name


ASTNode = Union[Expression, Prototype, Function]


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node's class name. Subclasses override the visit_*
    methods for the node types they care about.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_VariableReference(self, node):
                self.names.append(node.name)

        collector = NameCollector()
        collector.visit(function)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by node type)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Default visit method: visits all child nodes in field order."""
        for child in children(node):
            self.visit(child)


def children(node: ASTNode) -> tuple:
    """Return the direct child nodes of `node`, left to right."""
    if isinstance(node, BinaryExpression):
        return (node.left, node.right)
    if isinstance(node, CallExpression):
        return node.arguments
    if isinstance(node, Function):
        return (node.prototype, node.body)
    return ()


# =============================================================================
# Expression Formatting
# =============================================================================

def format_number(value: float) -> str:
    """Format a literal value compactly (2.0 -> "2", 0.5 -> "0.5")."""
    return f"{value:g}"


def format_expression(expr: Expression) -> str:
    """
    Render an expression as fully parenthesised infix text.

    Example:
        1+2*3  ->  (1 + (2 * 3))
    """
    if isinstance(expr, NumberLiteral):
        return format_number(expr.value)
    if isinstance(expr, VariableReference):
        return expr.name
    if isinstance(expr, BinaryExpression):
        return f"({format_expression(expr.left)} {expr.operator} {format_expression(expr.right)})"
    if isinstance(expr, CallExpression):
        args = ", ".join(format_expression(a) for a in expr.arguments)
        return f"{expr.callee}({args})"
    raise TypeError(f"not an expression node: {type(expr).__name__}")


def format_prototype(proto: Prototype) -> str:
    """Render a prototype as it would be written in source: name(a b)."""
    return f"{proto.name}({' '.join(proto.parameters)})"


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces an indented, one-node-per-line rendering of a tree.

    Usage:
        printer = ASTPrinter()
        print(printer.print(function))

    Output for "def f(x) x*2":
        Function: f(x)
          Binary: *
            Variable: x
            Number: 2
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _visit_indented(self, nodes) -> None:
        self.indent_level += 1
        for node in nodes:
            self.visit(node)
        self.indent_level -= 1

    def visit_Function(self, node: Function):
        self._emit(f"Function: {format_prototype(node.prototype)}")
        self._visit_indented([node.body])

    def visit_Prototype(self, node: Prototype):
        self._emit(f"Extern: {format_prototype(node)}")

    def visit_NumberLiteral(self, node: NumberLiteral):
        self._emit(f"Number: {format_number(node.value)}")

    def visit_VariableReference(self, node: VariableReference):
        self._emit(f"Variable: {node.name}")

    def visit_BinaryExpression(self, node: BinaryExpression):
        self._emit(f"Binary: {node.operator}")
        self._visit_indented([node.left, node.right])

    def visit_CallExpression(self, node: CallExpression):
        self._emit(f"Call: {node.callee} ({len(node.arguments)} args)")
        self._visit_indented(node.arguments)
