"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage.

Each node is a frozen pydantic model carrying a `Span` that tracks its location
in the source code, so runtime errors can still point at a line. Nodes are
never mutated after parsing, which lets every running instance of a script
share the same tree.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code for precise error reporting."""

    model_config = ConfigDict(frozen=True)

    s_line: int
    s_col: int
    e_line: int
    e_col: int


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a span."""

    model_config = ConfigDict(frozen=True)

    span: Span


# --- Literals and Identifiers ---


class NumberLiteral(ASTNode):
    value: Union[int, float]


class StringLiteral(ASTNode):
    value: str


class BooleanLiteral(ASTNode):
    value: bool


class ArrayLiteral(ASTNode):
    items: List["Expression"]


class VariableRef(ASTNode):
    name: str


# --- Expressions ---


class BinaryOp(ASTNode):
    op: str
    left: "Expression"
    right: "Expression"


class UnaryOp(ASTNode):
    op: str
    operand: "Expression"


class ConditionalExpression(ASTNode):
    condition: "Expression"
    then_expr: "Expression"
    else_expr: "Expression"


class ElementAccess(ASTNode):
    target: "Expression"
    index: "Expression"


class FunctionCall(ASTNode):
    function: str
    args: List["Expression"]


class Assignment(ASTNode):
    """
    `target[i][j] = value`. `indices` is empty for a plain variable assignment.
    `is_global` is set by the `global` keyword and forces the global table.
    """

    target: str
    indices: List["Expression"] = []
    value: "Expression"
    is_global: bool = False


Expression = Union[
    NumberLiteral,
    StringLiteral,
    BooleanLiteral,
    ArrayLiteral,
    VariableRef,
    BinaryOp,
    UnaryOp,
    ConditionalExpression,
    ElementAccess,
    FunctionCall,
    Assignment,
]


# --- Statements ---


class ExpressionStatement(ASTNode):
    expression: Expression


class Block(ASTNode):
    statements: List["Statement"]


class IfStatement(ASTNode):
    condition: Expression
    then_branch: Block
    else_branch: Optional[Union[Block, "IfStatement"]] = None


class WhileStatement(ASTNode):
    condition: Expression
    body: Block


class BreakStatement(ASTNode):
    pass


class ContinueStatement(ASTNode):
    pass


class ReturnStatement(ASTNode):
    value: Optional[Expression] = None


Statement = Union[ExpressionStatement, Block, IfStatement, WhileStatement, BreakStatement, ContinueStatement, ReturnStatement]


# --- Top-level Structures ---


class Parameter(ASTNode):
    name: str


class FunctionDefinition(ASTNode):
    name: str
    params: List[Parameter]
    body: Block


class Program(ASTNode):
    """The root of the AST, representing a single script source."""

    script_name: str
    functions: List[FunctionDefinition]
    body: Block


for _model in (ArrayLiteral, BinaryOp, UnaryOp, ConditionalExpression, ElementAccess, FunctionCall, Assignment, ExpressionStatement, Block, IfStatement, WhileStatement, ReturnStatement, FunctionDefinition, Program):
    _model.model_rebuild()

# A generic type hint for any node in the AST
Node = Union[ASTNode, Program]
