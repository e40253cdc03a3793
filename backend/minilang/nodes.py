"""AST node types.

Every node kind is its own dataclass; the parser builds the tree once and the
later phases only read it. ``Node.to_dict`` gives the JSON-ready form the
shells display.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Optional


class Node:
    @property
    def type(self):
        return type(self).__name__

    def to_dict(self):
        d = {"type": self.type}
        for f in fields(self):
            d[f.name] = _to_plain(getattr(self, f.name))
        return d


def _to_plain(value):
    if isinstance(value, Node):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value


# =====================================================
# STATEMENTS
# =====================================================
@dataclass
class Program(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class VariableDeclaration(Node):
    name: str
    initializer: Optional[Node] = None


@dataclass
class FunctionDeclaration(Node):
    name: str
    params: List[str]
    body: 'BlockStatement'


@dataclass
class BlockStatement(Node):
    body: List[Node] = field(default_factory=list)


@dataclass
class ExpressionStatement(Node):
    expression: Node


@dataclass
class IfStatement(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node] = None


@dataclass
class WhileStatement(Node):
    condition: Node
    body: Node


@dataclass
class ForStatement(Node):
    initializer: Optional[Node]
    condition: Optional[Node]
    increment: Optional[Node]
    body: Node


@dataclass
class ReturnStatement(Node):
    value: Optional[Node] = None


# =====================================================
# EXPRESSIONS
# =====================================================
@dataclass
class BinaryExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass
class UnaryExpression(Node):
    operator: str
    argument: Node


@dataclass
class LogicalExpression(Node):
    operator: str  # '&&' | '||'
    left: Node
    right: Node


@dataclass
class AssignmentExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass
class CallExpression(Node):
    callee: Node
    arguments: List[Node] = field(default_factory=list)


@dataclass
class MemberExpression(Node):
    object: Node
    property: 'Identifier'


@dataclass
class Identifier(Node):
    name: str


@dataclass
class Literal(Node):
    value: object  # float | str | bool | None


@dataclass
class GroupExpression(Node):
    expression: Node
