"""Scope-based semantic checks.

The analyzer walks the AST once, keeping a stack of scopes (innermost last).
It never raises: every finding is collected as a ``SemanticError`` and the
whole list is returned from ``analyze``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from .constants import PRINT_BUILTIN
from .errors import SemanticError
from .nodes import (
    AssignmentExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    ForStatement,
    FunctionDeclaration,
    GroupExpression,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    Program,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
    WhileStatement,
)

VARIABLE = 'variable'
FUNCTION = 'function'
PARAMETER = 'parameter'


@dataclass
class Symbol:
    kind: str
    initialized: bool = False
    used: bool = False


class ScopeStack:
    """Stack of name -> Symbol mappings, owned by a single analysis."""

    def __init__(self):
        self.scopes: List[Dict[str, Symbol]] = [{}]

    @property
    def current(self):
        return self.scopes[-1]

    def push(self):
        self.scopes.append({})

    def pop(self):
        return self.scopes.pop()

    def declare(self, name, symbol):
        self.current[name] = symbol

    def lookup(self, name) -> Optional[Symbol]:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None


class SemanticAnalyzer:
    def __init__(self):
        self.scopes = ScopeStack()
        self.errors: List[SemanticError] = []

    def analyze(self, node):
        self.scopes = ScopeStack()
        self.scopes.declare(PRINT_BUILTIN, Symbol(FUNCTION, initialized=True))
        self.errors = []
        self.visit(node)
        return self.errors

    def error(self, msg, node):
        self.errors.append(SemanticError(msg, node))

    def visit(self, node):
        if isinstance(node, Program):
            for s in node.body:
                self.visit(s)
        elif isinstance(node, VariableDeclaration):
            self.visit_variable_declaration(node)
        elif isinstance(node, FunctionDeclaration):
            self.visit_function_declaration(node)
        elif isinstance(node, BlockStatement):
            self.enter_scope()
            for s in node.body:
                self.visit(s)
            self.exit_scope(node)
        elif isinstance(node, ExpressionStatement):
            self.visit(node.expression)
        elif isinstance(node, IfStatement):
            self.visit(node.condition)
            self.visit(node.then_branch)
            if node.else_branch is not None:
                self.visit(node.else_branch)
        elif isinstance(node, WhileStatement):
            self.visit(node.condition)
            self.visit(node.body)
        elif isinstance(node, ForStatement):
            self.enter_scope()
            for part in (node.initializer, node.condition, node.increment):
                if part is not None:
                    self.visit(part)
            self.visit(node.body)
            self.exit_scope(node)
        elif isinstance(node, ReturnStatement):
            if node.value is not None:
                self.visit(node.value)
        elif isinstance(node, (BinaryExpression, LogicalExpression)):
            self.visit(node.left)
            self.visit(node.right)
        elif isinstance(node, UnaryExpression):
            self.visit(node.argument)
        elif isinstance(node, AssignmentExpression):
            self.visit_assignment(node)
        elif isinstance(node, CallExpression):
            self.visit_call(node)
        elif isinstance(node, MemberExpression):
            # the property is a plain name, never resolved
            self.visit(node.object)
        elif isinstance(node, Identifier):
            self.visit_identifier(node)
        elif isinstance(node, GroupExpression):
            self.visit(node.expression)
        elif isinstance(node, Literal):
            pass
        else:
            raise TypeError(f"unexpected AST node {node!r}")

    def visit_variable_declaration(self, node):
        if node.name in self.scopes.current:
            self.error(f"Variable '{node.name}' already declared in this scope", node)
        else:
            self.scopes.declare(node.name, Symbol(VARIABLE, initialized=node.initializer is not None))
        if node.initializer is not None:
            self.visit(node.initializer)

    def visit_function_declaration(self, node):
        if node.name in self.scopes.current:
            self.error(f"Function '{node.name}' already declared in this scope", node)
        else:
            # registered before the body so recursive calls resolve
            self.scopes.declare(node.name, Symbol(FUNCTION, initialized=True))

        self.enter_scope()
        for param in node.params:
            self.scopes.declare(param, Symbol(PARAMETER, initialized=True))
        self.visit(node.body)
        self.exit_scope(node)

    def visit_assignment(self, node):
        target = node.left
        if isinstance(target, Identifier):
            symbol = self.scopes.lookup(target.name)
            if symbol is None:
                self.error(f"Variable '{target.name}' used before declaration", node)
            else:
                symbol.initialized = True
        else:
            self.visit(target)
        self.visit(node.right)

    def visit_call(self, node):
        if isinstance(node.callee, Identifier):
            # resolved here rather than as a plain read, so one bad call gives one error
            name = node.callee.name
            func = self.scopes.lookup(name)
            if func is None:
                self.error(f"Function '{name}' called before declaration", node)
            else:
                func.used = True
                if func.kind != FUNCTION:
                    self.error(f"'{name}' is not a function", node)
        else:
            self.visit(node.callee)
        for arg in node.arguments:
            self.visit(arg)

    def visit_identifier(self, node):
        symbol = self.scopes.lookup(node.name)
        if symbol is None:
            self.error(f"Variable '{node.name}' used before declaration", node)
            return
        symbol.used = True
        if not symbol.initialized:
            self.error(f"Variable '{node.name}' used before initialization", node)

    def enter_scope(self):
        self.scopes.push()

    def exit_scope(self, owner):
        for name, symbol in self.scopes.pop().items():
            if symbol.used:
                continue
            if symbol.kind == PARAMETER:
                self.error(f"Parameter '{name}' is never used", owner)
            elif symbol.kind == FUNCTION:
                self.error(f"Function '{name}' is declared but never used", Identifier(name))
            else:
                self.error(f"Variable '{name}' is declared but never used", Identifier(name))


def analyze(program):
    return SemanticAnalyzer().analyze(program)
