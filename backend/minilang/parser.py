"""Recursive-descent parser with panic-mode recovery.

Precedence, lowest first: assignment, ``||``, ``&&``, equality, comparison,
additive, multiplicative, unary, call/member, primary.
"""

from __future__ import annotations

import logging

from .constants import MAX_ARGUMENTS, MAX_PARAMETERS, SYNC_KEYWORDS
from .errors import ParseError
from .lexer import TokenKind as K
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

log = logging.getLogger(__name__)


class Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.errors = []

    def parse(self):
        """Parse the whole token stream; raise the first syntax error found."""
        self.pos = 0
        self.errors = []
        program = self.program()
        if self.errors:
            log.debug("parser recovered from %d syntax error(s)", len(self.errors))
            raise self.errors[0]
        return program

    # ---- token helpers ----
    def peek(self):
        return self.tokens[self.pos]

    def previous(self):
        return self.tokens[self.pos - 1]

    def at_end(self):
        return self.peek().kind == K.EOF

    def advance(self):
        if not self.at_end():
            self.pos += 1
        return self.previous()

    def check(self, kind):
        if self.at_end():
            return False
        return self.peek().kind == kind

    def match(self, *kinds):
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def expect(self, kind, msg):
        if self.check(kind):
            return self.advance()
        raise ParseError(msg, self.peek())

    def synchronize(self):
        self.advance()
        while not self.at_end():
            if self.previous().kind == K.SEMICOLON:
                return
            if self.peek().kind.value in SYNC_KEYWORDS:
                return
            self.advance()

    # ---- declarations ----
    def program(self):
        body = []
        while not self.at_end():
            try:
                body.append(self.declaration())
            except ParseError as e:
                # declaration() already resynchronized; keep scanning for more errors
                self.errors.append(e)
        return Program(body)

    def declaration(self):
        try:
            if self.match(K.VAR):
                return self.var_declaration()
            if self.match(K.FUNCTION):
                return self.function_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            raise

    def var_declaration(self):
        name = self.expect(K.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.match(K.EQUAL):
            initializer = self.expression()
        self.expect(K.SEMICOLON, "Expect ';' after variable declaration.")
        return VariableDeclaration(name.text, initializer)

    def function_declaration(self):
        name = self.expect(K.IDENTIFIER, "Expect function name.")
        self.expect(K.LEFT_PAREN, "Expect '(' after function name.")
        params = []
        if not self.check(K.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_PARAMETERS:
                    raise ParseError(f"Cannot have more than {MAX_PARAMETERS} parameters.", self.peek())
                params.append(self.expect(K.IDENTIFIER, "Expect parameter name.").text)
                if not self.match(K.COMMA):
                    break
        self.expect(K.RIGHT_PAREN, "Expect ')' after parameters.")
        self.expect(K.LEFT_BRACE, "Expect '{' before function body.")
        body = self.block()
        return FunctionDeclaration(name.text, params, body)

    # ---- statements ----
    def statement(self):
        if self.match(K.IF):
            return self.if_statement()
        if self.match(K.WHILE):
            return self.while_statement()
        if self.match(K.FOR):
            return self.for_statement()
        if self.match(K.RETURN):
            return self.return_statement()
        if self.match(K.LEFT_BRACE):
            return self.block()
        return self.expression_statement()

    def if_statement(self):
        self.expect(K.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.expect(K.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.statement()
        else_branch = None
        if self.match(K.ELSE):
            else_branch = self.statement()
        return IfStatement(condition, then_branch, else_branch)

    def while_statement(self):
        self.expect(K.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.expect(K.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.statement()
        return WhileStatement(condition, body)

    def for_statement(self):
        self.expect(K.LEFT_PAREN, "Expect '(' after 'for'.")
        if self.match(K.SEMICOLON):
            initializer = None
        elif self.match(K.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(K.SEMICOLON):
            condition = self.expression()
        self.expect(K.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(K.RIGHT_PAREN):
            increment = self.expression()
        self.expect(K.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()
        return ForStatement(initializer, condition, increment, body)

    def return_statement(self):
        value = None
        if not self.check(K.SEMICOLON):
            value = self.expression()
        self.expect(K.SEMICOLON, "Expect ';' after return value.")
        return ReturnStatement(value)

    def block(self):
        stmts = []
        while not self.check(K.RIGHT_BRACE) and not self.at_end():
            stmts.append(self.declaration())
        self.expect(K.RIGHT_BRACE, "Expect '}' after block.")
        return BlockStatement(stmts)

    def expression_statement(self):
        expr = self.expression()
        self.expect(K.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(expr)

    # ---- expressions ----
    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logical_or()
        if self.match(K.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if isinstance(expr, Identifier):
                return AssignmentExpression('=', expr, value)
            raise ParseError("Invalid assignment target.", equals)
        return expr

    def logical_or(self):
        node = self.logical_and()
        while self.match(K.OR):
            op = self.previous().text
            node = LogicalExpression(op, node, self.logical_and())
        return node

    def logical_and(self):
        node = self.equality()
        while self.match(K.AND):
            op = self.previous().text
            node = LogicalExpression(op, node, self.equality())
        return node

    def equality(self):
        node = self.comparison()
        while self.match(K.BANG_EQUAL, K.EQUAL_EQUAL):
            op = self.previous().text
            node = BinaryExpression(op, node, self.comparison())
        return node

    def comparison(self):
        node = self.additive()
        while self.match(K.GREATER, K.GREATER_EQUAL, K.LESS, K.LESS_EQUAL):
            op = self.previous().text
            node = BinaryExpression(op, node, self.additive())
        return node

    def additive(self):
        node = self.multiplicative()
        while self.match(K.MINUS, K.PLUS):
            op = self.previous().text
            node = BinaryExpression(op, node, self.multiplicative())
        return node

    def multiplicative(self):
        node = self.unary()
        while self.match(K.SLASH, K.STAR):
            op = self.previous().text
            node = BinaryExpression(op, node, self.unary())
        return node

    def unary(self):
        if self.match(K.BANG, K.MINUS):
            op = self.previous().text
            return UnaryExpression(op, self.unary())
        return self.call()

    def call(self):
        node = self.primary()
        while True:
            if self.match(K.LEFT_PAREN):
                node = self.finish_call(node)
            elif self.match(K.DOT):
                name = self.expect(K.IDENTIFIER, "Expect property name after '.'.")
                node = MemberExpression(node, Identifier(name.text))
            else:
                break
        return node

    def finish_call(self, callee):
        args = []
        if not self.check(K.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGUMENTS:
                    raise ParseError(f"Cannot have more than {MAX_ARGUMENTS} arguments.", self.peek())
                args.append(self.expression())
                if not self.match(K.COMMA):
                    break
        self.expect(K.RIGHT_PAREN, "Expect ')' after arguments.")
        return CallExpression(callee, args)

    def primary(self):
        if self.match(K.FALSE):
            return Literal(False)
        if self.match(K.TRUE):
            return Literal(True)
        if self.match(K.NULL):
            return Literal(None)
        if self.match(K.NUMBER):
            return Literal(float(self.previous().text))
        if self.match(K.STRING_LITERAL):
            return Literal(self.previous().text)
        if self.match(K.IDENTIFIER):
            return Identifier(self.previous().text)
        if self.match(K.LEFT_PAREN):
            node = self.expression()
            self.expect(K.RIGHT_PAREN, "Expect ')' after expression.")
            return GroupExpression(node)
        raise ParseError("Expect expression.", self.peek())


def parse(tokens):
    return Parser(tokens).parse()
