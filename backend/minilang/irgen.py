"""Lower the AST to a flat list of three-address instructions."""

from __future__ import annotations

import logging

from .constants import TEMP_PREFIX
from .errors import IRGenerationError
from .ir import Instruction, Opcode, Value
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

BINARY_OPCODES = {
    '+': Opcode.ADD, '-': Opcode.SUB, '*': Opcode.MUL, '/': Opcode.DIV,
    '==': Opcode.EQ, '!=': Opcode.NEQ,
    '<': Opcode.LT, '<=': Opcode.LTE, '>': Opcode.GT, '>=': Opcode.GTE,
}
UNARY_OPCODES = {'-': Opcode.NEG, '!': Opcode.NOT}


log = logging.getLogger(__name__)


class IRGenerator:
    def __init__(self):
        self.tac = []
        self.temp_count = 0
        self.label_count = 0

    def generate(self, program):
        self.tac = []
        self.temp_count = 0
        self.label_count = 0
        self.gen(program)
        log.debug("lowered program to %d instructions, %d temps, %d labels",
                  len(self.tac), self.temp_count, self.label_count)
        return self.tac

    def emit(self, op, *args):
        self.tac.append(Instruction(op, tuple(args)))

    def new_temp(self):
        name = f"{TEMP_PREFIX}{self.temp_count}"
        self.temp_count += 1
        return name

    def new_label(self, purpose):
        name = f"{purpose}_{self.label_count}"
        self.label_count += 1
        return name

    # =====================================================
    # STATEMENTS
    # =====================================================
    def gen(self, node):
        if isinstance(node, Program):
            for s in node.body:
                self.gen(s)
        elif isinstance(node, VariableDeclaration):
            if node.initializer is not None:
                t = self.gen_expr(node.initializer)
                self.emit(Opcode.STORE, t, node.name)
            else:
                self.emit(Opcode.DECLARE, node.name)
        elif isinstance(node, FunctionDeclaration):
            self.emit(Opcode.FUNCTION_START, node.name, tuple(node.params))
            self.gen(node.body)
            self.emit(Opcode.FUNCTION_END, node.name)
        elif isinstance(node, BlockStatement):
            self.emit(Opcode.BLOCK_START)
            for s in node.body:
                self.gen(s)
            self.emit(Opcode.BLOCK_END)
        elif isinstance(node, ExpressionStatement):
            self.gen_expr(node.expression)
        elif isinstance(node, IfStatement):
            self.gen_if(node)
        elif isinstance(node, WhileStatement):
            l_start = self.new_label('while')
            l_end = self.new_label('endwhile')
            self.emit(Opcode.LABEL, l_start)
            tcond = self.gen_expr(node.condition)
            self.emit(Opcode.JUMP_IF_FALSE, tcond, l_end)
            self.gen(node.body)
            self.emit(Opcode.JUMP, l_start)
            self.emit(Opcode.LABEL, l_end)
        elif isinstance(node, ForStatement):
            self.gen_for(node)
        elif isinstance(node, ReturnStatement):
            if node.value is not None:
                self.emit(Opcode.RETURN, self.gen_expr(node.value))
            else:
                self.emit(Opcode.RETURN)
        else:
            raise IRGenerationError(f"Unknown node type: {type(node).__name__}", node)

    def gen_if(self, node):
        tcond = self.gen_expr(node.condition)
        l_else = self.new_label('else')
        l_end = self.new_label('endif')
        self.emit(Opcode.JUMP_IF_FALSE, tcond, l_else)
        self.gen(node.then_branch)
        self.emit(Opcode.JUMP, l_end)
        self.emit(Opcode.LABEL, l_else)
        if node.else_branch is not None:
            self.gen(node.else_branch)
        self.emit(Opcode.LABEL, l_end)

    def gen_for(self, node):
        l_start = self.new_label('for')
        l_update = self.new_label('forupdate')
        l_end = self.new_label('endfor')
        if node.initializer is not None:
            self.gen(node.initializer)
        self.emit(Opcode.LABEL, l_start)
        if node.condition is not None:
            tcond = self.gen_expr(node.condition)
            self.emit(Opcode.JUMP_IF_FALSE, tcond, l_end)
        self.gen(node.body)
        self.emit(Opcode.LABEL, l_update)
        if node.increment is not None:
            self.gen_expr(node.increment)
        self.emit(Opcode.JUMP, l_start)
        self.emit(Opcode.LABEL, l_end)

    # =====================================================
    # EXPRESSIONS (each returns the name holding its value)
    # =====================================================
    def gen_expr(self, expr):
        if isinstance(expr, Literal):
            dest = self.new_temp()
            self.emit(Opcode.CONST, Value(expr.value), dest)
            return dest
        if isinstance(expr, Identifier):
            dest = self.new_temp()
            self.emit(Opcode.LOAD, expr.name, dest)
            return dest
        if isinstance(expr, GroupExpression):
            return self.gen_expr(expr.expression)
        if isinstance(expr, BinaryExpression):
            a = self.gen_expr(expr.left)
            b = self.gen_expr(expr.right)
            dest = self.new_temp()
            op = BINARY_OPCODES.get(expr.operator)
            if op is None:
                raise IRGenerationError(f"Unknown binary operator: {expr.operator}", expr)
            self.emit(op, a, b, dest)
            return dest
        if isinstance(expr, UnaryExpression):
            t = self.gen_expr(expr.argument)
            dest = self.new_temp()
            op = UNARY_OPCODES.get(expr.operator)
            if op is None:
                raise IRGenerationError(f"Unknown unary operator: {expr.operator}", expr)
            self.emit(op, t, dest)
            return dest
        if isinstance(expr, LogicalExpression):
            return self.gen_logical(expr)
        if isinstance(expr, AssignmentExpression):
            return self.gen_assignment(expr)
        if isinstance(expr, CallExpression):
            args = tuple(self.gen_expr(a) for a in expr.arguments)
            dest = self.new_temp()
            if isinstance(expr.callee, Identifier):
                self.emit(Opcode.CALL, expr.callee.name, args, dest)
            else:
                callee = self.gen_expr(expr.callee)
                self.emit(Opcode.CALL_INDIRECT, callee, args, dest)
            return dest
        if isinstance(expr, MemberExpression):
            obj = self.gen_expr(expr.object)
            dest = self.new_temp()
            self.emit(Opcode.LOAD_PROP, obj, expr.property.name, dest)
            return dest
        raise IRGenerationError(f"Unknown node type: {type(expr).__name__}", expr)

    def gen_logical(self, expr):
        if expr.operator == '&&':
            purpose, jump = 'and_skip', Opcode.JUMP_IF_FALSE
        elif expr.operator == '||':
            purpose, jump = 'or_skip', Opcode.JUMP_IF_TRUE
        else:
            raise IRGenerationError(f"Unknown logical operator: {expr.operator}", expr)
        result = self.new_temp()
        left = self.gen_expr(expr.left)
        l_skip = self.new_label(purpose)
        self.emit(Opcode.COPY, left, result)
        self.emit(jump, left, l_skip)
        right = self.gen_expr(expr.right)
        self.emit(Opcode.COPY, right, result)
        self.emit(Opcode.LABEL, l_skip)
        return result

    def gen_assignment(self, expr):
        value = self.gen_expr(expr.right)
        target = expr.left
        if isinstance(target, Identifier):
            self.emit(Opcode.STORE, value, target.name)
        elif isinstance(target, MemberExpression):
            obj = self.gen_expr(target.object)
            self.emit(Opcode.STORE_PROP, obj, target.property.name, value)
        else:
            raise IRGenerationError("Invalid assignment target", expr)
        return value


def generate_ir(program):
    return IRGenerator().generate(program)
