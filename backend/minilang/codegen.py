"""Emit the simplified goto-based target text from optimized IR."""

from __future__ import annotations

from .constants import PRINT_BUILTIN
from .errors import CodeGenerationError
from .ir import Opcode, format_operand

INDENT = "  "

PREAMBLE = (
    ("// Generated JavaScript code", 0),
    ("// This is a simplified target language", 0),
    ("", 0),
    ("// Runtime functions", 0),
    (f"function {PRINT_BUILTIN}(value) {{", 0),
    ("console.log(value);", 1),
    ("}", 0),
    ("", 0),
)

BINARY_SYMBOLS = {
    Opcode.ADD: '+',
    Opcode.SUB: '-',
    Opcode.MUL: '*',
    Opcode.DIV: '/',
    Opcode.EQ: '===',
    Opcode.NEQ: '!==',
    Opcode.LT: '<',
    Opcode.LTE: '<=',
    Opcode.GT: '>',
    Opcode.GTE: '>=',
}


class CodeGenerator:
    def __init__(self):
        self.output = []
        self.indent_level = 0

    def generate(self, tac):
        self.output = []
        self.indent_level = 0
        for line, extra in PREAMBLE:
            self.emit_line(line, extra)
        for instr in tac:
            self.process(instr)
        return "\n".join(self.output)

    def emit_line(self, line, extra_indent=0):
        self.output.append(INDENT * (self.indent_level + extra_indent) + line)

    def process(self, instr):
        op = instr.op
        a = [format_operand(x) for x in instr.args]
        if op == Opcode.FUNCTION_START:
            self.emit_line(f"function {a[0]}({', '.join(format_operand(p) for p in instr.args[1])}) {{")
            self.indent_level += 1
        elif op == Opcode.FUNCTION_END:
            self.indent_level -= 1
            self.emit_line("}")
            self.emit_line("")
        elif op == Opcode.BLOCK_START:
            self.emit_line("{")
            self.indent_level += 1
        elif op == Opcode.BLOCK_END:
            self.indent_level -= 1
            self.emit_line("}")
        elif op == Opcode.DECLARE:
            self.emit_line(f"let {a[0]};")
        elif op in (Opcode.CONST, Opcode.LOAD, Opcode.COPY):
            self.emit_line(f"let {a[1]} = {a[0]};")
        elif op == Opcode.STORE:
            self.emit_line(f"{a[1]} = {a[0]};")
        elif op == Opcode.LOAD_PROP:
            self.emit_line(f"let {a[2]} = {a[0]}.{a[1]};")
        elif op == Opcode.STORE_PROP:
            self.emit_line(f"{a[0]}.{a[1]} = {a[2]};")
        elif op in BINARY_SYMBOLS:
            self.emit_line(f"let {a[2]} = {a[0]} {BINARY_SYMBOLS[op]} {a[1]};")
        elif op == Opcode.NEG:
            self.emit_line(f"let {a[1]} = -{a[0]};")
        elif op == Opcode.NOT:
            self.emit_line(f"let {a[1]} = !{a[0]};")
        elif op == Opcode.LABEL:
            self.emit_line(f"{a[0]}:")
        elif op == Opcode.JUMP:
            self.emit_line(f"goto {a[0]};")
        elif op == Opcode.JUMP_IF_TRUE:
            self.emit_line(f"if ({a[0]}) goto {a[1]};")
        elif op == Opcode.JUMP_IF_FALSE:
            self.emit_line(f"if (!{a[0]}) goto {a[1]};")
        elif op in (Opcode.CALL, Opcode.CALL_INDIRECT):
            call = f"{a[0]}({', '.join(format_operand(x) for x in instr.args[1])})"
            if len(instr.args) > 2 and instr.args[2]:
                self.emit_line(f"let {a[2]} = {call};")
            else:
                self.emit_line(f"{call};")
        elif op == Opcode.RETURN:
            if instr.args:
                self.emit_line(f"return {a[0]};")
            else:
                self.emit_line("return;")
        else:
            raise CodeGenerationError(f"Unknown instruction: {instr.name}", instr)


def generate_code(tac):
    return CodeGenerator().generate(tac)
