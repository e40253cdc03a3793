"""Three-address IR: opcodes, operands and instructions.

An instruction is an opcode plus a tuple of operands.  An operand is one of

- a name (``str``): temporary, variable, label, function or property name
- a literal ``Value``
- a nested tuple of operands (call arguments, function parameters)

Control flow is expressed only with LABEL / JUMP / JUMP_IF_TRUE /
JUMP_IF_FALSE.  Instructions are immutable; passes build new lists.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple

from .constants import TEMP_PREFIX


class Opcode(str, Enum):
    DECLARE = 'DECLARE'
    CONST = 'CONST'
    LOAD = 'LOAD'
    STORE = 'STORE'
    LOAD_PROP = 'LOAD_PROP'
    STORE_PROP = 'STORE_PROP'
    ADD = 'ADD'
    SUB = 'SUB'
    MUL = 'MUL'
    DIV = 'DIV'
    NEG = 'NEG'
    NOT = 'NOT'
    EQ = 'EQ'
    NEQ = 'NEQ'
    LT = 'LT'
    LTE = 'LTE'
    GT = 'GT'
    GTE = 'GTE'
    COPY = 'COPY'
    LABEL = 'LABEL'
    JUMP = 'JUMP'
    JUMP_IF_TRUE = 'JUMP_IF_TRUE'
    JUMP_IF_FALSE = 'JUMP_IF_FALSE'
    CALL = 'CALL'
    CALL_INDIRECT = 'CALL_INDIRECT'
    RETURN = 'RETURN'
    FUNCTION_START = 'FUNCTION_START'
    FUNCTION_END = 'FUNCTION_END'
    BLOCK_START = 'BLOCK_START'
    BLOCK_END = 'BLOCK_END'


BINARY_OPS = frozenset({
    Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV,
    Opcode.EQ, Opcode.NEQ, Opcode.LT, Opcode.LTE, Opcode.GT, Opcode.GTE,
})
UNARY_OPS = frozenset({Opcode.NEG, Opcode.NOT})
JUMPS = frozenset({Opcode.JUMP, Opcode.JUMP_IF_TRUE, Opcode.JUMP_IF_FALSE})
SCOPE_ENTRIES = frozenset({Opcode.FUNCTION_START, Opcode.BLOCK_START})

# Operand slots that are read as values.  Destinations, labels, function and
# property names are never listed here.
SOURCE_SLOTS = {
    Opcode.DECLARE: (),
    Opcode.CONST: (),
    Opcode.LOAD: (),
    Opcode.STORE: (0,),
    Opcode.LOAD_PROP: (0,),
    Opcode.STORE_PROP: (0, 2),
    Opcode.NEG: (0,),
    Opcode.NOT: (0,),
    Opcode.COPY: (0,),
    Opcode.LABEL: (),
    Opcode.JUMP: (),
    Opcode.JUMP_IF_TRUE: (0,),
    Opcode.JUMP_IF_FALSE: (0,),
    Opcode.CALL: (1,),
    Opcode.CALL_INDIRECT: (0, 1),
    Opcode.RETURN: (0,),
    Opcode.FUNCTION_START: (),
    Opcode.FUNCTION_END: (),
    Opcode.BLOCK_START: (),
    Opcode.BLOCK_END: (),
}
for _op in BINARY_OPS:
    SOURCE_SLOTS[_op] = (0, 1)


@dataclass(frozen=True)
class Value:
    """A literal operand: number, string, bool or None."""

    value: object

    # 1 == True in Python; literal identity must keep their types apart
    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return type(self.value) is type(other.value) and self.value == other.value

    def __hash__(self):
        return hash((type(self.value), self.value))

    def __str__(self):
        return format_value(self.value)


@dataclass(frozen=True)
class Instruction:
    op: Opcode
    args: Tuple = ()

    @property
    def name(self):
        return getattr(self.op, 'value', self.op)

    def __str__(self):
        if not self.args:
            return self.name
        return f"{self.name} " + ", ".join(format_operand(a) for a in self.args)

    def to_dict(self):
        return {"op": self.name, "args": [operand_to_plain(a) for a in self.args]}

    def jump_target(self):
        if self.op == Opcode.JUMP:
            return self.args[0]
        if self.op in JUMPS:
            return self.args[1]
        return None


def is_temp(operand):
    return isinstance(operand, str) and operand.startswith(TEMP_PREFIX)


def is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_value(value):
    """Render a literal the way the emitted target spells it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return format_number(value)
    return str(value)


def format_number(value):
    """Shortest round-trip digits, laid out like JavaScript's Number#toString."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    # position of the decimal point relative to the first digit
    point = exponent + len(digit_tuple)
    k = len(digits)
    if k <= point <= 21:
        text = digits + "0" * (point - k)
    elif 0 < point <= 21:
        text = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        e = point - 1
        mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def format_operand(operand):
    if isinstance(operand, Value):
        return format_value(operand.value)
    if isinstance(operand, tuple):
        return "[" + ", ".join(format_operand(o) for o in operand) + "]"
    return str(operand)


def operand_to_plain(operand):
    if isinstance(operand, Value):
        return {"value": operand.value}
    if isinstance(operand, tuple):
        return [operand_to_plain(o) for o in operand]
    return operand


def iter_names(operand):
    """Yield every name inside an operand, descending into nested tuples."""
    if isinstance(operand, tuple):
        for o in operand:
            yield from iter_names(o)
    elif isinstance(operand, str):
        yield operand
