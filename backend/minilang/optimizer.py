"""IR optimizer: four passes run in rounds until none of them changes anything.

Each pass takes an instruction list and returns ``(new_list, changed)``; the
input list is never modified.  None of the passes adds instructions, so the
round loop always reaches a fixpoint.
"""

from __future__ import annotations

import logging
import math
import operator

from .ir import (
    BINARY_OPS,
    SCOPE_ENTRIES,
    SOURCE_SLOTS,
    UNARY_OPS,
    Instruction,
    Opcode,
    Value,
    is_number,
    is_temp,
    iter_names,
)

log = logging.getLogger(__name__)

_UNKNOWN = object()


def divide(a, b):
    """IEEE division: x/0 is a signed infinity, 0/0 is NaN."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


BINARY_FUNCS = {
    Opcode.ADD: operator.add,
    Opcode.SUB: operator.sub,
    Opcode.MUL: operator.mul,
    Opcode.DIV: divide,
    Opcode.EQ: operator.eq,
    Opcode.NEQ: operator.ne,
    Opcode.LT: operator.lt,
    Opcode.LTE: operator.le,
    Opcode.GT: operator.gt,
    Opcode.GTE: operator.ge,
}


# =====================================================
# CONSTANT FOLDING
# =====================================================
def find_previous_const(tac, index, name):
    """Value of the nearest CONST before ``index`` that defines ``name``."""
    for i in range(index - 1, -1, -1):
        instr = tac[i]
        if instr.op == Opcode.CONST and instr.args[1] == name:
            value = instr.args[0]
            return value.value if isinstance(value, Value) else value
    return _UNKNOWN


def _resolve(tac, index, operand):
    if isinstance(operand, Value):
        return operand.value
    if isinstance(operand, str):
        return find_previous_const(tac, index, operand)
    return _UNKNOWN


def fold_constants(tac):
    newtac = []
    changed = False
    for i, instr in enumerate(tac):
        if instr.op in BINARY_OPS:
            a = _resolve(tac, i, instr.args[0])
            b = _resolve(tac, i, instr.args[1])
            if is_number(a) and is_number(b):
                val = BINARY_FUNCS[instr.op](a, b)
                newtac.append(Instruction(Opcode.CONST, (Value(val), instr.args[2])))
                changed = True
                continue
        elif instr.op in UNARY_OPS:
            a = _resolve(tac, i, instr.args[0])
            if is_number(a) or isinstance(a, bool):
                val = -a if instr.op == Opcode.NEG else (not a)
                newtac.append(Instruction(Opcode.CONST, (Value(val), instr.args[1])))
                changed = True
                continue
        newtac.append(instr)
    return newtac, changed


# =====================================================
# DEAD CODE ELIMINATION
# =====================================================
def dead_code_elimination(tac):
    uses = set()
    targets = set()
    for instr in tac:
        target = instr.jump_target()
        if target is not None:
            targets.add(target)
        # the destination of STORE/CONST is a definition, not a use
        operands = instr.args[:1] if instr.op in (Opcode.STORE, Opcode.CONST) else instr.args
        for arg in operands:
            uses.update(iter_names(arg))

    result = []
    changed = False
    for instr in tac:
        if instr.op in (Opcode.STORE, Opcode.CONST):
            dest = instr.args[1]
            # named variables may be read from another scope; only temporaries go
            if is_temp(dest) and dest not in uses:
                changed = True
                continue
        elif instr.op == Opcode.LABEL and instr.args[0] not in targets:
            changed = True
            continue
        result.append(instr)
    return result, changed


# =====================================================
# CONSTANT PROPAGATION
# =====================================================
def _substitute(instr, constants):
    args = list(instr.args)
    replaced = False
    for slot in SOURCE_SLOTS.get(instr.op, ()):
        if slot >= len(args):
            continue
        arg = args[slot]
        if isinstance(arg, tuple):
            new = tuple(constants.get(a, a) if isinstance(a, str) else a for a in arg)
            if new != arg:
                args[slot] = new
                replaced = True
        elif isinstance(arg, str) and arg in constants:
            args[slot] = constants[arg]
            replaced = True
    if not replaced:
        return instr
    return Instruction(instr.op, tuple(args))


def propagate_constants(tac):
    # Cleared on scope entry only; a value known inside a block stays known after it.
    constants = {}
    newtac = []
    changed = False
    for instr in tac:
        if instr.op == Opcode.CONST:
            constants[instr.args[1]] = instr.args[0]
        elif instr.op == Opcode.STORE:
            src, dest = instr.args
            known = src if isinstance(src, Value) else constants.get(src)
            if known is not None:
                constants[dest] = known
            else:
                constants.pop(dest, None)
        elif instr.op == Opcode.LOAD:
            if instr.args[0] in constants:
                newtac.append(Instruction(Opcode.CONST, (constants[instr.args[0]], instr.args[1])))
                changed = True
                continue
        elif instr.op in SCOPE_ENTRIES:
            constants.clear()

        new = _substitute(instr, constants)
        if new is not instr:
            changed = True
        newtac.append(new)
    return newtac, changed


# =====================================================
# COMMON SUBEXPRESSION ELIMINATION
# =====================================================
def eliminate_common_subexpressions(tac):
    # Same scope-entry-only clearing as constant propagation.
    exprs = {}
    newtac = []
    changed = False
    for instr in tac:
        if instr.op in BINARY_OPS:
            key = (instr.op, instr.args[0], instr.args[1])
            if key in exprs:
                newtac.append(Instruction(Opcode.COPY, (exprs[key], instr.args[2])))
                changed = True
                continue
            exprs[key] = instr.args[2]
        elif instr.op in (Opcode.STORE, Opcode.CALL) or instr.op in SCOPE_ENTRIES:
            exprs.clear()
        newtac.append(instr)
    return newtac, changed


class Optimizer:
    passes = (
        fold_constants,
        dead_code_elimination,
        propagate_constants,
        eliminate_common_subexpressions,
    )

    def __init__(self):
        self.rounds = 0

    def optimize(self, tac):
        current = list(tac)
        self.rounds = 0
        changed = True
        while changed:
            changed = False
            self.rounds += 1
            for opt_pass in self.passes:
                current, pass_changed = opt_pass(current)
                if pass_changed:
                    log.debug("round %d: %s changed the IR (%d instructions)",
                              self.rounds, opt_pass.__name__, len(current))
                    changed = True
        log.debug("optimizer reached a fixpoint after %d round(s)", self.rounds)
        return current


def optimize(tac):
    return Optimizer().optimize(tac)
