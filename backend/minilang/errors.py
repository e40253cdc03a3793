"""Phase errors and the diagnostic record they are reported as."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Phase(str, Enum):
    LEXICAL = 'Lexical Analysis'
    SYNTAX = 'Syntax Analysis'
    SEMANTIC = 'Semantic Analysis'
    IR = 'IR Generation'
    CODEGEN = 'Code Generation'
    UNKNOWN = 'Unknown'


class CompileError(Exception):
    """Base class for every failure a compiler phase reports."""

    phase = Phase.UNKNOWN
    line: Optional[int] = None
    column: Optional[int] = None

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_diagnostic(self):
        return Diagnostic(self.phase, self.message, self.line, self.column)


class LexicalError(CompileError):
    phase = Phase.LEXICAL

    def __init__(self, message, line, column):
        super().__init__(message)
        self.line = line
        self.column = column


class ParseError(CompileError):
    """A syntax error, positioned at the offending token."""

    phase = Phase.SYNTAX

    def __init__(self, message, token):
        super().__init__(message)
        self.token = token
        self.line = token.line
        self.column = token.column


class SemanticError(CompileError):
    # Positions are not surfaced for semantic findings; the node is kept for callers.
    phase = Phase.SEMANTIC

    def __init__(self, message, node):
        super().__init__(message)
        self.node = node


class IRGenerationError(CompileError):
    phase = Phase.IR

    def __init__(self, message, node):
        super().__init__(message)
        self.node = node


class CodeGenerationError(CompileError):
    phase = Phase.CODEGEN

    def __init__(self, message, instruction):
        super().__init__(message)
        self.instruction = instruction


@dataclass(frozen=True)
class Diagnostic:
    phase: Phase
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def format(self):
        text = f"[{self.phase.value}] {self.message}"
        if self.line is not None:
            text += f" at line {self.line}, column {self.column}"
        return text

    def to_dict(self):
        d = {"phase": self.phase.value, "message": self.message}
        if self.line is not None:
            d["line"] = self.line
            d["column"] = self.column
        return d
