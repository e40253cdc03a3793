"""minilang: a six-phase teaching compiler for a small imperative language."""

from .codegen import CodeGenerator, generate_code
from .compiler import CompilationResult, Compiler, compile_source
from .errors import (
    CodeGenerationError,
    CompileError,
    Diagnostic,
    IRGenerationError,
    LexicalError,
    ParseError,
    Phase,
    SemanticError,
)
from .ir import Instruction, Opcode, Value
from .irgen import IRGenerator, generate_ir
from .lexer import Lexer, Token, TokenKind, tokenize
from .optimizer import Optimizer, optimize
from .parser import Parser, parse
from .semantic import SemanticAnalyzer, analyze

__all__ = [
    "CodeGenerationError",
    "CodeGenerator",
    "CompilationResult",
    "CompileError",
    "Compiler",
    "Diagnostic",
    "IRGenerationError",
    "IRGenerator",
    "Instruction",
    "LexicalError",
    "Lexer",
    "Opcode",
    "Optimizer",
    "ParseError",
    "Parser",
    "Phase",
    "SemanticAnalyzer",
    "SemanticError",
    "Token",
    "TokenKind",
    "Value",
    "analyze",
    "compile_source",
    "generate_code",
    "generate_ir",
    "optimize",
    "parse",
    "tokenize",
]
