"""Compiler driver: run every phase in order and collect diagnostics.

lexer -> parser -> semantic analysis -> IR -> optimizer -> code generation
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .codegen import CodeGenerator
from .errors import CompileError, Diagnostic, Phase
from .irgen import IRGenerator
from .lexer import Lexer
from .optimizer import Optimizer
from .parser import Parser
from .semantic import SemanticAnalyzer

log = logging.getLogger(__name__)


@dataclass
class CompilationResult:
    success: bool = True
    tokens: Optional[list] = None
    ast: Optional[object] = None
    ir: Optional[list] = None
    optimized_ir: Optional[list] = None
    code: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def to_dict(self):
        return {
            "success": self.success,
            "tokens": None if self.tokens is None else [
                {"kind": t.kind.value, "text": t.text, "line": t.line, "column": t.column}
                for t in self.tokens
            ],
            "ast": None if self.ast is None else self.ast.to_dict(),
            "ir": None if self.ir is None else [i.to_dict() for i in self.ir],
            "optimizedIr": None if self.optimized_ir is None else [i.to_dict() for i in self.optimized_ir],
            "code": self.code,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


class Compiler:
    """Runs one source string through all phases.

    Phase objects are created per ``compile`` call, so one ``Compiler`` can be
    reused but must not be shared by overlapping calls.
    """

    def compile(self, source):
        result = CompilationResult()
        try:
            self._run(source, result)
        except CompileError as e:
            log.info("%s failed: %s", e.phase.value, e.message)
            result.success = False
            result.diagnostics.append(e.to_diagnostic())
        except Exception as e:
            log.exception("unexpected failure while compiling")
            result.success = False
            result.diagnostics.append(Diagnostic(Phase.UNKNOWN, str(e)))
        return result

    def _run(self, source, result):
        log.debug("lexing %d characters", len(source))
        result.tokens = Lexer(source).tokenize()

        log.debug("parsing %d tokens", len(result.tokens))
        result.ast = Parser(result.tokens).parse()

        semantic_errors = SemanticAnalyzer().analyze(result.ast)
        if semantic_errors:
            log.info("semantic analysis found %d error(s)", len(semantic_errors))
            result.success = False
            for err in semantic_errors:
                # positions are dropped for semantic findings
                result.diagnostics.append(Diagnostic(Phase.SEMANTIC, err.message))
            return

        result.ir = IRGenerator().generate(result.ast)
        log.debug("generated %d IR instructions", len(result.ir))

        result.optimized_ir = Optimizer().optimize(result.ir)
        log.debug("optimized IR down to %d instructions", len(result.optimized_ir))

        result.code = CodeGenerator().generate(result.optimized_ir)


def compile_source(source):
    return Compiler().compile(source)
