"""
Lox Session
Runs source strings through scan -> parse -> resolve -> interpret

A Lox session owns one Interpreter, so globals defined by one run() are
visible to the next. This is what the REPL relies on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from pylox.errors import Diagnostic, LoxRuntimeError
from pylox.evaluator import EvalOptions, Interpreter
from pylox.parser import Parser
from pylox.resolver import Resolver
from pylox.scanner import Scanner
from pylox.types import Token, TokenType

logger = logging.getLogger(__name__)


#==============================================================================
# Run Results
#==============================================================================

class ExitStatus(IntEnum):
    """Process exit statuses, following the sysexits.h convention"""
    OK = 0
    USAGE = 64
    STATIC_ERROR = 65
    RUNTIME_ERROR = 70


@dataclass
class RunResult:
    """Outcome of running one source string"""
    status: ExitStatus
    diagnostics: List[Diagnostic] = field(default_factory=list)
    runtime_error: Optional[LoxRuntimeError] = None

    @property
    def ok(self) -> bool:
        return self.status == ExitStatus.OK


#==============================================================================
# Session
#==============================================================================

class Lox:
    """An interpreter session"""

    def __init__(self, options: Optional[EvalOptions] = None):
        self.interpreter = Interpreter(options)

    def run(self, source: str) -> RunResult:
        """
        Run one source string.

        Scan and parse errors are reported together; resolve errors are
        reported only for programs that parsed. Any static error prevents
        execution. The first runtime error stops execution. Exhausting the
        host stack in any stage is reported as a stack overflow.

        Args:
            source: Program text

        Returns:
            RunResult with the exit status and any diagnostics
        """
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()

        try:
            return self._run_tokens(tokens, scanner.errors)
        except RecursionError:
            # Fatal: the host stack is exhausted; reported, never swallowed
            error = LoxRuntimeError.stack_overflow(_last_line_token(tokens))
            logger.warning("Host recursion limit exceeded")
            return RunResult(ExitStatus.RUNTIME_ERROR, runtime_error=error)

    def _run_tokens(self, tokens: List[Token], scan_errors: List[Diagnostic]) -> RunResult:
        parser = Parser(tokens)
        statements = parser.parse()

        diagnostics = [*scan_errors, *parser.errors]
        if diagnostics:
            diagnostics.sort(key=lambda d: d.line)
            logger.warning(f"{len(diagnostics)} syntax error(s); not executing")
            return RunResult(ExitStatus.STATIC_ERROR, diagnostics)

        resolution = Resolver().resolve(statements)
        if not resolution.valid:
            logger.warning(f"{len(resolution.errors)} resolution error(s); not executing")
            return RunResult(ExitStatus.STATIC_ERROR, resolution.errors)

        for expr, depth in resolution.locals.items():
            self.interpreter.resolve(expr, depth)

        try:
            self.interpreter.interpret(statements)
        except LoxRuntimeError as error:
            logger.warning(f"Runtime error on line {error.line}: {error.message}")
            return RunResult(ExitStatus.RUNTIME_ERROR, runtime_error=error)

        return RunResult(ExitStatus.OK)


def _last_line_token(tokens: List[Token]) -> Token:
    """A stand-in token for errors with no better location"""
    if tokens:
        return tokens[-1]
    return Token(TokenType.EOF, "", None, 1)


def run(source: str, options: Optional[EvalOptions] = None) -> RunResult:
    """
    Convenience function to run a program in a fresh session.

    Args:
        source: Program text
        options: Evaluation options (optional)

    Returns:
        RunResult with the exit status and any diagnostics
    """
    return Lox(options).run(source)
