"""
Lox Python Implementation

A tree-walking interpreter for Lox, a small dynamically-typed, class-based
scripting language with first-class functions, closures and single
inheritance.

The pipeline is Scanner -> Parser -> Resolver -> Interpreter; the Lox
session object runs all four over a source string.
"""

from __future__ import annotations

#==============================================================================
# Types
#==============================================================================

from pylox.types import (
    Token,
    TokenType,
    KEYWORDS,
    Expr,
    Stmt,
)

#==============================================================================
# Errors
#==============================================================================

from pylox.errors import (
    Diagnostic,
    ErrorCodes,
    LoxError,
    LoxInternalError,
    LoxRuntimeError,
)

#==============================================================================
# Front End
#==============================================================================

from pylox.scanner import Scanner, scan
from pylox.parser import Parser, parse
from pylox.resolver import Resolver, ResolveResult, resolve
from pylox.ast_printer import AstPrinter

#==============================================================================
# Runtime
#==============================================================================

from pylox.env import Environment

from pylox.values import (
    Completion,
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    NativeFunction,
    Value,
    is_equal,
    is_truthy,
    stringify,
)

from pylox.effects import (
    NativeOp,
    NativeRegistry,
    create_default_native_registry,
    create_fixed_clock_registry,
    empty_native_registry,
    register_native,
)

from pylox.evaluator import (
    Interpreter,
    EvalOptions,
)

#==============================================================================
# Session
#==============================================================================

from pylox.lox import (
    ExitStatus,
    Lox,
    RunResult,
    run,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "Token",
    "TokenType",
    "KEYWORDS",
    "Expr",
    "Stmt",
    # Errors
    "Diagnostic",
    "ErrorCodes",
    "LoxError",
    "LoxInternalError",
    "LoxRuntimeError",
    # Front end
    "Scanner",
    "scan",
    "Parser",
    "parse",
    "Resolver",
    "ResolveResult",
    "resolve",
    "AstPrinter",
    # Runtime
    "Environment",
    "Completion",
    "LoxCallable",
    "LoxClass",
    "LoxFunction",
    "LoxInstance",
    "NativeFunction",
    "Value",
    "is_equal",
    "is_truthy",
    "stringify",
    "NativeOp",
    "NativeRegistry",
    "create_default_native_registry",
    "create_fixed_clock_registry",
    "empty_native_registry",
    "register_native",
    "Interpreter",
    "EvalOptions",
    # Session
    "ExitStatus",
    "Lox",
    "RunResult",
    "run",
]
