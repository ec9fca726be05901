# Lox Error Types
# Error domain for scan, parse, resolve and runtime errors

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pylox.types import Token, TokenType


#==============================================================================
# Error Codes
#==============================================================================

class ErrorCodes(str, Enum):
    """Error code constants for Lox errors"""

    # Static errors
    SCAN_ERROR = "ScanError"
    PARSE_ERROR = "ParseError"
    RESOLVE_ERROR = "ResolveError"

    # Runtime errors
    TYPE_ERROR = "TypeError"
    ARITY_ERROR = "ArityError"
    NOT_CALLABLE = "NotCallable"
    UNDEFINED_VARIABLE = "UndefinedVariable"
    UNDEFINED_PROPERTY = "UndefinedProperty"
    STACK_OVERFLOW = "StackOverflow"

    # Implementation defects
    INTERNAL_ERROR = "InternalError"


#==============================================================================
# Static Diagnostics
#==============================================================================

@dataclass(frozen=True)
class Diagnostic:
    """A single static (scan, parse or resolve) error"""
    code: ErrorCodes
    line: int
    message: str
    where: str = ""

    def __str__(self) -> str:
        where = f" {self.where}" if self.where else ""
        return f"[line {self.line}] Error{where}: {self.message}"


def location_of(token: Token) -> str:
    """Describe where a token sits for diagnostic messages"""
    if token.type == TokenType.EOF:
        return "at end"
    return f"at '{token.lexeme}'"


#==============================================================================
# Lox Error Classes
#==============================================================================

class LoxError(Exception):
    """Base exception class for all Lox errors"""

    def __init__(self, code: ErrorCodes, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


class LoxRuntimeError(LoxError):
    """
    An uncaught runtime error.

    Carries the token whose evaluation failed so the caller can report
    the source line. The first runtime error aborts execution.
    """

    def __init__(self, token: Token, message: str, code: ErrorCodes = ErrorCodes.TYPE_ERROR):
        super().__init__(code, message)
        self.token = token

    @property
    def line(self) -> int:
        return self.token.line

    def __str__(self) -> str:
        return f"{self.message}\n[line {self.line}]"

    #---------------------------------------------------------------------------
    # Static factory methods for common errors
    #---------------------------------------------------------------------------

    @staticmethod
    def operand_number(operator: Token) -> "LoxRuntimeError":
        """Unary operator applied to a non-number"""
        return LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def operands_numbers(operator: Token) -> "LoxRuntimeError":
        """Binary numeric operator applied to non-numbers"""
        return LoxRuntimeError(operator, "Operands must be numbers.")

    @staticmethod
    def operands_add(operator: Token) -> "LoxRuntimeError":
        """'+' applied to anything but two numbers or two strings"""
        return LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

    @staticmethod
    def undefined_variable(name: Token) -> "LoxRuntimeError":
        return LoxRuntimeError(
            name,
            f"Undefined variable '{name.lexeme}'.",
            ErrorCodes.UNDEFINED_VARIABLE,
        )

    @staticmethod
    def undefined_property(name: Token) -> "LoxRuntimeError":
        return LoxRuntimeError(
            name,
            f"Undefined property '{name.lexeme}'.",
            ErrorCodes.UNDEFINED_PROPERTY,
        )

    @staticmethod
    def not_callable(paren: Token) -> "LoxRuntimeError":
        return LoxRuntimeError(
            paren,
            "Can only call functions and classes.",
            ErrorCodes.NOT_CALLABLE,
        )

    @staticmethod
    def arity(paren: Token, expected: int, got: int) -> "LoxRuntimeError":
        return LoxRuntimeError(
            paren,
            f"Expected {expected} arguments but got {got}.",
            ErrorCodes.ARITY_ERROR,
        )

    @staticmethod
    def stack_overflow(token: Token) -> "LoxRuntimeError":
        return LoxRuntimeError(token, "Stack overflow.", ErrorCodes.STACK_OVERFLOW)


class LoxInternalError(LoxError):
    """An interpreter defect, e.g. resolver and environments disagreeing"""

    def __init__(self, message: str):
        super().__init__(ErrorCodes.INTERNAL_ERROR, message)


#==============================================================================
# Exhaustiveness Checking
#==============================================================================

def exhaustive(value: Any) -> None:
    """
    Asserts that a value is unreachable, ensuring exhaustive handling.
    Use in the final branch of a dispatch chain over node or value kinds.

    Raises:
        LoxInternalError: If called (indicating unhandled case)
    """
    raise LoxInternalError(f"Unexpected value: {value!r}")
