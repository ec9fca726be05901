# Lox Resolver
# Static scope resolution and semantic checks run before execution

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Dict, List

from pylox.errors import Diagnostic, ErrorCodes, exhaustive, location_of
from pylox.types import (
    Assign, Binary, Call, Get, Grouping, Lambda, Literal, Logical, Set,
    Super, Ternary, This, Unary, Variable,
    Block, Break, Class, Expression, Function, If, Print, Return, Var, While,
    Expr, ResolvableExpr, Stmt, Token,
)

logger = logging.getLogger(__name__)


#==============================================================================
# Resolution Context
#==============================================================================

class FunctionType(Enum):
    """Kind of function body currently being resolved"""
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    """Kind of class body currently being resolved"""
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class ResolveResult:
    """Result of a resolution pass"""

    def __init__(self, locals: Dict[ResolvableExpr, int], errors: List[Diagnostic]):
        self.locals = locals
        self.errors = errors

    @property
    def valid(self) -> bool:
        return not self.errors


#==============================================================================
# Resolver Class
#==============================================================================

class Resolver:
    """
    Computes lexical scope distances for every local variable reference.

    The scope stack mirrors the environments the interpreter creates:
    one per block, one per function call (parameters and body share it),
    one holding 'this' per class, and one holding 'super' per subclass.
    Globals are never pushed, so references to them stay unresolved and
    are looked up by name at run time.

    Each scope maps a name to False while its initializer is being
    resolved ("declared") and True afterwards ("defined").
    """

    def __init__(self) -> None:
        self.locals: Dict[ResolvableExpr, int] = {}
        self.errors: List[Diagnostic] = []
        self._scopes: List[Dict[str, bool]] = []
        self._current_function = FunctionType.NONE
        self._current_class = ClassType.NONE

    def resolve(self, statements: List[Stmt]) -> ResolveResult:
        """
        Resolve a whole program, collecting every static error.

        Args:
            statements: Top-level statements from the parser

        Returns:
            The side-table of distances and the errors found
        """
        self._resolve_statements(statements)
        logger.debug(f"Resolved {len(self.locals)} local references with {len(self.errors)} errors")
        return ResolveResult(self.locals, self.errors)

    #---------------------------------------------------------------------------
    # Statements
    #---------------------------------------------------------------------------

    def _resolve_statements(self, statements: List[Stmt]) -> None:
        for statement in statements:
            self._resolve_stmt(statement)

    def _resolve_stmt(self, stmt: Stmt) -> None:
        if isinstance(stmt, Block):
            self._begin_scope()
            self._resolve_statements(stmt.statements)
            self._end_scope()
        elif isinstance(stmt, Class):
            self._resolve_class(stmt)
        elif isinstance(stmt, Expression):
            self._resolve_expr(stmt.expression)
        elif isinstance(stmt, Function):
            # Defined eagerly so the function can refer to itself
            self._declare(stmt.name)
            self._define(stmt.name)
            self._resolve_function(stmt.params, stmt.body, FunctionType.FUNCTION)
        elif isinstance(stmt, If):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.then_branch)
            if stmt.else_branch is not None:
                self._resolve_stmt(stmt.else_branch)
        elif isinstance(stmt, Print):
            self._resolve_expr(stmt.expression)
        elif isinstance(stmt, Return):
            if self._current_function == FunctionType.NONE:
                self._error(stmt.keyword, "Can't return from top-level code.")
            if stmt.value is not None:
                self._resolve_expr(stmt.value)
        elif isinstance(stmt, Var):
            self._declare(stmt.name)
            if stmt.initializer is not None:
                self._resolve_expr(stmt.initializer)
            self._define(stmt.name)
        elif isinstance(stmt, While):
            self._resolve_expr(stmt.condition)
            self._resolve_stmt(stmt.body)
        elif isinstance(stmt, Break):
            pass
        else:
            exhaustive(stmt)

    def _resolve_class(self, stmt: Class) -> None:
        enclosing_class = self._current_class
        self._current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self._error(stmt.superclass.name, "A class can't inherit from itself.")
            self._current_class = ClassType.SUBCLASS
            self._resolve_expr(stmt.superclass)

            self._begin_scope()
            self._scopes[-1]["super"] = True

        self._begin_scope()
        self._scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self._resolve_function(method.params, method.body, kind)

        self._end_scope()

        if stmt.superclass is not None:
            self._end_scope()

        self._current_class = enclosing_class

    def _resolve_function(
        self,
        params: List[Token],
        body: List[Stmt],
        kind: FunctionType,
    ) -> None:
        enclosing_function = self._current_function
        self._current_function = kind

        self._begin_scope()
        for param in params:
            self._declare(param)
            self._define(param)
        self._resolve_statements(body)
        self._end_scope()

        self._current_function = enclosing_function

    #---------------------------------------------------------------------------
    # Expressions
    #---------------------------------------------------------------------------

    def _resolve_expr(self, expr: Expr) -> None:
        if isinstance(expr, Variable):
            if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
                self._error(expr.name, "Can't read local variable in its own initializer.")
            self._resolve_local(expr, expr.name.lexeme)
        elif isinstance(expr, Assign):
            self._resolve_expr(expr.value)
            self._resolve_local(expr, expr.name.lexeme)
        elif isinstance(expr, (Binary, Logical)):
            self._resolve_expr(expr.left)
            self._resolve_expr(expr.right)
        elif isinstance(expr, Call):
            self._resolve_expr(expr.callee)
            for argument in expr.arguments:
                self._resolve_expr(argument)
        elif isinstance(expr, Get):
            self._resolve_expr(expr.object)
        elif isinstance(expr, Set):
            self._resolve_expr(expr.value)
            self._resolve_expr(expr.object)
        elif isinstance(expr, Grouping):
            self._resolve_expr(expr.expression)
        elif isinstance(expr, Lambda):
            self._resolve_function(expr.params, expr.body, FunctionType.FUNCTION)
        elif isinstance(expr, Literal):
            pass
        elif isinstance(expr, Super):
            if self._current_class == ClassType.NONE:
                self._error(expr.keyword, "Can't use 'super' outside of a class.")
            elif self._current_class != ClassType.SUBCLASS:
                self._error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            self._resolve_local(expr, "super")
        elif isinstance(expr, Ternary):
            self._resolve_expr(expr.condition)
            self._resolve_expr(expr.then_branch)
            self._resolve_expr(expr.else_branch)
        elif isinstance(expr, This):
            if self._current_class == ClassType.NONE:
                self._error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self._resolve_local(expr, "this")
        elif isinstance(expr, Unary):
            self._resolve_expr(expr.right)
        else:
            exhaustive(expr)

    #---------------------------------------------------------------------------
    # Scope Helpers
    #---------------------------------------------------------------------------

    def _begin_scope(self) -> None:
        self._scopes.append({})

    def _end_scope(self) -> None:
        self._scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self._scopes:
            return
        scope = self._scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self._scopes:
            return
        self._scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: ResolvableExpr, name: str) -> None:
        for depth, scope in enumerate(reversed(self._scopes)):
            if name in scope:
                self.locals[expr] = depth
                return
        # Not found: assumed global

    def _error(self, token: Token, message: str) -> None:
        self.errors.append(Diagnostic(ErrorCodes.RESOLVE_ERROR, token.line, message, location_of(token)))


def resolve(statements: List[Stmt]) -> ResolveResult:
    """
    Convenience function to resolve a parsed program.

    Args:
        statements: Top-level statements

    Returns:
        ResolveResult with the distance side-table and any static errors
    """
    return Resolver().resolve(statements)
