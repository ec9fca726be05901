"""
Lox AST Printer
Renders expressions as fully parenthesized prefix forms, e.g.

    -123 * (45.67)   ->   (* (- 123.0) (group 45.67))

Handy for checking operator precedence and for tracing.
"""

from __future__ import annotations

from pylox.errors import exhaustive
from pylox.types import (
    Assign, Binary, Call, Get, Grouping, Lambda, Literal, Logical, Set,
    Super, Ternary, This, Unary, Variable,
    Expr,
)


class AstPrinter:
    """Converts an expression tree to a string"""

    def print(self, expr: Expr) -> str:
        if isinstance(expr, Literal):
            return self._literal(expr.value)
        elif isinstance(expr, Grouping):
            return self._parenthesize("group", expr.expression)
        elif isinstance(expr, Unary):
            return self._parenthesize(expr.operator.lexeme, expr.right)
        elif isinstance(expr, (Binary, Logical)):
            return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)
        elif isinstance(expr, Ternary):
            return self._parenthesize("?:", expr.condition, expr.then_branch, expr.else_branch)
        elif isinstance(expr, Variable):
            return expr.name.lexeme
        elif isinstance(expr, Assign):
            return self._parenthesize(f"= {expr.name.lexeme}", expr.value)
        elif isinstance(expr, Call):
            return self._parenthesize("call", expr.callee, *expr.arguments)
        elif isinstance(expr, Get):
            return self._parenthesize(f". {expr.name.lexeme}", expr.object)
        elif isinstance(expr, Set):
            return self._parenthesize(f"= . {expr.name.lexeme}", expr.object, expr.value)
        elif isinstance(expr, This):
            return "this"
        elif isinstance(expr, Super):
            return f"(super {expr.method.lexeme})"
        elif isinstance(expr, Lambda):
            params = " ".join(param.lexeme for param in expr.params)
            return f"(fun ({params}))"
        else:
            exhaustive(expr)

    def _literal(self, value: object) -> str:
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return f'"{value}"'
        return str(value)

    def _parenthesize(self, name: str, *exprs: Expr) -> str:
        parts = [name, *(self.print(expr) for expr in exprs)]
        return "(" + " ".join(parts) + ")"
