"""
Lox Evaluator
Tree-walking interpreter over a resolved statement AST

Statements execute one at a time, in source order, against a chain of
environments rooted at the interpreter's own global environment. Every
variable access consults the resolver's side-table: a recorded distance
means "walk exactly this many parent links", no entry means "global".

Control flow for 'return' and 'break' travels as an explicit Completion
value returned from statement execution, never as a host exception.
Runtime errors raise LoxRuntimeError and abort the rest of the program.

Deep recursion in a Lox program recurses in the host as well. Running
out of host stack raises RecursionError, which this module does not
catch; callers decide how to report it.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO

from pylox.ast_printer import AstPrinter
from pylox.effects import NativeRegistry, create_default_native_registry
from pylox.env import Environment
from pylox.errors import LoxInternalError, LoxRuntimeError, exhaustive
from pylox.types import (
    Assign, Binary, Call, Get, Grouping, Lambda, Literal, Logical, Set,
    Super, Ternary, This, Unary, Variable,
    Block, Break, Class, Expression, Function, If, Print, Return, Var, While,
    Expr, ResolvableExpr, Stmt, Token, TokenType,
)
from pylox.values import (
    BREAK,
    NORMAL,
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

logger = logging.getLogger(__name__)


#==============================================================================
# Evaluation Options
#==============================================================================

@dataclass
class EvalOptions:
    """Options for program execution"""
    trace: bool = False
    natives: Optional[NativeRegistry] = None
    out: Optional[TextIO] = field(default=None, repr=False)


#==============================================================================
# Arithmetic Helpers
#==============================================================================

def divide(left: float, right: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity and 0/0 is NaN"""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        sign = math.copysign(1.0, left) * math.copysign(1.0, right)
        return math.copysign(math.inf, sign)
    return left / right


def _check_number_operand(operator: Token, operand: Value) -> float:
    if isinstance(operand, float):
        return operand
    raise LoxRuntimeError.operand_number(operator)


def _check_number_operands(operator: Token, left: Value, right: Value) -> tuple[float, float]:
    if isinstance(left, float) and isinstance(right, float):
        return left, right
    raise LoxRuntimeError.operands_numbers(operator)


#==============================================================================
# Interpreter Class
#==============================================================================

class Interpreter:
    """
    Executes resolved Lox programs.

    One Interpreter keeps its globals and its resolution side-table across
    interpret() calls, so successive REPL lines see earlier definitions.
    """

    def __init__(self, options: Optional[EvalOptions] = None):
        """
        Initialize the interpreter.

        Args:
            options: Evaluation options (output stream, natives, tracing)
        """
        self._options = options or EvalOptions()
        self._out = self._options.out
        self.globals = Environment()
        self._environment = self.globals
        self._locals: Dict[ResolvableExpr, int] = {}
        self._printer = AstPrinter()

        natives = self._options.natives
        if natives is None:
            natives = create_default_native_registry()
        for op in natives.values():
            self.globals.define(op.name, NativeFunction(op.name, op.arity, op.fn))

    #---------------------------------------------------------------------------
    # Public API
    #---------------------------------------------------------------------------

    def resolve(self, expr: ResolvableExpr, depth: int) -> None:
        """Record the scope distance the resolver computed for a reference"""
        self._locals[expr] = depth

    def interpret(self, statements: List[Stmt]) -> None:
        """
        Execute a resolved program.

        Args:
            statements: Top-level statements, already resolved

        Raises:
            LoxRuntimeError: On the first runtime error; nothing after it runs
        """
        try:
            for statement in statements:
                completion = self.execute(statement)
                if not completion.is_normal:
                    raise LoxInternalError(f"'{completion.kind}' escaped to top level")
        except LoxRuntimeError as error:
            logger.debug(f"Runtime error on line {error.line}: {error.message}")
            raise
        finally:
            self._environment = self.globals

    def execute(self, stmt: Stmt) -> Completion:
        """Execute one statement and report how it completed"""
        if self._options.trace:
            self._trace(stmt)

        if isinstance(stmt, Expression):
            self.evaluate(stmt.expression)
            return NORMAL
        elif isinstance(stmt, Print):
            value = self.evaluate(stmt.expression)
            self._write(stringify(value))
            return NORMAL
        elif isinstance(stmt, Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self._environment.define(stmt.name.lexeme, value)
            return NORMAL
        elif isinstance(stmt, Block):
            return self.execute_block(stmt.statements, Environment(self._environment))
        elif isinstance(stmt, If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return NORMAL
        elif isinstance(stmt, While):
            return self._execute_while(stmt)
        elif isinstance(stmt, Function):
            function = LoxFunction(stmt, self._environment)
            self._environment.define(stmt.name.lexeme, function)
            return NORMAL
        elif isinstance(stmt, Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return Completion.returning(value)
        elif isinstance(stmt, Break):
            return Completion.breaking()
        elif isinstance(stmt, Class):
            self._execute_class(stmt)
            return NORMAL
        else:
            exhaustive(stmt)

    def _trace(self, stmt: Stmt) -> None:
        if isinstance(stmt, (Expression, Print)):
            detail = self._printer.print(stmt.expression)
        else:
            detail = type(stmt).__name__
        logger.debug(f"exec {detail} in {self._environment!r}")

    def execute_block(self, statements: List[Stmt], environment: Environment) -> Completion:
        """
        Execute statements in the given environment, then restore the
        previous one whether the block completes, returns, breaks or fails.
        """
        previous = self._environment
        try:
            self._environment = environment
            for statement in statements:
                completion = self.execute(statement)
                if not completion.is_normal:
                    return completion
            return NORMAL
        finally:
            self._environment = previous

    #---------------------------------------------------------------------------
    # Statement Helpers
    #---------------------------------------------------------------------------

    def _execute_while(self, stmt: While) -> Completion:
        while is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion is BREAK:
                break
            if not completion.is_normal:
                return completion
        return NORMAL

    def _execute_class(self, stmt: Class) -> None:
        superclass: Optional[LoxClass] = None
        if stmt.superclass is not None:
            value = self.evaluate(stmt.superclass)
            if not isinstance(value, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")
            superclass = value

        self._environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self._environment = Environment(self._environment)
            self._environment.define("super", superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = LoxFunction(
                method,
                self._environment,
                is_initializer=method.name.lexeme == "init",
            )

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            if self._environment.enclosing is None:
                raise LoxInternalError("'super' scope has no enclosing environment")
            self._environment = self._environment.enclosing

        self._environment.assign(stmt.name, klass)

    def _write(self, text: str) -> None:
        out = self._out if self._out is not None else sys.stdout
        out.write(text + "\n")

    #---------------------------------------------------------------------------
    # Expression Evaluation (Dispatch)
    #---------------------------------------------------------------------------

    def evaluate(self, expr: Expr) -> Value:
        """Evaluate an expression to a value"""
        if isinstance(expr, Literal):
            return expr.value
        elif isinstance(expr, Grouping):
            return self.evaluate(expr.expression)
        elif isinstance(expr, Variable):
            return self._look_up_variable(expr.name, expr)
        elif isinstance(expr, Assign):
            return self._eval_assign(expr)
        elif isinstance(expr, Unary):
            return self._eval_unary(expr)
        elif isinstance(expr, Binary):
            return self._eval_binary(expr)
        elif isinstance(expr, Logical):
            return self._eval_logical(expr)
        elif isinstance(expr, Ternary):
            if is_truthy(self.evaluate(expr.condition)):
                return self.evaluate(expr.then_branch)
            return self.evaluate(expr.else_branch)
        elif isinstance(expr, Call):
            return self._eval_call(expr)
        elif isinstance(expr, Get):
            return self._eval_get(expr)
        elif isinstance(expr, Set):
            return self._eval_set(expr)
        elif isinstance(expr, This):
            return self._look_up_variable(expr.keyword, expr)
        elif isinstance(expr, Super):
            return self._eval_super(expr)
        elif isinstance(expr, Lambda):
            return LoxFunction(expr, self._environment)
        else:
            exhaustive(expr)

    #---------------------------------------------------------------------------
    # Variables
    #---------------------------------------------------------------------------

    def _look_up_variable(self, name: Token, expr: ResolvableExpr) -> Value:
        distance = self._locals.get(expr)
        if distance is not None:
            return self._environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def _eval_assign(self, expr: Assign) -> Value:
        value = self.evaluate(expr.value)

        distance = self._locals.get(expr)
        if distance is not None:
            self._environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    #---------------------------------------------------------------------------
    # Operators
    #---------------------------------------------------------------------------

    def _eval_unary(self, expr: Unary) -> Value:
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.MINUS:
            return -_check_number_operand(expr.operator, right)
        elif expr.operator.type == TokenType.BANG:
            return not is_truthy(right)
        else:
            exhaustive(expr.operator)

    def _eval_binary(self, expr: Binary) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        if op == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError.operands_add(operator)
        elif op == TokenType.MINUS:
            a, b = _check_number_operands(operator, left, right)
            return a - b
        elif op == TokenType.STAR:
            a, b = _check_number_operands(operator, left, right)
            return a * b
        elif op == TokenType.SLASH:
            a, b = _check_number_operands(operator, left, right)
            return divide(a, b)
        elif op == TokenType.GREATER:
            a, b = _check_number_operands(operator, left, right)
            return a > b
        elif op == TokenType.GREATER_EQUAL:
            a, b = _check_number_operands(operator, left, right)
            return a >= b
        elif op == TokenType.LESS:
            a, b = _check_number_operands(operator, left, right)
            return a < b
        elif op == TokenType.LESS_EQUAL:
            a, b = _check_number_operands(operator, left, right)
            return a <= b
        elif op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        elif op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)
        else:
            exhaustive(operator)

    def _eval_logical(self, expr: Logical) -> Value:
        """Short-circuit: the right operand runs only if the left doesn't decide"""
        left = self.evaluate(expr.left)

        if expr.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif expr.operator.type == TokenType.AND:
            if not is_truthy(left):
                return left
        else:
            exhaustive(expr.operator)

        return self.evaluate(expr.right)

    #---------------------------------------------------------------------------
    # Calls, Properties and Classes
    #---------------------------------------------------------------------------

    def _eval_call(self, expr: Call) -> Value:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError.not_callable(expr.paren)

        if len(arguments) != callee.arity():
            raise LoxRuntimeError.arity(expr.paren, callee.arity(), len(arguments))

        return callee.call(self, arguments)

    def _eval_get(self, expr: Get) -> Value:
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def _eval_set(self, expr: Set) -> Value:
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def _eval_super(self, expr: Super) -> Value:
        """
        'super.m' starts the lookup at the superclass of the class whose
        method contains the expression, and binds the result to the
        current 'this', which lives one scope nearer than 'super'.
        """
        distance = self._locals.get(expr)
        if distance is None:
            raise LoxInternalError("Unresolved 'super' expression")

        superclass = self._environment.get_at(distance, "super")
        instance = self._environment.get_at(distance - 1, "this")
        if not isinstance(superclass, LoxClass):
            raise LoxInternalError(f"'super' bound to {superclass!r}, not a class")
        if not isinstance(instance, LoxInstance):
            raise LoxInternalError(f"'this' bound to {instance!r}, not an instance")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError.undefined_property(expr.method)
        return method.bind(instance)
