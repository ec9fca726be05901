"""
Lox Runtime Values
Value domain, callables, classes and instances

Runtime values are plain Python objects forming a closed set:

    nil       -> None
    boolean   -> bool
    number    -> float
    string    -> str
    callable  -> LoxCallable (LoxFunction, LoxClass, NativeFunction)
    instance  -> LoxInstance

Every operation over values dispatches over exactly these kinds and ends
in exhaustive() so a new kind cannot be silently mishandled.
"""

from __future__ import annotations

import math
from decimal import Decimal
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Optional, TypeAlias, Union, TYPE_CHECKING

from pylox.env import Environment
from pylox.errors import LoxRuntimeError, exhaustive

if TYPE_CHECKING:
    from pylox.evaluator import Interpreter
    from pylox.types import Function, Lambda, Token


#==============================================================================
# Statement Completion
#==============================================================================

@dataclass(frozen=True)
class Completion:
    """
    Outcome of executing one statement.

    Executing a statement never unwinds the host stack for control flow:
    'return' and 'break' produce a non-normal completion that every
    enclosing statement passes upward until a call (for return) or loop
    (for break) consumes it.
    """
    kind: Literal["normal", "return", "break"]
    value: Any = None

    @staticmethod
    def returning(value: Value) -> "Completion":
        return Completion("return", value)

    @staticmethod
    def breaking() -> "Completion":
        return BREAK

    @property
    def is_normal(self) -> bool:
        return self.kind == "normal"


NORMAL = Completion("normal")
BREAK = Completion("break")


#==============================================================================
# Callable Capability
#==============================================================================

class LoxCallable(ABC):
    """Anything a Lox call expression can invoke"""

    @abstractmethod
    def arity(self) -> int:
        """Number of arguments the callable accepts"""

    @abstractmethod
    def call(self, interpreter: Interpreter, arguments: List[Value]) -> Value:
        """Invoke with already-evaluated, arity-checked arguments"""


class NativeFunction(LoxCallable):
    """A built-in function implemented in Python"""

    def __init__(self, name: str, arity: int, fn: Callable[..., Value]):
        self.name = name
        self._arity = arity
        self._fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: List[Value]) -> Value:
        return self._fn(*arguments)

    def __str__(self) -> str:
        return "<native fn>"


class LoxFunction(LoxCallable):
    """
    A user-defined function or method.

    The closure is the environment active when the declaration executed.
    It never changes afterwards; binding a method to an instance creates a
    new LoxFunction whose closure is a fresh scope holding 'this'.
    """

    def __init__(
        self,
        declaration: Union[Function, Lambda],
        closure: Environment,
        is_initializer: bool = False,
    ):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> Optional[str]:
        name = getattr(self.declaration, "name", None)
        return name.lexeme if name is not None else None

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Return this method with 'this' bound to the given instance"""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter: Interpreter, arguments: List[Value]) -> Value:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if completion.kind == "return":
            return completion.value
        if completion.is_normal:
            return None
        exhaustive(completion)

    def __str__(self) -> str:
        if self.name is None:
            return "<fn>"
        return f"<fn {self.name}>"


#==============================================================================
# Classes and Instances
#==============================================================================

class LoxClass(LoxCallable):
    """A class; calling it constructs an instance"""

    def __init__(
        self,
        name: str,
        superclass: Optional[LoxClass],
        methods: Dict[str, LoxFunction],
    ):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Look a method up on this class, then up the superclass chain"""
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: Interpreter, arguments: List[Value]) -> Value:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self) -> str:
        return self.name


class LoxInstance:
    """An object created by calling a class; fields shadow methods"""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Value] = {}

    def get(self, name: Token) -> Value:
        """
        Read a property.

        Raises:
            LoxRuntimeError: If neither a field nor a method has the name
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError.undefined_property(name)

    def set(self, name: Token, value: Value) -> None:
        """Write a field, creating it if needed"""
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"


# Value union for all runtime values
Value: TypeAlias = Union[None, bool, float, str, LoxCallable, LoxInstance]


#==============================================================================
# Value Semantics
#==============================================================================

def is_truthy(value: Value) -> bool:
    """nil and false are falsy; everything else, including 0 and "", is truthy"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Value, b: Value) -> bool:
    """
    Lox equality.

    Values of different kinds are never equal (so true != 1). Numbers,
    strings and booleans compare by value with IEEE semantics for NaN;
    callables and instances compare by identity.
    """
    if a is None or b is None:
        return a is None and b is None
    if type(a) is not type(b):
        return False
    if isinstance(a, (bool, float, str)):
        return a == b
    return a is b


def format_number(value: float) -> str:
    """
    Decimal text for a number, never in exponent form.

    Integral numbers print without a trailing '.0'; others print the
    shortest digits that round-trip, e.g. 1e-07 prints as 0.0000001.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def stringify(value: Value) -> str:
    """Textual form used by 'print'"""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (LoxCallable, LoxInstance)):
        return str(value)
    exhaustive(value)
