"""
Lox Environment
Mutable, chained name -> value scopes used by the interpreter

Environments are shared by reference: every block, call and closure that
holds an Environment sees the same bindings, so a mutation through one
holder is immediately visible through all of them. This is how closures
observe each other's updates to captured state.

Lifetime is left to Python: an environment lives as long as some block,
closure, bound method or instance still references it. Closures stored as
class methods can form reference cycles (environment -> class -> method ->
environment); the cycle collector reclaims those.
"""

from __future__ import annotations
from typing import Dict, Optional, TYPE_CHECKING

from pylox.errors import LoxInternalError, LoxRuntimeError

if TYPE_CHECKING:
    from pylox.types import Token
    from pylox.values import Value


#==============================================================================
# Environment
#==============================================================================

class Environment:
    """
    A single scope with an optional enclosing scope.

    Resolved (local) accesses use the *_at methods with the distance the
    resolver computed; unresolved (global) accesses use get/assign, which
    search the chain by name.
    """

    def __init__(self, enclosing: Optional[Environment] = None):
        """
        Create a new scope.

        Args:
            enclosing: Parent scope, None for the global environment
        """
        self.values: Dict[str, Value] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Value) -> None:
        """Bind a name in this scope, shadowing or redefining as needed"""
        self.values[name] = value

    def get(self, name: Token) -> Value:
        """
        Look a name up along the chain.

        Raises:
            LoxRuntimeError: If no scope binds the name
        """
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError.undefined_variable(name)

    def assign(self, name: Token, value: Value) -> None:
        """
        Rebind an existing name along the chain.

        Raises:
            LoxRuntimeError: If no scope binds the name
        """
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError.undefined_variable(name)

    def ancestor(self, distance: int) -> Environment:
        """
        Walk exactly `distance` parent links.

        Raises:
            LoxInternalError: If the chain is shorter than the resolver said
        """
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise LoxInternalError(f"No environment at distance {distance}")
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> Value:
        """Read a resolved local; the binding must exist"""
        values = self.ancestor(distance).values
        if name not in values:
            raise LoxInternalError(f"Resolved variable '{name}' missing at distance {distance}")
        return values[name]

    def assign_at(self, distance: int, name: Token, value: Value) -> None:
        """Rebind a resolved local; the binding must exist"""
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LoxInternalError(f"Resolved variable '{name.lexeme}' missing at distance {distance}")
        values[name.lexeme] = value

    def __contains__(self, name: str) -> bool:
        """Check if a name is bound in this scope (not the chain)"""
        return name in self.values

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment({sorted(self.values)}, depth={depth})"
