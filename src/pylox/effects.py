"""
Lox Native Functions
Registry of built-in functions installed as globals

The standard library is deliberately tiny: 'clock' is the only native.
'print' is a statement, not a function, and writes through the
interpreter's output stream.
"""

from __future__ import annotations
import time
from dataclasses import dataclass
from typing import (
    Callable,
    Dict,
    List,
    TypeAlias,
)

from pylox.values import Value


#==============================================================================
# Native Operation Signature
#==============================================================================

@dataclass(frozen=True)
class NativeOp:
    """
    A native function that Lox code can call.

    Attributes:
        name: Global name the function is bound to
        arity: Exact number of arguments
        fn: Python implementation taking `arity` Lox values
    """
    name: str
    arity: int
    fn: Callable[..., Value]


#==============================================================================
# Native Registry
#==============================================================================

NativeRegistry: TypeAlias = Dict[str, NativeOp]


def register_native(registry: NativeRegistry, op: NativeOp) -> NativeRegistry:
    """
    Register a native function.

    Args:
        registry: The current registry
        op: The native to register

    Returns:
        A new registry with the native added
    """
    new_registry = dict(registry)
    new_registry[op.name] = op
    return new_registry


def empty_native_registry() -> NativeRegistry:
    """Create an empty native registry"""
    return {}


#==============================================================================
# Built-in Natives
#==============================================================================

def _clock_fn() -> Value:
    """Seconds since the epoch as a number"""
    return time.time()


clock_native = NativeOp(name="clock", arity=0, fn=_clock_fn)

default_natives: List[NativeOp] = [
    clock_native,
]


def create_default_native_registry() -> NativeRegistry:
    """
    Create a registry with every built-in native.

    Returns:
        A registry containing 'clock'
    """
    registry = empty_native_registry()
    for op in default_natives:
        registry = register_native(registry, op)
    return registry


#==============================================================================
# Deterministic Registry
#==============================================================================

def create_fixed_clock_registry(now: float) -> NativeRegistry:
    """
    Create a registry whose 'clock' always returns the same time.

    Used for reproducible runs, e.g. in tests.

    Args:
        now: The time 'clock' reports, in seconds

    Returns:
        A registry with 'clock' bound to the fixed time
    """
    fixed = float(now)

    def _fixed_clock_fn() -> Value:
        """Fixed clock"""
        return fixed

    return register_native(
        empty_native_registry(),
        NativeOp(name="clock", arity=0, fn=_fixed_clock_fn),
    )
