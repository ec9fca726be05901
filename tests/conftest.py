from __future__ import annotations

import io
from typing import Callable

import pytest

from pylox import EvalOptions, Lox, RunResult, create_fixed_clock_registry


class Session:
    """A Lox session whose 'print' output is captured"""

    def __init__(self) -> None:
        self.out = io.StringIO()
        self.lox = Lox(EvalOptions(out=self.out, natives=create_fixed_clock_registry(1234.5)))

    def run(self, source: str) -> RunResult:
        return self.lox.run(source)

    @property
    def lines(self) -> list[str]:
        return self.out.getvalue().splitlines()


@pytest.fixture
def session() -> Session:
    return Session()


@pytest.fixture
def run_lox() -> Callable[[str], tuple[RunResult, list[str]]]:
    """Run a program in a fresh session; return the result and printed lines"""

    def _run(source: str) -> tuple[RunResult, list[str]]:
        s = Session()
        result = s.run(source)
        return result, s.lines

    return _run
