import io
from dataclasses import dataclass

import pytest

from treelox.lox import Lox


@dataclass
class RunResult:
    lox: Lox
    out: str
    err: str

    @property
    def lines(self) -> list[str]:
        return self.out.splitlines()


def make_lox() -> Lox:
    return Lox(stdout=io.StringIO(), stderr=io.StringIO())


def run_lox(source: str, lox: Lox | None = None) -> RunResult:
    if lox is None:
        lox = make_lox()
    lox.run(source)
    return RunResult(lox, lox.stdout.getvalue(), lox.stderr.getvalue())


@pytest.fixture
def lox() -> Lox:
    return make_lox()


@pytest.fixture
def run():
    return run_lox
