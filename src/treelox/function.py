import time
from dataclasses import dataclass
from typing import Any, Callable, Never, Protocol, TYPE_CHECKING, runtime_checkable

from treelox.environment import Environment
from treelox import stmt as st

if TYPE_CHECKING:
    from treelox.interpreter import Interpreter
    from treelox.loxclass import LoxInstance


@runtime_checkable
class LoxCallable(Protocol):
    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        ...

    def arity(self) -> int:
        ...


@dataclass(frozen=True, slots=True)
class Returned:
    """Outcome of a statement that executed a ``return``.

    Statements that complete normally produce ``None`` instead.
    """
    value: Any


class LoxFunction:
    declaration: st.Function
    closure: Environment
    is_initializer: bool

    def __init__(self,
                 declaration: st.Function,
                 closure: Environment,
                 is_initializer: bool = False
                 ) -> None:
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        environment = Environment(self.closure)

        for param, arg in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, arg)

        outcome = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if outcome is not None:
            return outcome.value
        return None

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def __str__(self) -> str:
        return f"<fn {self.name}>"


class NativeFunction:
    def __init__(self, name: str, arity: int, function: Callable) -> None:
        self.name = name
        self._arity = arity
        self.function = function

    def call(self, interpreter: 'Interpreter', arguments: list[Any]) -> Any:
        return self.function(interpreter, arguments)

    def arity(self) -> int:
        return self._arity

    def __str__(self) -> str:
        return "<native fn>"


type LoxFunctionCall = Callable[['Interpreter', list], Any]

def native_fn(*, arity: int, name: str | None = None) -> Callable[[LoxFunctionCall], NativeFunction]:
    def native_fn_decorator(fn: LoxFunctionCall) -> NativeFunction:
        return NativeFunction(name if name is not None else fn.__name__, arity, fn)

    return native_fn_decorator

@native_fn(arity=0)
def clock(interpreter: 'Interpreter', args: list[Never]) -> float:
    return time.time()
