from typing import Any, Self

from treelox.errors import LoxRuntimeError
from treelox.tokens import Token


class Environment:
    values: dict[str, Any]
    enclosing: Self | None

    def __init__(self, enclosing: Self | None = None) -> None:
        self.values = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        self.values[name] = value

    def ancestor(self, distance: int) -> Self:
        environment = self
        for _ in range(distance):
            if environment.enclosing is None:
                raise LookupError(f"Resolved distance {distance} exceeds environment depth")
            environment = environment.enclosing

        return environment

    def get(self, name: Token) -> Any:
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def get_at(self, distance: int, name: str) -> Any:
        values = self.ancestor(distance).values
        if name not in values:
            raise LookupError(f"'{name}' is not bound {distance} scope(s) out")
        return values[name]

    def assign(self, name: Token, value: Any) -> None:
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value
