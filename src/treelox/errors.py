from typing import Final

from treelox.tokens import Token


class LoxRuntimeError(Exception):
    token: Final[Token]

    def __init__(self, token: Token, message: str) -> None:
        super().__init__(message)
        self.token = token

    @property
    def message(self) -> str:
        return str(self.args[0])


class StackOverflow(LoxRuntimeError):
    def __init__(self, token: Token) -> None:
        super().__init__(token, "Stack overflow.")
