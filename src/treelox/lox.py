import os
import sys
from typing import TextIO

from treelox.interpreter import Interpreter, LoxRuntimeError
from treelox.parser import Parser
from treelox.resolver import Resolver
from treelox.scanner import Scanner
from treelox import stmt as st
from treelox.tokens import Token, TokenType as TT


class Lox:
    """Runs source text through the pipeline and reports what went wrong.

    Every stage reports through :meth:`error` or :meth:`runtime_error`,
    which write to ``stderr`` and set ``had_error`` or
    ``had_runtime_error``. ``print`` output goes to ``stdout``. Global
    state lives in ``interpreter`` and persists across calls to
    :meth:`run`, which is what the prompt relies on.
    """

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

        self.had_error = False
        self.had_runtime_error = False
        self.interpreter = Interpreter(self)

    def run_file(self, path: str | os.PathLike) -> None:
        with open(path, "r", encoding="utf-8") as file:
            prog = file.read()
        self.run(prog)

    def run_prompt(self) -> None:
        while True:
            try:
                line = input("> ")
            except EOFError:
                print(file=self.stdout)
                break

            self.run(line)
            self.had_error = False
            self.had_runtime_error = False

    def parse(self, source: str) -> list[st.Stmt]:
        tokens = Scanner(source, self).scan_tokens()
        return Parser(tokens, self).parse()

    def compile(self, source: str) -> list[st.Stmt] | None:
        statements = self.parse(source)
        if self.had_error:
            return None

        self.resolve(statements)
        if self.had_error:
            return None

        return statements

    def resolve(self, statements: list[st.Stmt]) -> None:
        resolver = Resolver(self.interpreter, self)
        for statement in statements:
            try:
                resolver.resolve_stmt(statement)
            except RecursionError:
                token = st.first_token(statement)
                if token is None:
                    raise
                self.error(token, "Too much nesting.")
                return

    def run(self, source: str) -> None:
        statements = self.compile(source)
        if statements is None:
            return

        self.interpreter.interpret(statements)

    def error(self, where: int | Token, message: str) -> None:
        if isinstance(where, int):
            self.report(where, "", message)
        elif where.type == TT.EOF:
            self.report(where.line, " at end", message)
        else:
            self.report(where.line, f" at '{where.lexeme}'", message)

    def runtime_error(self, error: LoxRuntimeError) -> None:
        print(f"{error.message}\n[line {error.token.line}]", file=self.stderr)
        self.had_runtime_error = True

    def report(self, line: int, where: str, message: str) -> None:
        print(f"[line {line}] Error{where}: {message}", file=self.stderr)
        self.had_error = True
