from contextlib import contextmanager, nullcontext
from enum import Enum, auto
from typing import Iterator, TYPE_CHECKING, assert_never

from treelox.tokens import Token
from treelox import expr as ex, stmt as st

if TYPE_CHECKING:
    from treelox.interpreter import Interpreter
    from treelox.lox import Lox


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()

class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """Static pass computing how many scopes out each local reference binds.

    Each scope maps a name to whether its initializer has finished, which is
    how ``var a = a;`` is caught. Names found in no scope are left for the
    interpreter to look up as globals.
    """
    interpreter: 'Interpreter'
    scopes: list[dict[str, bool]]
    current_function: FunctionType
    current_class: ClassType

    def __init__(self, interpreter: 'Interpreter', lox: 'Lox') -> None:
        self.interpreter = interpreter
        self.lox = lox
        self.scopes = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements: list[st.Stmt]) -> None:
        for statement in statements:
            self.resolve_stmt(statement)

    @contextmanager
    def scope(self) -> Iterator[dict[str, bool]]:
        self.scopes.append({})
        try:
            yield self.scopes[-1]
        finally:
            self.scopes.pop()

    def declare(self, name: Token) -> None:
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.lox.error(name, "Already a variable with this name in this scope.")

        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: ex.Expr, name: Token) -> None:
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return

    def resolve_function(self, function: st.Function, type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = type

        with self.scope():
            for param in function.params:
                self.declare(param)
                self.define(param)
            self.resolve(function.body)

        self.current_function = enclosing_function

    def resolve_class(self, stmt: st.Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        # Self-inheritance has already been reported by the parser
        if stmt.superclass is not None:
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)
            super_scope = self.scope()
        else:
            super_scope = nullcontext()

        with super_scope as enclosing, self.scope() as scope:
            if enclosing is not None:
                enclosing["super"] = True
            scope["this"] = True

            for method in stmt.methods:
                declaration = FunctionType.METHOD
                if method.name.lexeme == "init":
                    declaration = FunctionType.INITIALIZER
                self.resolve_function(method, declaration)

        self.current_class = enclosing_class

    def resolve_stmt(self, stmt: st.Stmt) -> None:
        match stmt:
            case st.Block(statements):
                with self.scope():
                    self.resolve(statements)
            case st.Class():
                self.resolve_class(stmt)
            case st.Expression(expression) | st.Print(expression):
                self.resolve_expr(expression)
            case st.Function(name):
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, FunctionType.FUNCTION)
            case st.If(condition, then_branch, else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)
            case st.Return(keyword, value):
                if self.current_function is FunctionType.NONE:
                    self.lox.error(keyword, "Can't return from top-level code.")

                if value is not None:
                    if self.current_function is FunctionType.INITIALIZER:
                        self.lox.error(keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value)
            case st.Var(name, initializer):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)
            case st.While(condition, body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)
            case _:
                assert_never(stmt)

    def resolve_expr(self, expr: ex.Expr) -> None:
        match expr:
            case ex.Assign(name, value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)
            case ex.Binary(left, _, right) | ex.Logical(left, _, right):
                self.resolve_expr(left)
                self.resolve_expr(right)
            case ex.Call(callee, _, arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)
            case ex.Get(object_expr):
                self.resolve_expr(object_expr)
            case ex.Grouping(inner):
                self.resolve_expr(inner)
            case ex.Literal():
                pass
            case ex.Set(object_expr, _, value):
                self.resolve_expr(value)
                self.resolve_expr(object_expr)
            case ex.Super(keyword):
                if self.current_class is ClassType.NONE:
                    self.lox.error(keyword, "Can't use 'super' outside of a class.")
                elif self.current_class is not ClassType.SUBCLASS:
                    self.lox.error(keyword, "Can't use 'super' in a class with no superclass.")

                self.resolve_local(expr, keyword)
            case ex.This(keyword):
                if self.current_class is ClassType.NONE:
                    self.lox.error(keyword, "Can't use 'this' outside of a class.")
                    return

                self.resolve_local(expr, keyword)
            case ex.Unary(_, right):
                self.resolve_expr(right)
            case ex.Variable(name):
                # Only the innermost scope is checked for a pending initializer
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.lox.error(name, "Can't read local variable in its own initializer.")

                self.resolve_local(expr, name)
            case _:
                assert_never(expr)
