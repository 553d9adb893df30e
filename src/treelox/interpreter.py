import math
from typing import Any, TYPE_CHECKING, assert_never

from treelox.environment import Environment
from treelox.errors import LoxRuntimeError, StackOverflow
from treelox import expr as ex
from treelox import function as fn
from treelox import stmt as st
from treelox.loxclass import LoxClass, LoxInstance
from treelox.tokens import Token, TokenType as TT

if TYPE_CHECKING:
    from treelox.lox import Lox

__all__ = ["Interpreter", "LoxRuntimeError", "StackOverflow"]


class Interpreter:
    globals: Environment
    environment: Environment
    locals: dict[ex.Expr, int]

    def __init__(self, lox: 'Lox') -> None:
        self.lox = lox
        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}

        self.register_native(fn.clock)

    def register_native(self, function: fn.NativeFunction, name: str | None = None) -> None:
        if name is None:
            name = function.name

        self.globals.define(name, function)

    def interpret(self, statements: list[st.Stmt]) -> None:
        try:
            for statement in statements:
                try:
                    self.execute(statement)
                except RecursionError:
                    # Too deep to evaluate without going through a call
                    token = st.first_token(statement)
                    if token is None:
                        raise
                    raise StackOverflow(token) from None
        except LoxRuntimeError as error:
            self.lox.runtime_error(error)

    def resolve(self, expr: ex.Expr, depth: int) -> None:
        self.locals[expr] = depth

    # Expressions

    def evaluate(self, expr: ex.Expr) -> Any:
        match expr:
            case ex.Literal(value):
                return value
            case ex.Grouping(inner):
                return self.evaluate(inner)
            case ex.Unary():
                return self.unary(expr)
            case ex.Binary():
                return self.binary(expr)
            case ex.Logical(left, operator, right):
                value = self.evaluate(left)

                if operator.type == TT.OR:
                    if self.is_truthy(value):
                        return value
                elif not self.is_truthy(value):
                    return value

                return self.evaluate(right)
            case ex.Variable(name):
                return self.look_up_variable(name, expr)
            case ex.Assign(name, value_expr):
                value = self.evaluate(value_expr)

                distance = self.locals.get(expr)
                if distance is not None:
                    self.environment.assign_at(distance, name, value)
                else:
                    self.globals.assign(name, value)

                return value
            case ex.Call():
                return self.call(expr)
            case ex.Get(object_expr, name):
                obj = self.evaluate(object_expr)
                if isinstance(obj, LoxInstance):
                    return obj.get(name)

                raise LoxRuntimeError(name, "Only instances have properties.")
            case ex.Set(object_expr, name, value_expr):
                obj = self.evaluate(object_expr)
                if not isinstance(obj, LoxInstance):
                    raise LoxRuntimeError(name, "Only instances have fields.")

                value = self.evaluate(value_expr)
                obj.set(name, value)
                return value
            case ex.This(keyword):
                return self.look_up_variable(keyword, expr)
            case ex.Super():
                return self.super_method(expr)
            case _:
                assert_never(expr)

    def unary(self, expr: ex.Unary) -> Any:
        right = self.evaluate(expr.right)

        match expr.operator.type:
            case TT.BANG:
                return not self.is_truthy(right)
            case TT.MINUS:
                self.check_number_operand(expr.operator, right)
                return -right
            case other:
                raise ValueError(f"Unknown unary operator {other}")

    def binary(self, expr: ex.Binary) -> Any:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        match operator.type:
            case TT.BANG_EQUAL:
                return not self.is_equal(left, right)
            case TT.EQUAL_EQUAL:
                return self.is_equal(left, right)
            case TT.PLUS:
                if self.is_number(left) and self.is_number(right):
                    return left + right
                if isinstance(left, str) and isinstance(right, str):
                    return left + right

                raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        self.check_number_operands(operator, left, right)

        match operator.type:
            case TT.GREATER:
                return left > right
            case TT.GREATER_EQUAL:
                return left >= right
            case TT.LESS:
                return left < right
            case TT.LESS_EQUAL:
                return left <= right
            case TT.MINUS:
                return left - right
            case TT.STAR:
                return left * right
            case TT.SLASH:
                return self.divide(left, right)
            case other:
                raise ValueError(f"Unknown binary operator {other}")

    def call(self, expr: ex.Call) -> Any:
        callee = self.evaluate(expr.callee)

        arguments = []
        for argument in expr.arguments:
            arguments.append(self.evaluate(argument))

        if not isinstance(callee, fn.LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren,
            f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise StackOverflow(expr.paren) from None

    def super_method(self, expr: ex.Super) -> fn.LoxFunction:
        distance = self.locals[expr]
        superclass: LoxClass = self.environment.get_at(distance, "super")

        # 'this' always lives in the scope just inside the one binding 'super'
        instance: LoxInstance = self.environment.get_at(distance - 1, "this")

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(expr.method, f"Undefined property '{expr.method.lexeme}'.")

        return method.bind(instance)

    def look_up_variable(self, name: Token, expr: ex.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)

        return self.globals.get(name)

    # Statements

    def execute(self, stmt: st.Stmt) -> fn.Returned | None:
        match stmt:
            case st.Expression(expression):
                self.evaluate(expression)
            case st.Print(expression):
                value = self.evaluate(expression)
                print(self.stringify(value), file=self.lox.stdout)
            case st.Var(name, initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)

                self.environment.define(name.lexeme, value)
            case st.Block(statements):
                return self.execute_block(statements, Environment(self.environment))
            case st.If(condition, then_branch, else_branch):
                if self.is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                elif else_branch is not None:
                    return self.execute(else_branch)
            case st.While(condition, body):
                while self.is_truthy(self.evaluate(condition)):
                    outcome = self.execute(body)
                    if outcome is not None:
                        return outcome
            case st.Function(name):
                function = fn.LoxFunction(stmt, self.environment)
                self.environment.define(name.lexeme, function)
            case st.Return(_, value_expr):
                value = None
                if value_expr is not None:
                    value = self.evaluate(value_expr)

                return fn.Returned(value)
            case st.Class():
                self.class_declaration(stmt)
            case _:
                assert_never(stmt)

        return None

    def execute_block(self, statements: list[st.Stmt], environment: Environment) -> fn.Returned | None:
        previous = self.environment

        try:
            self.environment = environment

            for statement in statements:
                outcome = self.execute(statement)
                if outcome is not None:
                    return outcome
        finally:
            self.environment = previous

        return None

    def class_declaration(self, stmt: st.Class) -> None:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods: dict[str, fn.LoxFunction] = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == "init"
            methods[method.name.lexeme] = fn.LoxFunction(method, self.environment, is_initializer)

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            assert self.environment.enclosing is not None
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    # Helpers

    @staticmethod
    def is_truthy(obj: Any) -> bool:
        return obj is not None and obj is not False

    @staticmethod
    def is_equal(left: Any, right: Any) -> bool:
        if left is None:
            return right is None
        # No coercion between kinds, so 1 == true is false
        if type(left) is not type(right):
            return False
        return left == right

    @staticmethod
    def is_number(num: Any) -> bool:
        return isinstance(num, float)

    @staticmethod
    def divide(left: float, right: float) -> float:
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    def check_number_operand(self, operator: Token, operand: Any) -> None:
        if not self.is_number(operand):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    def check_number_operands(self, operator: Token, left: Any, right: Any) -> None:
        if not (self.is_number(left) and self.is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")

    def stringify(self, obj: Any) -> str:
        match obj:
            case None:
                return "nil"
            case bool(b):
                return str(b).lower()
            case float(num) if math.isnan(num):
                return "NaN"
            case float(num) if math.isinf(num):
                return "Infinity" if num > 0 else "-Infinity"
            case float(num) if num.is_integer() and abs(num) < 1e21:
                return str(int(num))
            case _:
                return str(obj)
