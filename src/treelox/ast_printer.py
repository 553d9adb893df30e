"""Debug rendering of parsed programs as parenthesized prefix forms."""
from typing import assert_never

from treelox import expr as ex
from treelox import stmt as st


class AstPrinter:
    def print(self, node: ex.Expr | st.Stmt | list[st.Stmt]) -> str:
        match node:
            case list(statements):
                return "\n".join(self.stmt(statement) for statement in statements)
            case (
                  st.Block() | st.Class() | st.Expression() | st.Function()
                | st.If() | st.Print() | st.Return() | st.Var() | st.While()
            ):
                return self.stmt(node)
            case _:
                return self.expr(node)

    def expr(self, expr: ex.Expr) -> str:
        match expr:
            case ex.Assign(name, value):
                return self.parenthesize(f"= {name.lexeme}", value)
            case ex.Binary(left, operator, right) | ex.Logical(left, operator, right):
                return self.parenthesize(operator.lexeme, left, right)
            case ex.Call(callee, _, arguments):
                return self.parenthesize("call", callee, *arguments)
            case ex.Get(obj, name):
                return self.parenthesize(f". {name.lexeme}", obj)
            case ex.Grouping(inner):
                return self.parenthesize("group", inner)
            case ex.Literal(value):
                return self.literal(value)
            case ex.Set(obj, name, value):
                return self.parenthesize(f"= . {name.lexeme}", obj, value)
            case ex.Super(_, method):
                return f"(super {method.lexeme})"
            case ex.This():
                return "this"
            case ex.Unary(operator, right):
                return self.parenthesize(operator.lexeme, right)
            case ex.Variable(name):
                return name.lexeme
            case _:
                assert_never(expr)

    def stmt(self, stmt: st.Stmt) -> str:
        match stmt:
            case st.Block(statements):
                return self.form("block", *map(self.stmt, statements))
            case st.Class(name, superclass, methods):
                head = f"class {name.lexeme}"
                if superclass is not None:
                    head += f" < {superclass.name.lexeme}"
                return self.form(head, *map(self.stmt, methods))
            case st.Expression(expression):
                return self.parenthesize(";", expression)
            case st.Function(name, params, body):
                param_list = " ".join(param.lexeme for param in params)
                return self.form(f"fun {name.lexeme} ({param_list})", *map(self.stmt, body))
            case st.If(condition, then_branch, else_branch):
                parts = [self.expr(condition), self.stmt(then_branch)]
                if else_branch is not None:
                    parts.append(self.stmt(else_branch))
                return self.form("if", *parts)
            case st.Print(expression):
                return self.parenthesize("print", expression)
            case st.Return(_, value):
                if value is None:
                    return "(return)"
                return self.parenthesize("return", value)
            case st.Var(name, initializer):
                if initializer is None:
                    return f"(var {name.lexeme})"
                return self.parenthesize(f"var {name.lexeme}", initializer)
            case st.While(condition, body):
                return self.form("while", self.expr(condition), self.stmt(body))
            case _:
                assert_never(stmt)

    @staticmethod
    def literal(value: object) -> str:
        match value:
            case None:
                return "nil"
            case bool(b):
                return str(b).lower()
            case float(num) if num.is_integer():
                return str(int(num))
            case str(text):
                return f'"{text}"'
            case _:
                return str(value)

    def parenthesize(self, name: str, *exprs: ex.Expr) -> str:
        return self.form(name, *map(self.expr, exprs))

    @staticmethod
    def form(name: str, *parts: str) -> str:
        if not parts:
            return f"({name})"
        return f"({name} {' '.join(parts)})"
