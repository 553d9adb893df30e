from dataclasses import dataclass, fields, is_dataclass

from treelox import expr as ex
from treelox.tokens import Token

type Stmt = (
    Block | Class | Expression | Function | If
    | Print | Return | Var | While
)

node = dataclass(frozen=True, eq=False, slots=True)


@node
class Block:
    statements: list[Stmt]

@node
class Class:
    name: Token
    superclass: ex.Variable | None
    methods: list['Function']

@node
class Expression:
    expression: ex.Expr

@node
class Function:
    name: Token
    params: list[Token]
    body: list[Stmt]

@node
class If:
    condition: ex.Expr
    then_branch: Stmt
    else_branch: Stmt | None = None

@node
class Print:
    expression: ex.Expr

@node
class Return:
    keyword: Token
    value: ex.Expr | None = None

@node
class Var:
    name: Token
    initializer: ex.Expr | None = None

@node
class While:
    condition: ex.Expr
    body: Stmt


def first_token(node: Stmt | ex.Expr) -> Token | None:
    """Leftmost token in a tree, found without recursing.

    Used to locate errors raised when a tree is too deep to walk
    recursively. Trees made only of literals and groupings have none.
    """
    pending: list[object] = [node]
    while pending:
        item = pending.pop()
        if isinstance(item, Token):
            return item
        if isinstance(item, list):
            pending.extend(reversed(item))
        elif is_dataclass(item):
            pending.extend(getattr(item, field.name) for field in reversed(fields(item)))

    return None
