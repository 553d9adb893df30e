"""Expression nodes.

Nodes compare and hash by identity, so the interpreter can key resolved
scope distances by the node itself.
"""
from dataclasses import dataclass
from typing import Any

from treelox.tokens import Token

type Expr = (
    Assign | Binary | Call | Get | Grouping | Literal
    | Logical | Set | Super | This | Unary | Variable
)

node = dataclass(frozen=True, eq=False, slots=True)


@node
class Assign:
    name: Token
    value: Expr

@node
class Binary:
    left: Expr
    operator: Token
    right: Expr

@node
class Call:
    callee: Expr
    paren: Token
    arguments: list[Expr]

@node
class Get:
    object: Expr
    name: Token

@node
class Grouping:
    expression: Expr

@node
class Literal:
    value: Any

@node
class Logical:
    left: Expr
    operator: Token
    right: Expr

@node
class Set:
    object: Expr
    name: Token
    value: Expr

@node
class Super:
    keyword: Token
    method: Token

@node
class This:
    keyword: Token

@node
class Unary:
    operator: Token
    right: Expr

@node
class Variable:
    name: Token
