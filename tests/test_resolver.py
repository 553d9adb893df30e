import sys

import pytest

from treelox import expr as ex
from treelox import stmt as st
from treelox.resolver import Resolver
from treelox.tokens import Token, TokenType as TT


def resolve(lox, source):
    statements = lox.parse(source)
    assert not lox.had_error, lox.stderr.getvalue()
    Resolver(lox.interpreter, lox).resolve(statements)
    return statements


def test_globals_get_no_distance(lox):
    resolve(lox, "var a = 1; print a;")

    assert lox.interpreter.locals == {}


def test_distance_counts_enclosing_blocks(lox):
    [outer] = resolve(lox, "{ var a = 1; { print a; } }")

    read = outer.statements[1].statements[0].expression
    assert lox.interpreter.locals[read] == 1


def test_distance_is_recorded_per_node(lox):
    [block] = resolve(lox, "{ var a = 1; fun f() { print a; } print a; }")

    inner_read = block.statements[1].body[0].expression
    outer_read = block.statements[2].expression
    assert lox.interpreter.locals[inner_read] == 1
    assert lox.interpreter.locals[outer_read] == 0


def test_assignment_targets_are_resolved(lox):
    [block] = resolve(lox, "{ var a; { { a = 2; } } }")

    assign = block.statements[1].statements[0].statements[0].expression
    assert lox.interpreter.locals[assign] == 2


def test_this_and_super_resolve_through_class_scopes(lox):
    _, klass = resolve(lox, "class A {} class B < A { m() { this; super.m; } }")

    this_expr, super_expr = (s.expression for s in klass.methods[0].body)
    # method scope -> this scope -> super scope
    assert lox.interpreter.locals[this_expr] == 1
    assert lox.interpreter.locals[super_expr] == 2


def test_reference_before_local_declaration_falls_back_to_global(lox):
    [block] = resolve(lox, "{ fun f() { print g; } fun g() {} }")

    read = block.statements[0].body[0].expression
    assert read not in lox.interpreter.locals


@pytest.mark.parametrize("source, message", [
    ("return 1;", "[line 1] Error at 'return': Can't return from top-level code."),
    ("print this;", "[line 1] Error at 'this': Can't use 'this' outside of a class."),
    ("fun f() { this; }", "[line 1] Error at 'this': Can't use 'this' outside of a class."),
    ("super.m();", "[line 1] Error at 'super': Can't use 'super' outside of a class."),
    ("class A { m() { super.m(); } }",
     "[line 1] Error at 'super': Can't use 'super' in a class with no superclass."),
    ("{ var a = 1; var a = 2; }",
     "[line 1] Error at 'a': Already a variable with this name in this scope."),
    ("fun f(a, a) {}",
     "[line 1] Error at 'a': Already a variable with this name in this scope."),
    ("{ var a = a; }",
     "[line 1] Error at 'a': Can't read local variable in its own initializer."),
    ("{ var a = 1; { var a = a + 1; } }",
     "[line 1] Error at 'a': Can't read local variable in its own initializer."),
    ("class A { init() { return 1; } }",
     "[line 1] Error at 'return': Can't return a value from an initializer."),
])
def test_static_errors(run, source, message):
    result = run(source)

    assert result.lox.had_error
    assert result.err == message + "\n"


def test_errors_block_execution(run):
    result = run('print "before"; return;')

    assert result.out == ""
    assert result.lox.had_error
    assert not result.lox.had_runtime_error


def test_multiple_resolution_errors_are_all_reported(run):
    result = run("return; print this;")

    assert result.err.splitlines() == [
        "[line 1] Error at 'return': Can't return from top-level code.",
        "[line 1] Error at 'this': Can't use 'this' outside of a class.",
    ]


def test_global_redeclaration_is_allowed(run):
    assert run("var a = 1; var a = 2; print a;").out == "2\n"


def test_global_self_reference_is_a_runtime_error(run):
    result = run("var a = a;")

    assert not result.lox.had_error
    assert result.err == "Undefined variable 'a'.\n[line 1]\n"


def test_bare_return_in_initializer_is_allowed(run):
    result = run("class A { init() { return; } } print A();")

    assert result.out == "A instance\n"


def test_compile_returns_none_on_errors(lox):
    assert lox.compile("return;") is None


def test_compile_returns_resolved_statements(lox):
    statements = lox.compile("{ var a = 1; print a; }")

    assert statements is not None
    read = statements[0].statements[1].expression
    assert lox.interpreter.locals[read] == 0


def test_blocks_too_deep_to_resolve_are_reported(lox):
    statement = st.Expression(ex.Variable(Token(TT.IDENTIFIER, "x", 2)))
    for _ in range(sys.getrecursionlimit()):
        statement = st.Block([statement])

    lox.resolve([statement])

    assert lox.had_error
    assert lox.stderr.getvalue() == "[line 2] Error at 'x': Too much nesting.\n"
