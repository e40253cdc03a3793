import pytest

from minilang import ParseError, Parser, parse, tokenize
from minilang.nodes import (
    AssignmentExpression,
    BinaryExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    ForStatement,
    FunctionDeclaration,
    GroupExpression,
    Identifier,
    IfStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    Program,
    ReturnStatement,
    UnaryExpression,
    VariableDeclaration,
)


def parse_source(source):
    return parse(tokenize(source))


def first_expression(source):
    stmt = parse_source(source).body[0]
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expression


def test_multiplication_binds_tighter_than_addition():
    program = parse_source("var x = 1 + 2 * 3;")
    assert program == Program([
        VariableDeclaration(
            "x",
            BinaryExpression(
                "+",
                Literal(1.0),
                BinaryExpression("*", Literal(2.0), Literal(3.0)),
            ),
        )
    ])
    assert isinstance(program.body[0].initializer.left.value, float)


def test_binary_operators_are_left_associative():
    assert first_expression("a - b - c;") == BinaryExpression(
        "-", BinaryExpression("-", Identifier("a"), Identifier("b")), Identifier("c")
    )


def test_comparison_below_additive_and_equality_below_comparison():
    assert first_expression("a + 1 < b == c;") == BinaryExpression(
        "==",
        BinaryExpression("<", BinaryExpression("+", Identifier("a"), Literal(1.0)), Identifier("b")),
        Identifier("c"),
    )


def test_and_binds_tighter_than_or():
    assert first_expression("a || b && c;") == LogicalExpression(
        "||", Identifier("a"), LogicalExpression("&&", Identifier("b"), Identifier("c"))
    )


def test_assignment_is_right_associative():
    assert first_expression("a = b = 1;") == AssignmentExpression(
        "=", Identifier("a"), AssignmentExpression("=", Identifier("b"), Literal(1.0))
    )


def test_invalid_assignment_target():
    with pytest.raises(ParseError) as exc:
        parse_source("a + b = 1;")
    assert exc.value.message == "Invalid assignment target."
    assert (exc.value.line, exc.value.column) == (1, 7)


def test_member_assignment_is_rejected():
    with pytest.raises(ParseError):
        parse_source("o.p = 1;")


def test_unary_nests():
    assert first_expression("-!x;") == UnaryExpression("-", UnaryExpression("!", Identifier("x")))


def test_call_and_member_chain():
    assert first_expression("obj.method(1, 2).field;") == MemberExpression(
        CallExpression(
            MemberExpression(Identifier("obj"), Identifier("method")),
            [Literal(1.0), Literal(2.0)],
        ),
        Identifier("field"),
    )


def test_literals_and_group():
    assert first_expression("(true);") == GroupExpression(Literal(True))
    assert first_expression("false;") == Literal(False)
    assert first_expression("null;") == Literal(None)
    assert first_expression('"hi";') == Literal("hi")


def test_function_declaration():
    program = parse_source("function add(a, b) { return a + b; }")
    assert program.body == [
        FunctionDeclaration(
            "add",
            ["a", "b"],
            BlockStatement([ReturnStatement(BinaryExpression("+", Identifier("a"), Identifier("b")))]),
        )
    ]


def test_if_else_and_bare_return():
    program = parse_source("if (x) return; else { y; }")
    assert program.body == [
        IfStatement(
            Identifier("x"),
            ReturnStatement(None),
            BlockStatement([ExpressionStatement(Identifier("y"))]),
        )
    ]


def test_for_with_all_clauses_omitted():
    assert parse_source("for (;;) x;").body == [
        ForStatement(None, None, None, ExpressionStatement(Identifier("x")))
    ]


def test_for_with_var_initializer():
    stmt = parse_source("for (var i = 0; i < 3; i = i + 1) {}").body[0]
    assert stmt.initializer == VariableDeclaration("i", Literal(0.0))
    assert stmt.condition == BinaryExpression("<", Identifier("i"), Literal(3.0))
    assert isinstance(stmt.increment, AssignmentExpression)
    assert stmt.body == BlockStatement([])


def test_bad_variable_name_points_at_token():
    with pytest.raises(ParseError) as exc:
        parse_source("var 1x;")
    assert exc.value.message == "Expect variable name."
    assert exc.value.token.text == "1"
    assert (exc.value.line, exc.value.column) == (1, 5)


def test_missing_semicolon_at_end_of_input():
    with pytest.raises(ParseError) as exc:
        parse_source("var x = 1")
    assert exc.value.message == "Expect ';' after variable declaration."
    assert exc.value.token.text == ""


def test_recovery_collects_later_errors_but_raises_first():
    parser = Parser(tokenize("var 1; var y = ; var z = 2;"))
    with pytest.raises(ParseError) as exc:
        parser.parse()
    assert exc.value.message == "Expect variable name."
    assert [e.message for e in parser.errors] == ["Expect variable name.", "Expect expression."]


def test_parameter_limit():
    ok = "function f(" + ", ".join(f"p{i}" for i in range(255)) + ") {}"
    assert len(parse_source(ok).body[0].params) == 255

    too_many = "function f(" + ", ".join(f"p{i}" for i in range(256)) + ") {}"
    with pytest.raises(ParseError) as exc:
        parse_source(too_many)
    assert exc.value.message == "Cannot have more than 255 parameters."


def test_argument_limit():
    call = "f(" + ", ".join("1" for _ in range(256)) + ");"
    with pytest.raises(ParseError) as exc:
        parse_source(call)
    assert exc.value.message == "Cannot have more than 255 arguments."


def test_to_dict_is_tagged():
    d = parse_source("var x = 1;").to_dict()
    assert d == {
        "type": "Program",
        "body": [{
            "type": "VariableDeclaration",
            "name": "x",
            "initializer": {"type": "Literal", "value": 1.0},
        }],
    }
