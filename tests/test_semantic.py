import copy

from minilang import SemanticAnalyzer, SemanticError, analyze, parse, tokenize

FACTORIAL = """
function computeFactorial(n) {
  if (n <= 1) return 1;
  return n * computeFactorial(n - 1);
}

function executeMain() {
  return computeFactorial(5);
}
"""


def messages(source):
    return [e.message for e in analyze(parse(tokenize(source)))]


def test_clean_program_has_no_findings():
    assert messages(FACTORIAL) == []


def test_read_before_declaration():
    assert messages("x;") == ["Variable 'x' used before declaration"]


def test_read_before_initialization():
    assert messages("var x; x;") == ["Variable 'x' used before initialization"]


def test_assignment_initializes():
    assert messages("var x; x = 1; x;") == []


def test_assignment_to_undeclared_name():
    assert messages("y = 1;") == ["Variable 'y' used before declaration"]


def test_duplicate_in_same_scope():
    assert messages("var x; var x;") == ["Variable 'x' already declared in this scope"]
    assert messages("function f() {} function f() {}") == ["Function 'f' already declared in this scope"]


def test_shadowing_an_outer_scope_is_allowed():
    assert messages("var x = 1; { var x = 2; x; } x;") == []


def test_unused_local_reported_on_scope_exit():
    assert messages("{ var y = 1; }") == ["Variable 'y' is declared but never used"]


def test_unused_parameter_reported_once():
    assert messages("function f(a, b) { return a; }") == ["Parameter 'b' is never used"]


def test_globals_are_never_reported_unused():
    assert messages("var unused = 1; function lonely() {}") == []


def test_unused_nested_function():
    assert messages("function outer() { function inner() {} }") == [
        "Function 'inner' is declared but never used"
    ]


def test_call_before_declaration_is_a_single_error():
    assert messages("foo();") == ["Function 'foo' called before declaration"]
    assert messages("f(); function f() {}") == ["Function 'f' called before declaration"]


def test_calling_a_variable():
    assert messages("var v = 1; v();") == ["'v' is not a function"]


def test_builtin_print_is_callable():
    assert messages("printValue(1);") == []


def test_member_property_is_not_resolved():
    assert messages("var o = 1; o.anything;") == []
    assert messages("missing.anything;") == ["Variable 'missing' used before declaration"]


def test_for_header_opens_a_scope():
    assert messages("for (var i = 0; i < 3; i = i + 1) {}") == []
    assert messages("for (var i = 0; ;) {}") == ["Variable 'i' is declared but never used"]
    assert messages("for (var i = 0; i < 3;) {} i;") == ["Variable 'i' used before declaration"]


def test_findings_keep_their_nodes():
    errors = analyze(parse(tokenize("x;")))
    assert isinstance(errors[0], SemanticError)
    assert errors[0].node.name == "x"


def test_analysis_is_deterministic_and_read_only():
    program = parse(tokenize("var a; a; { var b = 1; } c(); function f(p) {}"))
    snapshot = copy.deepcopy(program)

    first = [e.message for e in SemanticAnalyzer().analyze(program)]
    second = [e.message for e in SemanticAnalyzer().analyze(program)]

    assert first == second
    assert len(first) == 4
    assert program == snapshot


def test_analyzer_instance_can_be_reused():
    analyzer = SemanticAnalyzer()
    program = parse(tokenize("var x; var x;"))
    assert len(analyzer.analyze(program)) == 1
    assert len(analyzer.analyze(program)) == 1
