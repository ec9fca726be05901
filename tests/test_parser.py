import pytest

from pylox.ast_printer import AstPrinter
from pylox.parser import parse
from pylox.scanner import scan
from pylox import types as ast


def parse_source(source):
    tokens, scan_errors = scan(source)
    assert scan_errors == []
    return parse(tokens)


def print_expr(source):
    statements, errors = parse_source(source)
    assert errors == []
    assert len(statements) == 1
    assert isinstance(statements[0], ast.Expression)
    return AstPrinter().print(statements[0].expression)


@pytest.mark.parametrize("source, expected", [
    ("1 + 2 * 3;", "(+ 1.0 (* 2.0 3.0))"),
    ("(1 + 2) * 3;", "(* (group (+ 1.0 2.0)) 3.0)"),
    ("-1 - -2;", "(- (- 1.0) (- 2.0))"),
    ("!true == false;", "(== (! true) false)"),
    ("1 < 2 == 3 >= 4;", "(== (< 1.0 2.0) (>= 3.0 4.0))"),
    ("a or b and c;", "(or a (and b c))"),
    ("a = b = c;", "(= a (= b c))"),
    ("a ? b : c ? d : e;", "(?: a b (?: c d e))"),
    ("x.y.z = 1;", "(= . z (. y x) 1.0)"),
    ("f(1)(2, 3);", "(call (call f 1.0) 2.0 3.0)"),
    ('"s" + nil;', '(+ "s" nil)'),
])
def test_precedence(source, expected):
    assert print_expr(source) == expected


def test_for_desugars_to_while_in_block():
    statements, errors = parse_source("for (var i = 0; i < 3; i = i + 1) print i;")
    assert errors == []
    [outer] = statements
    assert isinstance(outer, ast.Block)
    init, loop = outer.statements
    assert isinstance(init, ast.Var)
    assert isinstance(loop, ast.While)
    body, increment = loop.body.statements
    assert isinstance(body, ast.Print)
    assert isinstance(increment, ast.Expression)


def test_for_without_clauses_loops_on_true():
    statements, errors = parse_source("for (;;) break;")
    assert errors == []
    [loop] = statements
    assert isinstance(loop, ast.While)
    assert isinstance(loop.condition, ast.Literal)
    assert loop.condition.value is True


def test_class_declaration():
    statements, errors = parse_source("class B < A { init(x) { this.x = x; } get() { return super.get(); } }")
    assert errors == []
    [klass] = statements
    assert isinstance(klass, ast.Class)
    assert klass.name.lexeme == "B"
    assert klass.superclass.name.lexeme == "A"
    assert [m.name.lexeme for m in klass.methods] == ["init", "get"]


def test_lambda_expression_statement():
    statements, errors = parse_source("var f = fun (a, b) { return a + b; };")
    assert errors == []
    [decl] = statements
    assert isinstance(decl.initializer, ast.Lambda)
    assert [p.lexeme for p in decl.initializer.params] == ["a", "b"]


def test_invalid_assignment_target_does_not_stop_parsing():
    statements, errors = parse_source("1 + 2 = 3; print 4;")
    assert [e.message for e in errors] == ["Invalid assignment target."]
    assert errors[0].where == "at '='"
    assert len(statements) == 2


def test_synchronization_reports_independent_errors():
    source = "var = 1;\nprint 2;\nvar x = ;\nprint (3;\nprint 4;"
    statements, errors = parse_source(source)
    assert [(e.line, e.message) for e in errors] == [
        (1, "Expect variable name."),
        (3, "Expect expression."),
        (4, "Expect ')' after expression."),
    ]
    # the good statements survive
    assert sum(isinstance(s, ast.Print) for s in statements) == 2


def test_error_at_end():
    _, errors = parse_source("print 1")
    assert len(errors) == 1
    assert errors[0].where == "at end"
    assert str(errors[0]) == "[line 1] Error at end: Expect ';' after value."


def test_too_many_arguments_is_reported_but_call_is_parsed():
    args = ", ".join(str(i) for i in range(256))
    statements, errors = parse_source(f"f({args});")
    assert [e.message for e in errors] == ["Can't have more than 255 arguments."]
    [stmt] = statements
    assert len(stmt.expression.arguments) == 256


def test_too_many_parameters():
    params = ", ".join(f"p{i}" for i in range(256))
    _, errors = parse_source(f"fun f({params}) {{}}")
    assert [e.message for e in errors] == ["Can't have more than 255 parameters."]


def test_break_outside_loop():
    _, errors = parse_source("break;")
    assert [e.message for e in errors] == ["Can't use 'break' outside of a loop."]


def test_break_does_not_cross_function_boundary():
    _, errors = parse_source("while (true) { fun f() { break; } }")
    assert [e.message for e in errors] == ["Can't use 'break' outside of a loop."]


def test_missing_left_operand():
    _, errors = parse_source("* 3;")
    assert [e.message for e in errors] == ["Expect left-hand operand before binary operator."]
