from __future__ import annotations

import pytest

from templatevisitor.errors import ParseError
from templatevisitor.options import ParserOptions
from templatevisitor.syntax.dump import dump_json, load_json
from templatevisitor.syntax.nodes import walk
from templatevisitor.syntax.parser import parse
from tests.utils import MODULE, expr, find_all


def test_program_statements():
    tree = parse("a; b; c;")
    assert tree.root.kind == "program"
    assert [s.kind for s in tree.statements] == ["expression_statement"] * 3
    assert tree.options == ParserOptions()


def test_parentheses_do_not_make_a_node():
    node = expr("((a))")
    assert node.kind == "identifier"
    assert node.text == "a"
    assert find_all(parse("f((x), [(y)])").root, "parenthesized_expression") == []


def test_comments_are_dropped():
    node = expr("f(/* first */ a, // second\n b)")
    args = node.fields["arguments"]
    assert [c.text for c in args.children] == ["a", "b"]


def test_keywords_are_tokens_and_punctuation_is_not():
    decl = parse("var a = 1, b;").statements[0]
    assert decl.kind == "variable_declaration"
    assert decl.tokens == ("var",)
    assert len(decl.children) == 2

    arrow = expr("async (x) => x")
    assert "async" in arrow.tokens
    assert "=>" not in arrow.tokens


def test_fields_and_children():
    call = expr("obj.method(1, 2)")
    assert call.kind == "call_expression"
    callee = call.fields["function"]
    assert callee.kind == "member_expression"
    assert callee.fields["property"].kind == "property_identifier"
    assert [c.text for c in call.fields["arguments"].children] == ["1", "2"]


def test_operator_is_a_field():
    node = expr("a - b")
    assert node.fields["operator"].text == "-"
    assert not node.fields["operator"].named


@pytest.mark.parametrize(
    "code,kinds",
    [
        ("[a, , b]", ["identifier", "array_hole", "identifier"]),
        ("[a, ,]", ["identifier", "array_hole"]),
        ("[a,]", ["identifier"]),
        ("[,]", ["array_hole"]),
        ("[, a]", ["array_hole", "identifier"]),
    ],
)
def test_array_holes_keep_their_place(code: str, kinds: list[str]) -> None:
    assert [c.kind for c in expr(code).children] == kinds


def test_pattern_holes_keep_their_place():
    decl = parse("let [a, , b] = arr;").statements[0]
    pattern = decl.children[0].fields["name"]
    assert pattern.kind == "array_pattern"
    assert [c.kind for c in pattern.children] == ["identifier", "array_hole", "identifier"]


def test_repeated_fields_are_always_tuples():
    switch = parse("switch (x) { case 1: a(); case 2: case 3: a(); b(); }").statements[0]
    bodies = [case.fields["body"] for case in switch.fields["body"].children]
    assert [len(body) for body in bodies] == [1, 0, 2]
    assert all(isinstance(body, tuple) for body in bodies)

    klass = parse("class A { m() {} }").statements[0]
    members = klass.fields["body"].fields["member"]
    assert isinstance(members, tuple)
    assert [m.kind for m in members] == ["method_definition"]


def test_string_quotes_are_tokens():
    assert expr("'a'").tokens == ("'", "'")
    assert expr('"a"').tokens == ('"', '"')


def test_walk_visits_named_nodes_with_parents():
    tree = parse("f(x)")
    pairs = [(node.kind, parent.kind if parent else None) for node, parent in walk(tree.root)]
    assert pairs[0] == ("program", None)
    assert ("identifier", "arguments") in pairs
    assert all(kind not in {"(", ")"} for kind, _ in pairs)


def test_spans_count_characters_not_bytes():
    tree = parse("'é'; foo")
    foo = tree.statements[1].children[0]
    assert foo.text == "foo"
    assert (int(foo.span.start), int(foo.span.end)) == (5, 8)


@pytest.mark.parametrize("code", ["foo(", "a +", "}", "a b c"])
def test_syntax_errors_raise(code: str) -> None:
    with pytest.raises(ParseError) as info:
        parse(code)
    assert info.value.code == "syntax"
    assert info.value.diagnostic.source.contents == code


def test_syntax_error_message_names_the_problem():
    with pytest.raises(ParseError) as info:
        parse("a = ;")
    text = str(info.value)
    assert text.startswith("ERROR [syntax]: ")
    assert "<template>:1:" in text


@pytest.mark.parametrize(
    "code,edition",
    [
        ("a ** b", 2016),
        ("async function f() {}", 2017),
        ("({...a})", 2018),
        ("try {} catch {}", 2019),
        ("a?.b", 2020),
        ("a ?? b", 2020),
        ("10n", 2020),
        ("a ||= b", 2021),
        ("1_000", 2021),
        ("class A { x = 1 }", 2022),
    ],
)
def test_features_need_their_edition(code: str, edition: int) -> None:
    parse(code, ParserOptions(ecma_version=edition))
    with pytest.raises(ParseError) as info:
        parse(code, ParserOptions(ecma_version=edition - 1))
    assert info.value.code == "edition"
    assert str(edition) in info.value.diagnostic.message


def test_import_requires_module_source_type():
    code = "import x from 'y';"
    with pytest.raises(ParseError) as info:
        parse(code)
    assert info.value.code == "source-type"
    assert parse(code, MODULE).statements[0].kind == "import_statement"


def test_latest_accepts_everything():
    parse("class A { static #x = a?.b ?? 1n }", ParserOptions(ecma_version="latest"))


def test_dump_round_trips_shape():
    node = expr("foo(a, ...b)")
    record = load_json(dump_json(node))
    assert record.kind == "call_expression"
    assert record.fields["function"].text == "foo"
    args = record.fields["arguments"]
    assert [c.kind for c in args.children] == ["identifier", "spread_element"]
    assert (record.start, record.end) == (0, 12)
