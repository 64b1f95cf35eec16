from __future__ import annotations

import warnings

import pytest

from templatevisitor.errors import (
    ForeignVariableError,
    SpreadPositionError,
    TemplateSyntaxError,
)
from templatevisitor.manager import TemplateManager, template_visitor
from templatevisitor.options import ParserOptions, SourceType
from templatevisitor.reporting.warnings_bridge import TemplateWarning
from tests.utils import expr


def test_pattern_is_unwrapped_expression():
    templates = TemplateManager()
    template = templates.template("foo.bar()")
    assert template.kind == "call_expression"
    assert template.source.contents == "foo.bar()"
    assert templates.templates[template.id] is template


def test_statement_templates_keep_their_statement():
    templates = TemplateManager()
    template = templates.template("if (a) { b(); }")
    assert template.kind == "if_statement"


def test_parts_form_equals_fstring_form():
    templates = TemplateManager()
    a = templates.variable()
    from_parts = templates.template(a, ".parentNode.removeChild(", a, ")")
    from_fstring = templates.template(f"{a}.parentNode.removeChild({a})")
    assert from_parts.source.contents == from_fstring.source.contents
    assert from_parts.variables == from_fstring.variables == (a,)


def test_template_ids_are_distinct():
    templates = TemplateManager()
    t1 = templates.template("a")
    t2 = templates.template("a")
    assert t1.id != t2.id
    assert str(t1) != str(t2)


def test_bad_part_type_raises():
    templates = TemplateManager()
    with pytest.raises(TypeError):
        templates.template("foo(", 1, ")")  # type: ignore[arg-type]


@pytest.mark.parametrize("source", ["foo(", "a +", "", "   ", "// only a comment"])
def test_invalid_template_raises_template_syntax_error(source: str) -> None:
    templates = TemplateManager()
    with pytest.raises(TemplateSyntaxError) as info:
        templates.template(source)
    assert info.value.code == "template-syntax"


def test_template_syntax_error_keeps_parser_code():
    templates = TemplateManager()
    with pytest.raises(TemplateSyntaxError) as info:
        templates.template("a ?? b")
    assert any("edition" in note for note in info.value.diagnostic.notes)


def test_options_apply_to_templates():
    templates = TemplateManager({"ecmaVersion": 2020, "sourceType": "module"})
    assert templates.options == ParserOptions(ecma_version=2020, source_type=SourceType.MODULE)
    assert templates.template("a ?? b").kind == "binary_expression"
    assert templates.template("import x from 'y';").kind == "import_statement"


def test_template_visitor_factory():
    templates = template_visitor(ParserOptions(ecma_version=11))
    assert isinstance(templates, TemplateManager)
    assert templates.options.ecma_version == 2020


def test_extra_statements_warn_and_are_ignored():
    templates = TemplateManager()
    with pytest.warns(TemplateWarning, match="only the first is matched") as record:
        template = templates.template("foo(); bar();")
    assert template.kind == "call_expression"
    assert record[0].message.diagnostic.code == "extra-statements"
    assert template.match(expr("foo()")) is not None


def test_variable_outside_identifier_position_warns():
    templates = TemplateManager()
    a = templates.variable()
    with pytest.warns(TemplateWarning, match="never binds") as record:
        templates.template(f"foo('{a}')")
    assert record[0].message.diagnostic.code == "unbound-variable"


def test_variables_in_identifier_positions_do_not_warn():
    templates = TemplateManager()
    a, b = templates.variable(), templates.variable()
    with warnings.catch_warnings():
        warnings.simplefilter("error", TemplateWarning)
        templates.template(f"{a}.{b}({a}, {{ {b} }})")


def test_foreign_variable_raises():
    mine = TemplateManager()
    theirs = TemplateManager()
    stranger = theirs.variable()
    with pytest.raises(ForeignVariableError):
        mine.template(f"{stranger}.foo()")


def test_placeholder_names_differ_across_managers():
    assert TemplateManager().variable().name != TemplateManager().variable().name


@pytest.mark.parametrize(
    "build",
    [
        lambda s: f"{s}.foo()",
        lambda s: f"foo({s}, b)",
        lambda s: f"[a, {s}]",
        lambda s: f"{s} + 1",
        lambda s: f"if (c) {s}",
        lambda s: f"if (c) {s}; else d();",
        lambda s: f"function f() {{ return {s}; }}",
        lambda s: f"foo(...{s})",
        lambda s: f"throw {s};",
    ],
)
def test_spread_variable_outside_a_whole_list_raises(build) -> None:
    templates = TemplateManager()
    s = templates.spread_variable()
    with pytest.raises(SpreadPositionError) as info:
        templates.template(build(s))
    assert info.value.code == "spread-position"


@pytest.mark.parametrize(
    "build",
    [
        lambda s: f"foo({s})",
        lambda s: f"[{s}]",
        lambda s: f"function f({s}) {{}}",
        lambda s: f"() => {{ {s}; }}",
        lambda s: f"if (c) {{ {s}; }}",
        lambda s: f"switch (x) {{ case 1: {s}; }}",
    ],
)
def test_spread_variable_in_whole_list_is_accepted(build) -> None:
    templates = TemplateManager()
    s = templates.spread_variable()
    template = templates.template(build(s))
    assert template.variables == (s,)


def test_match_returns_fresh_context_without_touching_slot():
    templates = TemplateManager()
    x = templates.variable()
    template = templates.template(f"{x}()")

    first = template.match(expr("foo()"))
    second = template.match(expr("bar()"))
    assert first is not None and second is not None
    assert first[x].text == "foo"
    assert second[x].text == "bar"
    assert template.context is None
    assert template.match(expr("foo(1)")) is None
