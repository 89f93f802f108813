"""
Тесты рендеринга шаблонов.

Проверяет:
- подстановку переменных и HTML-экранирование
- секции: списки, булевы значения, строки, объекты
- инвертированные секции
- лямбды и секции высшего порядка
- смену разделителей и вычистку одиночных строк
"""

from collections.abc import Sequence
from types import SimpleNamespace

import pytest

from stache import (
    Accessor,
    Context,
    HigherOrderSectionError,
    RenderConfig,
    SectionLambda,
    Writer,
    escape_html,
    section_lambda,
)


class TestVariables:
    def test_plain_text(self, engine):
        assert engine.render("Hello world", {}) == "Hello world"

    def test_simple_name(self, engine):
        assert engine.render("Hello {{name}}!", {"name": "Chris"}) == "Hello Chris!"

    def test_html_escaped(self, engine):
        out = engine.render("{{v}}", {"v": "& \" < > ' / ` ="})
        assert out == "&amp; &quot; &lt; &gt; &#39; &#x2F; &#x60; &#x3D;"

    def test_triple_mustache_unescaped(self, engine):
        assert engine.render("{{{v}}}", {"v": "<b>"}) == "<b>"

    def test_ampersand_unescaped(self, engine):
        assert engine.render("{{& v}}", {"v": "<b>"}) == "<b>"

    def test_missing_renders_empty(self, engine):
        assert engine.render("[{{nope}}][{{{nope}}}]", {}) == "[][]"

    def test_none_renders_empty(self, engine):
        assert engine.render("[{{v}}]", {"v": None}) == "[]"

    def test_zero_renders(self, engine):
        assert engine.render("{{v}}", {"v": 0}) == "0"

    def test_dotted_names(self, engine):
        view = {"person": {"name": "Joe", "address": {"city": "Paris"}}}
        assert engine.render("{{person.name}} / {{person.address.city}}", view) == "Joe / Paris"

    def test_dot_renders_current(self, engine):
        assert engine.render("{{#list}}({{.}}){{/list}}", {"list": ["a", "b"]}) == "(a)(b)"

    def test_view_none(self, engine):
        assert engine.render("a{{b}}c") == "ac"

    def test_object_attributes(self, engine):
        view = SimpleNamespace(name="obj", inner=SimpleNamespace(value=5))
        assert engine.render("{{name}}={{inner.value}}", view) == "obj=5"

    def test_accessor_value(self, engine):
        view = {"a": 2, "double": Accessor(lambda v: v["a"] * 2)}
        assert engine.render("{{double}}", view) == "4"

    def test_zero_arg_callable(self, engine):
        assert engine.render("{{now}}", {"now": lambda: "<t>"}) == "&lt;t&gt;"


class TestNumbers:
    def test_numbers_not_escaped(self, engine):
        class Weird(int):
            def __str__(self):
                return "<1>"

        assert engine.render("{{n}}", {"n": Weird(1)}) == "<1>"

    def test_custom_escape_applies_to_numbers(self, engine):
        class Weird(int):
            def __str__(self):
                return "<1>"

        config = {"escape": lambda s: escape_html(s)}
        assert engine.render("{{n}}", {"n": Weird(1)}, None, config) == "&lt;1&gt;"

    def test_bool_is_not_a_number(self, engine):
        assert engine.render("{{b}}", {"b": True}) == "True"

    def test_float(self, engine):
        assert engine.render("{{f}}", {"f": 1.5}) == "1.5"

    def test_booleans_use_python_form(self, engine):
        view = {"t": True, "f": False}
        assert engine.render("{{t}} {{f}} {{{t}}}", view) == "True False True"


class TestCustomEscape:
    def test_escape_override(self, engine):
        config = RenderConfig(escape=lambda s: s.upper())
        assert engine.render("{{v}} {{{v}}}", {"v": "a<b"}, None, config) == "A<B a<b"

    def test_escape_from_mapping(self, engine):
        assert engine.render("{{v}}", {"v": "<x>"}, None, {"escape": str}) == "<x>"

    def test_engine_default_escape(self, engine):
        engine.escape = lambda s: "[" + s + "]"
        assert engine.render("{{v}}", {"v": "x"}) == "[x]"


class TestSections:
    def test_list_iteration(self, engine):
        view = {"items": [{"name": "a"}, {"name": "b"}]}
        assert engine.render("{{#items}}<{{name}}>{{/items}}", view) == "<a><b>"

    def test_empty_list(self, engine):
        assert engine.render("a{{#items}}x{{/items}}b", {"items": []}) == "ab"

    def test_true_keeps_context(self, engine):
        view = {"flag": True, "name": "n"}
        assert engine.render("{{#flag}}{{name}}{{/flag}}", view) == "n"

    def test_false_skips(self, engine):
        assert engine.render("{{#flag}}x{{/flag}}", {"flag": False}) == ""

    def test_missing_skips(self, engine):
        assert engine.render("{{#flag}}x{{/flag}}", {}) == ""

    def test_string_pushed(self, engine):
        assert engine.render("{{#s}}[{{.}}]{{/s}}", {"s": "text"}) == "[text]"

    def test_empty_string_skips(self, engine):
        assert engine.render("{{#s}}x{{/s}}", {"s": ""}) == ""

    def test_number_pushed(self, engine):
        assert engine.render("{{#n}}{{.}}{{/n}}", {"n": 7}) == "7"

    def test_zero_skips(self, engine):
        assert engine.render("{{#n}}x{{/n}}", {"n": 0}) == ""

    def test_object_pushed(self, engine):
        view = {"a": {"b": "inner"}, "b": "outer"}
        assert engine.render("{{#a}}{{b}}{{/a}}", view) == "inner"

    def test_parent_fallback(self, engine):
        view = {"a": {"x": 1}, "b": "outer"}
        assert engine.render("{{#a}}{{b}}{{/a}}", view) == "outer"

    def test_nested_lists(self, engine):
        view = {"rows": [{"cells": [1, 2]}, {"cells": [3]}]}
        tpl = "{{#rows}}[{{#cells}}{{.}}{{/cells}}]{{/rows}}"
        assert engine.render(tpl, view) == "[12][3]"

    def test_list_of_lists(self, engine):
        view = {"m": [["a", "b"], ["c"]]}
        assert engine.render("{{#m}}({{#.}}{{.}}{{/.}}){{/m}}", view) == "(ab)(c)"

    def test_dotted_section(self, engine):
        view = {"a": {"b": {"c": "deep"}}}
        assert engine.render("{{#a.b}}{{c}}{{/a.b}}", view) == "deep"

    def test_range_iterated(self, engine):
        assert engine.render("{{#r}}{{.}},{{/r}}", {"r": range(3)}) == "0,1,2,"

    def test_empty_range_skips(self, engine):
        assert engine.render("{{#r}}x{{/r}}{{^r}}none{{/r}}", {"r": range(0)}) == "none"

    def test_custom_sequence_iterated(self, engine):
        class Row(Sequence):
            def __init__(self, *cells):
                self._cells = cells

            def __getitem__(self, index):
                return self._cells[index]

            def __len__(self):
                return len(self._cells)

        assert engine.render("{{#row}}[{{.}}]{{/row}}", {"row": Row("a", "b")}) == "[a][b]"

    def test_string_not_iterated(self, engine):
        assert engine.render("{{#s}}<{{.}}>{{/s}}", {"s": "ab"}) == "<ab>"


class TestInverted:
    @pytest.mark.parametrize("value", [None, False, [], "", 0])
    def test_renders_on_falsy(self, engine, value):
        assert engine.render("{{^v}}empty{{/v}}", {"v": value}) == "empty"

    def test_renders_on_missing(self, engine):
        assert engine.render("{{^v}}empty{{/v}}", {}) == "empty"

    @pytest.mark.parametrize("value", [True, [1], "x", 1, {"k": 1}])
    def test_skips_on_truthy(self, engine, value):
        assert engine.render("{{^v}}empty{{/v}}", {"v": value}) == ""

    def test_inverted_keeps_context(self, engine):
        assert engine.render("{{^v}}{{name}}{{/v}}", {"v": [], "name": "n"}) == "n"


class TestLambdas:
    def test_section_lambda_receives_raw_body(self, engine):
        seen = []

        @section_lambda
        def wrap(text, render):
            seen.append(text)
            return "<b>" + render(text) + "</b>"

        out = engine.render("{{#wrap}}Hi {{name}}.{{/wrap}}", {"wrap": wrap, "name": "Tater"})
        assert out == "<b>Hi Tater.</b>"
        assert seen == ["Hi {{name}}."]

    def test_callable_returning_lambda(self, engine):
        view = {"name": "x", "lambda": lambda: (lambda text, render: render(text) + "!")}
        assert engine.render("{{#lambda}}{{name}}{{/lambda}}", view) == "x!"

    def test_lambda_result_not_rerendered(self, engine):
        view = {"wrap": SectionLambda(lambda text, render: text)}
        assert engine.render("{{#wrap}}{{raw}}{{/wrap}}", view) == "{{raw}}"

    def test_lambda_none_result(self, engine):
        view = {"wrap": SectionLambda(lambda text, render: None)}
        assert engine.render("a{{#wrap}}x{{/wrap}}b", view) == "ab"

    def test_lambda_in_list_context(self, engine):
        view = {
            "items": [{"n": 1}, {"n": 2}],
            "wrap": SectionLambda(lambda text, render: "(" + render(text) + ")"),
        }
        assert engine.render("{{#items}}{{#wrap}}{{n}}{{/wrap}}{{/items}}", view) == "(1)(2)"

    @pytest.mark.parametrize("foo, expected", [
        ("abc", '<foo: "abc", lambda: "bar">'),
        (123, '<foo: "123", lambda: "bar">'),
    ])
    def test_lambda_with_custom_tags(self, engine, foo, expected):
        view = {
            "foo": foo,
            "bar": "bar",
            "lambda": SectionLambda(lambda text, render: render(text)),
        }
        template = '<foo: "[[foo]]", lambda: "[[#lambda]][[bar]][[/lambda]]">'
        assert engine.render(template, view, None, ["[[", "]]"]) == expected

    def test_lambda_without_original_template(self):
        writer = Writer()
        tokens = writer.parse("{{#wrap}}x{{/wrap}}")
        view = {"wrap": SectionLambda(lambda text, render: text)}

        with pytest.raises(HigherOrderSectionError):
            writer.render_tokens(tokens, Context(view))

    def test_inverted_lambda_is_truthy(self, engine):
        view = {"wrap": SectionLambda(lambda text, render: text)}
        assert engine.render("{{^wrap}}x{{/wrap}}", view) == ""


class TestDelimiters:
    def test_custom_tags_argument(self, engine):
        assert engine.render("<%name%> {{name}}", {"name": "n"}, None, ["<%", "%>"]) == "n {{name}}"

    def test_custom_tags_string(self, engine):
        assert engine.render("<% name %>", {"name": "n"}, None, "<% %>") == "n"

    def test_delimiter_change_in_template(self, engine):
        tpl = "{{a}} {{=<% %>=}}<%b%> {{c}} <%={{ }}=%>{{d}}"
        view = {"a": 1, "b": 2, "c": 3, "d": 4}
        assert engine.render(tpl, view) == "1 2 {{c}} 4"

    def test_delimiter_change_standalone(self, engine):
        assert engine.render("a\n{{=| |=}}\n|x|\n", {"x": "y"}) == "a\ny\n"

    def test_engine_default_tags(self, engine):
        engine.tags = ["[[", "]]"]
        assert engine.render("[[x]]", {"x": 1}) == "1"


class TestStandaloneLines:
    def test_section_lines_removed(self, engine):
        tpl = "| This Is\n{{#boolean}}\n|\n{{/boolean}}\n| A Line\n"
        assert engine.render(tpl, {"boolean": True}) == "| This Is\n|\n| A Line\n"

    def test_indented_section_lines_removed(self, engine):
        tpl = "| This Is\n  {{#boolean}}\n|\n  {{/boolean}}\n| A Line\n"
        assert engine.render(tpl, {"boolean": True}) == "| This Is\n|\n| A Line\n"

    def test_inline_section_keeps_whitespace(self, engine):
        assert engine.render(" | {{#b}} {{/b}} | \n", {"b": True}) == " |   | \n"

    def test_surrounding_whitespace_kept(self, engine):
        tpl = " | {{#boolean}}\t|\t{{/boolean}} | \n"
        assert engine.render(tpl, {"boolean": True}) == " | \t|\t | \n"

    def test_comment_line_removed(self, engine):
        assert engine.render("Begin.\n{{! Comment }}\nEnd.\n", {}) == "Begin.\nEnd.\n"

    def test_variable_line_kept(self, engine):
        assert engine.render("  {{x}}\n", {"x": "v"}) == "  v\n"


class TestRenderContext:
    def test_context_as_view(self):
        writer = Writer()
        context = Context({"outer": "o"}).push({"inner": "i"})
        assert writer.render("{{outer}}{{inner}}", context) == "oi"
