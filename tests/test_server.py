import pytest
from lsprotocol.types import CompletionItemKind, DiagnosticSeverity, Position
from pygls.workspace import Document

from plotscript.parser.parser import parse_plotscript
from plotscript.server import (
    _create_function_snippet,
    _get_word_at_position,
    builtin_hover_markdown,
    collect_diagnostics,
    completion_items,
    user_function_hover_markdown,
)


def test_clean_documents_have_no_diagnostics():
    assert collect_diagnostics("x = 1\nshow_text_box(x)") == []


@pytest.mark.parametrize(
    "source, start, fragment",
    [
        pytest.param("x = ;", (0, 4), "Expected a value or expression", id="syntax_error"),
        pytest.param("x = 1\ny = @", (1, 4), "Invalid character", id="lex_error"),
        pytest.param("func wait(n) { }", (0, 0), "wait", id="redefined_builtin"),
    ],
)
def test_errors_become_a_single_diagnostic(source, start, fragment):
    """
    The first lex or parse error is reported with a zero-based LSP range and
    the bare message, without the location prefix used on the command line.
    """
    diagnostics = collect_diagnostics(source)

    assert len(diagnostics) == 1
    diagnostic = diagnostics[0]
    assert (diagnostic.range.start.line, diagnostic.range.start.character) == start
    assert diagnostic.severity == DiagnosticSeverity.Error
    assert diagnostic.source == "plotscript"
    assert fragment in diagnostic.message
    assert not diagnostic.message.startswith("Error in")


def test_builtin_hover_shows_signature_and_docs():
    markdown = builtin_hover_markdown("show_menu")
    assert "(builtin) show_menu(menu: integer) -> any" in markdown
    assert "- `menu`: The menu id." in markdown
    assert "*Pauses the script until the game resumes it.*" in markdown

    assert "Pauses" not in builtin_hover_markdown("abs")
    assert builtin_hover_markdown("not_a_builtin") is None


def test_user_function_hover():
    program = parse_plotscript("\nfunc heal(hero, amount) { }")
    markdown = user_function_hover_markdown(program.functions[0])
    assert "func heal(hero, amount)" in markdown
    assert "Defined on line 2." in markdown


def test_completion_lists_builtins_user_functions_and_keywords():
    items = {item.label: item for item in completion_items("func reward(gold) { give_item(1, gold) }")}

    assert items["wait"].kind == CompletionItemKind.Function
    assert items["wait"].insert_text == "wait(${1:frames})"
    assert items["reward"].detail == "User-Defined Function"
    assert items["reward"].insert_text == "reward(${1:gold})"
    assert items["while"].kind == CompletionItemKind.Keyword


def test_completion_skips_user_functions_while_the_document_has_errors():
    labels = {item.label for item in completion_items("func reward(gold) { give_item(1, gold) ")}
    assert "reward" not in labels
    assert "give_item" in labels


def test_snippets():
    assert _create_function_snippet("hide_menu", []) == "hide_menu()"
    assert _create_function_snippet("move_hero", ["direction", "distance"]) == "move_hero(${1:direction}, ${2:distance})"


@pytest.mark.parametrize(
    "character, word",
    [
        pytest.param(0, "choice", id="start_of_word"),
        pytest.param(12, "show_menu", id="inside_word"),
        pytest.param(7, "", id="operator"),
    ],
)
def test_word_at_position(character, word):
    document = Document("file:///scene.ps", "choice = show_menu(2)\n")
    assert _get_word_at_position(document, Position(line=0, character=character)) == word
