import logging
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    Diagnostic,
    DiagnosticSeverity,
    Hover,
    InsertTextFormat,
    MarkupContent,
    MarkupKind,
    Position,
    Range,
)
from pygls.server import LanguageServer
from pygls.workspace import Document

from plotscript.config import RESERVED_KEYWORDS
from plotscript.exceptions import ErrorCode, ParseError, PlotScriptError
from plotscript.functions import FUNCTION_SIGNATURES
from plotscript.functions.registry import BuiltinDescriptor
from plotscript.parser.classes import FunctionDefinition, Program
from plotscript.parser.parser import parse_plotscript

logger = logging.getLogger(__name__)

server = LanguageServer("plotscript-server", "v1")

DESCRIPTORS = {name: BuiltinDescriptor.from_signature(name, sig, sig["category"]) for name, sig in FUNCTION_SIGNATURES.items()}


def _analyse(source: str, script_name: str = "<document>") -> Program:
    program = parse_plotscript(source, script_name)
    for function in program.functions:
        if function.name in FUNCTION_SIGNATURES:
            raise ParseError(ErrorCode.REDEFINE_BUILTIN_FUNCTION, span=function.span, script_name=script_name, name=function.name)
    return program


def _error_range(error: PlotScriptError) -> Range:
    if error.span is None:
        return Range(start=Position(line=0, character=0), end=Position(line=0, character=100))
    span = error.span
    return Range(start=Position(line=span.s_line - 1, character=span.s_col - 1), end=Position(line=span.e_line - 1, character=span.e_col - 1))


def collect_diagnostics(source: str, script_name: str = "<document>") -> List[Diagnostic]:
    """Lex and parse errors for a document. A script stops at its first error, so there is at most one."""
    try:
        _analyse(source, script_name)
    except PlotScriptError as e:
        return [Diagnostic(range=_error_range(e), message=e.core_message, severity=DiagnosticSeverity.Error, source="plotscript")]
    return []


def builtin_hover_markdown(name: str) -> Optional[str]:
    descriptor = DESCRIPTORS.get(name)
    if descriptor is None:
        return None
    doc = descriptor.doc
    contents = [f"```plotscript\n(builtin) {descriptor.signature_text()}\n```", "---", f"**{doc.get('summary', '')}**"]
    for param in doc.get("params", []):
        contents.append(f"- `{param['name']}`: {param['desc']}")
    if doc.get("returns"):
        contents.append(f"\n*Returns*: {doc['returns']}")
    if descriptor.can_suspend:
        contents.append("\n*Pauses the script until the game resumes it.*")
    return "\n".join(contents)


def user_function_hover_markdown(function: FunctionDefinition) -> str:
    params = ", ".join(p.name for p in function.params)
    return f"```plotscript\n(function) func {function.name}({params})\n```\nDefined on line {function.span.s_line}."


def _create_function_snippet(name: str, params: List[str]) -> str:
    """Creates an LSP snippet string from a function name and parameter list."""
    placeholders = [f"${{{i+1}:{p}}}" for i, p in enumerate(params)]
    return f"{name}({', '.join(placeholders)})" if placeholders else f"{name}()"


def completion_items(source: str) -> List[CompletionItem]:
    items = []
    for name, descriptor in DESCRIPTORS.items():
        items.append(
            CompletionItem(
                label=name,
                kind=CompletionItemKind.Function,
                detail=f"Built-in Function ({descriptor.category})",
                documentation=descriptor.doc.get("summary"),
                insert_text=_create_function_snippet(name, [p["name"] for p in descriptor.doc.get("params", [])]),
                insert_text_format=InsertTextFormat.Snippet,
            )
        )

    for function in _user_functions(source).values():
        items.append(
            CompletionItem(
                label=function.name,
                kind=CompletionItemKind.Function,
                detail="User-Defined Function",
                insert_text=_create_function_snippet(function.name, [p.name for p in function.params]),
                insert_text_format=InsertTextFormat.Snippet,
            )
        )

    for keyword in sorted(RESERVED_KEYWORDS):
        items.append(CompletionItem(label=keyword, kind=CompletionItemKind.Keyword))
    return items


def _user_functions(source: str) -> Dict[str, FunctionDefinition]:
    """Functions of the last version of the document that parsed; none while it has errors."""
    try:
        program = _analyse(source)
    except PlotScriptError:
        return {}
    return {f.name: f for f in program.functions}


def _get_word_at_position(document: Document, position: Position) -> str:
    if position.line >= len(document.lines):
        return ""
    line = document.lines[position.line]
    start, end = position.character, position.character
    while start > 0 and (line[start - 1].isalnum() or line[start - 1] == "_"):
        start -= 1
    while end < len(line) and (line[end].isalnum() or line[end] == "_"):
        end += 1
    return line[start:end]


def _validate(ls, params):
    document = ls.workspace.get_document(params.text_document.uri)
    diagnostics = collect_diagnostics(document.source, params.text_document.uri)
    logger.debug("Publishing %d diagnostic(s) for %s", len(diagnostics), params.text_document.uri)
    ls.publish_diagnostics(params.text_document.uri, diagnostics)


@server.feature(TEXT_DOCUMENT_DID_OPEN)
async def did_open(ls, params):
    _validate(ls, params)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls, params):
    _validate(ls, params)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(params):
    document = server.workspace.get_document(params.text_document.uri)
    word = _get_word_at_position(document, params.position)
    if not word:
        return None

    markdown = builtin_hover_markdown(word)
    if markdown is None:
        function = _user_functions(document.source).get(word)
        if function is None:
            return None
        markdown = user_function_hover_markdown(function)
    return Hover(contents=MarkupContent(kind=MarkupKind.Markdown, value=markdown))


@server.feature(TEXT_DOCUMENT_COMPLETION)
def completions(params):
    document = server.workspace.get_document(params.text_document.uri)
    return CompletionList(items=completion_items(document.source), is_incomplete=False)


def start_server():
    server.start_io()


if __name__ == "__main__":
    start_server()
