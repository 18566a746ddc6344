"""Source analyzer — import/require specifiers via tree-sitter."""

from __future__ import annotations

import codecs
import re

import structlog
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

log = structlog.get_logger("autotypings.parser")

# TSX is a superset that also accepts plain JS/JSX/TS input.
TSX_LANGUAGE = Language(tsts.language_tsx())
_parser: Parser | None = None

_REFERENCE_PATH_RE = re.compile(
    r"""^[ \t]*///[ \t]*<reference\s+path\s*=\s*(['"])(?P<path>.+?)\1\s*/?>""",
    re.MULTILINE,
)


def _get_parser() -> Parser:
    global _parser
    if _parser is None:
        _parser = Parser(TSX_LANGUAGE)
    return _parser


def extract_import_specifiers(source_text: str) -> list[str]:
    """Return module specifiers used by static imports, ``import()`` and ``require()``.

    Order is first occurrence in a pre-order walk of the syntax tree, without
    duplicates. Only plain string literals count; template literals and computed
    expressions cannot be resolved statically and are skipped. A parse failure
    is logged and yields an empty list.
    """
    if not source_text or not source_text.strip():
        return []

    try:
        tree = _get_parser().parse(source_text.encode("utf-8"))
        specifiers = list(_walk_specifiers(tree.root_node))
    except Exception as exc:
        log.warning("parser.failed", error=str(exc))
        return []

    return list(dict.fromkeys(specifiers))


def extract_reference_paths(declaration_text: str) -> list[str]:
    """Return the targets of ``/// <reference path="..." />`` directives, in order."""
    return [m.group("path") for m in _REFERENCE_PATH_RE.finditer(declaration_text)]


def _walk_specifiers(root: Node):
    stack = [root]
    while stack:
        node = stack.pop()
        spec = _specifier_of(node)
        if spec is not None:
            yield spec
        stack.extend(reversed(node.children))


def _specifier_of(node: Node) -> str | None:
    if node.type in ("import_statement", "export_statement"):
        source = node.child_by_field_name("source")
        if source is None:
            # import x = require("y")
            clause = next((c for c in node.children if c.type == "import_require_clause"), None)
            if clause is not None:
                source = next((c for c in clause.children if c.type == "string"), None)
        return _string_value(source)

    if node.type == "call_expression":
        fn = node.child_by_field_name("function")
        if fn is None:
            return None
        is_dynamic_import = fn.type == "import"
        is_require = fn.type == "identifier" and fn.text == b"require"
        if not (is_dynamic_import or is_require):
            return None
        args = node.child_by_field_name("arguments")
        if args is None or not args.named_children:
            return None
        return _string_value(args.named_children[0])

    return None


def _string_value(node: Node | None) -> str | None:
    """Literal value of a ``string`` node, with escape sequences decoded."""
    if node is None or node.type != "string" or node.text is None:
        return None
    parts: list[str] = []
    for child in node.named_children:
        text = child.text.decode("utf-8") if child.text is not None else ""
        if child.type == "escape_sequence":
            parts.append(_unescape(text))
        elif child.type == "string_fragment":
            parts.append(text)
    return "".join(parts)


def _unescape(sequence: str) -> str:
    # \u{1F600} is JS-only; the rest shares Python's escape syntax
    if sequence.startswith("\\u{") and sequence.endswith("}"):
        try:
            return chr(int(sequence[3:-1], 16))
        except ValueError:
            return sequence[1:]
    try:
        return codecs.decode(sequence, "unicode_escape")
    except UnicodeDecodeError:
        return sequence[1:]
