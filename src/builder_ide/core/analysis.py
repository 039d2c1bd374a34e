from collections.abc import Iterator
from pathlib import PurePosixPath
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from builder_ide.models import AnalysisIssue

_EXTENSION_GRAMMAR = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

_REFERENCE_TYPES = frozenset({"identifier", "type_identifier", "shorthand_property_identifier"})


def grammar_for(file_name: str) -> str | None:
    return _EXTENSION_GRAMMAR.get(PurePosixPath(file_name).suffix.lower())


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


def _text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _first_error(root: Node) -> Node | None:
    for node in _walk(root):
        if node.is_error or node.is_missing:
            return node
    return None


def _imported_names(import_node: Node) -> list[str]:
    names: list[str] = []
    for node in _walk(import_node):
        if node.type == "import_specifier":
            local = node.child_by_field_name("alias") or node.child_by_field_name("name")
            if local is not None:
                names.append(_text(local))
        elif node.type == "identifier" and node.parent is not None:
            if node.parent.type in ("import_clause", "namespace_import"):
                names.append(_text(node))
    return names


def _unused_imports(root: Node) -> Iterator[AnalysisIssue]:
    imports = [n for n in root.children if n.type == "import_statement"]
    if not imports:
        return
    import_ranges = [(n.start_byte, n.end_byte) for n in imports]
    referenced = {
        _text(n)
        for n in _walk(root)
        if n.type in _REFERENCE_TYPES and not any(start <= n.start_byte < end for start, end in import_ranges)
    }
    for node in imports:
        names = _imported_names(node)
        if names and not any(name in referenced for name in names):
            source = _text(node.child_by_field_name("source")).strip("'\"`")
            yield AnalysisIssue(
                kind="suggestion",
                line=_line(node),
                message=f"Possibly unused import: {source}",
                suggestion="Remove unused imports to reduce bundle size",
            )


def analyze_source(file_name: str, source: str) -> list[AnalysisIssue]:
    """Static checks over a TypeScript/JavaScript file; other files yield no issues."""
    grammar = grammar_for(file_name)
    if grammar is None:
        return []

    parser = get_parser(cast(SupportedLanguage, grammar))
    tree = parser.parse(source.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        error = _first_error(root)
        line = _line(error) if error is not None else 0
        return [
            AnalysisIssue(
                kind="bug",
                line=line,
                message=f"Syntax error: unexpected input at line {line}",
                suggestion="Fix syntax errors before proceeding",
            )
        ]

    issues = list(_unused_imports(root))
    check_return_types = file_name.endswith(".ts")
    for node in _walk(root):
        if node.type == "function_declaration" and check_return_types:
            if node.child_by_field_name("return_type") is None:
                name = _text(node.child_by_field_name("name"))
                issues.append(
                    AnalysisIssue(
                        kind="warning",
                        line=_line(node),
                        message=f"Function '{name}' has no return type",
                        suggestion="Add explicit return type for better type safety",
                    )
                )
        elif node.type == "variable_declarator" and node.parent is not None:
            if node.parent.type == "variable_declaration":
                issues.append(
                    AnalysisIssue(
                        kind="suggestion",
                        line=_line(node),
                        message="Using 'var' is discouraged",
                        suggestion="Use 'const' or 'let' instead of 'var'",
                    )
                )
    return sorted(issues, key=lambda issue: issue.line)
