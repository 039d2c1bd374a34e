import re
from pathlib import PurePosixPath

from builder_ide.models import FileSummary

_EXTENSION_LANGUAGE = {
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".json": "JSON",
    ".css": "CSS",
    ".md": "Markdown",
}

_FIRST_MATCH_EXPORTS = (
    re.compile(r"export\s+default\s+function\s+(\w+)"),
    re.compile(r"export\s+default\s+(?!function\b|class\b|async\b)(\w+)"),
)
_ALL_MATCH_EXPORTS = (re.compile(r"export\s+const\s+(\w+)"),)
_MODULE_EXPORTS = re.compile(r"module\.exports\s*=\s*(\w+)")

_IMPORT = re.compile(r"\bimport\b")
_REQUIRE = re.compile(r"\brequire\(")

_FIRST_LINE_WIDTH = 120


def detect_language(file_name: str) -> str:
    return _EXTENSION_LANGUAGE.get(PurePosixPath(file_name).suffix.lower(), "plaintext")


def find_exports(code: str) -> list[str]:
    exports: list[str] = []
    for rx in _FIRST_MATCH_EXPORTS:
        m = rx.search(code)
        if m:
            exports.append(m.group(1))
    for rx in _ALL_MATCH_EXPORTS:
        exports.extend(m.group(1) for m in rx.finditer(code))
    m = _MODULE_EXPORTS.search(code)
    if m:
        exports.append(m.group(1))
    return exports


def summarize(file_name: str, code: str) -> FileSummary:
    """Heuristic, regex-based summary of a source file."""
    lines = re.split(r"\r?\n", code)
    first_non_empty = next((line for line in lines if line.strip()), "")
    language = detect_language(file_name)
    imports = len(_IMPORT.findall(code))
    requires = len(_REQUIRE.findall(code))

    preview = first_non_empty[:_FIRST_LINE_WIDTH]
    if len(first_non_empty) > _FIRST_LINE_WIDTH:
        preview += "…"

    return FileSummary(
        language=language,
        line_count=len(lines),
        summary=(
            f"This {language} file has {len(lines)} lines, {imports} ES imports and "
            f"{requires} CommonJS requires. First non-empty line: {preview}"
        ),
        exports=find_exports(code),
    )
