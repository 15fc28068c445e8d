"""Front matter parsing and writing for vault documents.

A document starts with an optional header delimited by ``---`` lines. Each
header line is ``key: value``; bracketed values are lists. Values are kept as
strings, the parser never coerces types.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

from studiovault.core.config import DEFAULT_DOCUMENT_STATUS, FRONTMATTER_EXTENSIONS
from studiovault.core.errors import FrontMatterError
from studiovault.core.names import strip_extension

HeaderValue = str | list[str]

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
_LIST_ITEM_RE = re.compile(
    r"""\s*(?:"((?:[^"\\]|\\.)*)"|'([^']*)'|([^,]*))\s*(?:,|\Z)""",
    re.DOTALL,
)
# Every boundary str.splitlines() honours; none may appear raw in a header line
LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"

_ESCAPE_SEQUENCE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
# YAML-significant characters; any of them forces a quoted scalar
_NEEDS_QUOTING_RE = re.compile(
    r"""[":{}\[\],&*#?|\-<>=!%@`'\\\t]|[""" + LINE_BREAKS + "]"
)
_ESCAPED_CHARS_RE = re.compile("[\t" + LINE_BREAKS + "]")
_HEADING_UNSAFE_RE = re.compile("[<>" + LINE_BREAKS + "]")
_CRLF_FIRST_LINE_RE = re.compile(r"[^\n]*\r\n")

_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "\\": "\\"}
_NAMED_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t"}

DEFAULT_BODY_STUB = "Start defining your project here..."


@dataclass(frozen=True)
class FrontMatterDocument:
    """A document split into header attributes and body text."""

    attributes: dict[str, HeaderValue] = field(default_factory=dict)
    body: str = ""


def is_document_name(name: str, extensions: tuple[str, ...] = FRONTMATTER_EXTENSIONS) -> bool:
    """Check whether a file name carries front matter."""
    return name.endswith(extensions)


def _unescape_match(match: re.Match) -> str:
    code = match.group(1)
    if len(code) == 5:
        return chr(int(code[1:], 16))
    return _UNESCAPES.get(code, match.group(0))


def _unescape(text: str) -> str:
    return _ESCAPE_SEQUENCE_RE.sub(_unescape_match, text)


def _parse_list(inner: str) -> list[str]:
    items: list[str] = []
    pos = 0
    while pos < len(inner):
        match = _LIST_ITEM_RE.match(inner, pos)
        if match is None or match.end() == pos:
            break
        double, single, bare = match.groups()
        if double is not None:
            items.append(_unescape(double))
        elif single is not None:
            items.append(single)
        else:
            bare = bare.strip().replace('"', "").replace("'", "")
            if bare:
                items.append(bare)
        pos = match.end()
    return items


def _parse_value(value: str) -> HeaderValue:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _unescape(value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    if value.startswith("[") and value.endswith("]"):
        return _parse_list(value[1:-1])
    return value


def parse_frontmatter(content: str) -> FrontMatterDocument:
    """
    Split document content into header attributes and body.

    Args:
        content: Full document text

    Returns:
        FrontMatterDocument; without a header block the whole text is body
    """
    match = _FRONTMATTER_RE.match(content)
    if match is None:
        return FrontMatterDocument(attributes={}, body=content)

    attributes: dict[str, HeaderValue] = {}
    for line in match.group("header").split("\n"):
        line = line.removesuffix("\r")
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        attributes[key] = _parse_value(value.strip())

    return FrontMatterDocument(attributes=attributes, body=content[match.end() :])


def escape_yaml_value(text: str) -> str:
    """Render ``text`` as a double-quoted, escaped header scalar."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    escaped = _ESCAPED_CHARS_RE.sub(
        lambda m: _NAMED_ESCAPES.get(m.group(0), f"\\u{ord(m.group(0)):04x}"),
        escaped,
    )
    return f'"{escaped}"'


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (datetime, date)):
        text = value.isoformat()
    else:
        text = str(value)
    if not text or text != text.strip() or _NEEDS_QUOTING_RE.search(text):
        return escape_yaml_value(text)
    return text


def _render_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(escape_yaml_value(str(item)) for item in value) + "]"
    return _render_scalar(value)


def _check_key(key: Any) -> str:
    if (
        not isinstance(key, str)
        or not key
        or key != key.strip()
        or any(ch in key for ch in ":" + LINE_BREAKS)
    ):
        raise FrontMatterError(f"Cannot write front matter key {key!r}")
    return key


def serialize_frontmatter(
    attributes: dict[str, Any], body: str, *, newline: str = "\n"
) -> str:
    """
    Write attributes and body back into document text.

    ``id`` is written first, ``None`` values are skipped and lists are
    written as bracketed quoted lists. The header uses ``newline`` as its line
    ending.

    Raises:
        FrontMatterError: If a key cannot be represented in the header
    """
    lines = ["---"]
    doc_id = attributes.get("id")
    if doc_id is not None:
        lines.append(f"id: {_render_value(doc_id)}")
    for key, value in attributes.items():
        if key == "id" or value is None:
            continue
        lines.append(f"{_check_key(key)}: {_render_value(value)}")
    lines.append("---")
    return newline.join(lines) + newline + body


def update_frontmatter(content: str, updates: dict[str, Any]) -> str:
    """
    Update header fields in document content.

    Args:
        content: Full document text
        updates: Fields to set; a ``None`` value removes the field

    Returns:
        Updated document text with the body untouched
    """
    newline = "\r\n" if _CRLF_FIRST_LINE_RE.match(content) else "\n"
    document = parse_frontmatter(content)
    attributes: dict[str, Any] = dict(document.attributes)
    for key, value in updates.items():
        if value is None:
            attributes.pop(key, None)
        else:
            attributes[key] = value
    return serialize_frontmatter(attributes, document.body, newline=newline)


def create_default_document(
    name: str,
    *,
    now: datetime | None = None,
    doc_id: str | None = None,
) -> str:
    """
    Build the template for a new, empty document.

    Args:
        name: Name the user typed for the document
        now: Creation timestamp (defaults to current UTC time)
        doc_id: Document id (defaults to a random UUID)

    Returns:
        Document text with a default header and a body stub
    """
    title = strip_extension(name, (".md",))
    created = (now or datetime.now(timezone.utc)).isoformat(timespec="milliseconds")
    if created.endswith("+00:00"):
        created = created[: -len("+00:00")] + "Z"
    heading = _HEADING_UNSAFE_RE.sub("", title)

    return (
        "---\n"
        f"id: {escape_yaml_value(doc_id or str(uuid4()))}\n"
        f"title: {escape_yaml_value(title)}\n"
        f"status: {escape_yaml_value(DEFAULT_DOCUMENT_STATUS)}\n"
        f"created_at: {escape_yaml_value(created)}\n"
        "tags: []\n"
        "---\n"
        f"# {heading}\n"
        "\n"
        f"{DEFAULT_BODY_STUB}\n"
    )
