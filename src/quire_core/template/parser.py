"""Directive parsing utilities.

Templates are never compiled; every phase re-scans the whole string with
the patterns below.
"""

import re
from dataclasses import dataclass, field

from .html import escape_html

# Block directives ({{@each}} / legacy {{#each}}, {{@if}} / {{#if}})
EACH_OPEN = re.compile(r"\{\{[#@]each\s+([^}]+)\}\}")
EACH_CLOSE = "{{/each}}"
IF_OPEN = re.compile(r"\{\{[#@]if\s+([^}]+)\}\}")
IF_CLOSE = "{{/if}}"

# {{@partial 'name'}} or {{@partial var}}
PARTIAL = re.compile(r"\{\{@partial\s+(?:['\"]([^'\"]+)['\"]|([^}\s]+))\s*\}\}")

# {{@yield "name"}}, {{@yield name}} or {{@yield}}; definitions close with {{/yield}}
YIELD_OPEN = re.compile(r"\{\{@yield(?=[\s}])(?:\s+(?:['\"]([^'\"]*)['\"]|([^}\s]+)))?[^}]*\}\}")
YIELD_CLOSE = "{{/yield}}"
DEFAULT_YIELD = "default"

LIST = re.compile(r"\{\{@(ul|ol)\s+([^}]+)\}\}")
HELPER = re.compile(r"\{\{@(assetPath|urlPath)\s+(?:['\"]([^'\"]+)['\"]|([^}\s]+))\s*\}\}")
CANVAS = re.compile(r"\{\{@canvas\s+([^}]+)\}\}")

# {{@index}} and other single-token @ variables
SPECIAL_VAR = re.compile(r"\{\{(@[^{}\s]+)\}\}")
RAW_VAR = re.compile(r"\{\{\{([^{}]*?)\}\}\}")
VAR = re.compile(r"\{\{([^#/@{}][^{}]*?)\}\}")

# Leftover directive syntax stripped by the final cleanup pass
CLEANUP_PATTERNS = (
    re.compile(r"\{\{[#@]each\s+[^}]+\}\}"),
    re.compile(r"\{\{[#@]if\s+[^}]+\}\}"),
    re.compile(r"\{\{/(?:each|if|yield)\}\}"),
    re.compile(r"\{\{@partial\s+[^}]+\}\}"),
    re.compile(r"\{\{@yield[^}]*\}\}"),
    re.compile(r"\{\{\{[^}]*\}\}\}"),
    re.compile(r"\{\{[^}]*\}\}"),
)


@dataclass
class Block:
    """A matched open tag, its balanced close tag, and what lies between."""

    start: int
    end: int
    argument: str
    inner: str


@dataclass
class YieldTag:
    """A yield definition (``inner`` set) or a bare insertion point."""

    start: int
    end: int
    name: str
    inner: str | None = None

    @property
    def is_definition(self) -> bool:
        return self.inner is not None


@dataclass
class ParsedAttributes:
    """Result of splitting ``#id .class rest`` directive arguments."""

    id: str | None = None
    classes: list[str] = field(default_factory=list)
    path: str = ""

    @property
    def tokens(self) -> list[str]:
        return self.path.split()

    def to_html(self) -> str:
        """Render as `` id="..." class="..."`` (leading space included)."""
        html = ""
        if self.id:
            html += f' id="{escape_html(self.id)}"'
        if self.classes:
            html += f' class="{escape_html(" ".join(self.classes))}"'
        return html


def parse_attributes(attributes: str) -> ParsedAttributes:
    """Tokenize directive arguments into ``#id``, ``.class`` and the rest.

    The last ``#id`` wins; classes keep their order. Remaining tokens are
    re-joined with single spaces to form the path.
    """
    parsed = ParsedAttributes()
    rest: list[str] = []
    for token in attributes.split():
        if token.startswith("#"):
            parsed.id = token[1:]
        elif token.startswith("."):
            parsed.classes.append(token[1:])
        else:
            rest.append(token)
    parsed.path = " ".join(rest)
    return parsed


def find_block(text: str, open_pattern: re.Pattern[str], close_tag: str, start: int = 0) -> Block | None:
    """Find the first block whose open tag has a balanced close tag.

    Nested blocks of the same kind are skipped over, so the returned block
    is always the outermost one. An unterminated open tag is passed over
    and the search continues after it.
    """
    while True:
        opened = open_pattern.search(text, start)
        if opened is None:
            return None

        depth = 1
        pos = opened.end()
        while True:
            close_at = text.find(close_tag, pos)
            if close_at == -1:
                break
            nested = open_pattern.search(text, pos, close_at)
            if nested is not None:
                depth += 1
                pos = nested.end()
                continue
            depth -= 1
            if depth == 0:
                return Block(
                    start=opened.start(),
                    end=close_at + len(close_tag),
                    argument=opened.group(1).strip(),
                    inner=text[opened.end() : close_at],
                )
            pos = close_at + len(close_tag)

        start = opened.end()


def yield_name(match: re.Match[str]) -> str:
    """Block name from a YIELD_OPEN match; ``default`` when neither form is present."""
    return match.group(1) or match.group(2) or DEFAULT_YIELD


def scan_yields(text: str) -> list[YieldTag]:
    """Locate yield definitions and bare insertion points, left to right.

    A yield tag is a definition when the next ``{{/yield}}`` comes before
    the next yield tag; otherwise it is a bare insertion point. Yields do
    not nest.
    """
    tags: list[YieldTag] = []
    pos = 0
    while True:
        opened = YIELD_OPEN.search(text, pos)
        if opened is None:
            return tags

        name = yield_name(opened)
        close_at = text.find(YIELD_CLOSE, opened.end())
        following = YIELD_OPEN.search(text, opened.end())
        if close_at != -1 and (following is None or close_at < following.start()):
            end = close_at + len(YIELD_CLOSE)
            tags.append(YieldTag(opened.start(), end, name, text[opened.end() : close_at]))
            pos = end
        else:
            tags.append(YieldTag(opened.start(), opened.end(), name))
            pos = opened.end()


def replace_spans(text: str, replacements: list[tuple[int, int, str]]) -> str:
    """Replace non-overlapping ``(start, end, value)`` spans, given in order."""
    parts: list[str] = []
    cursor = 0
    for start, end, value in replacements:
        parts.append(text[cursor:start])
        parts.append(value)
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def has_directives(text: str) -> bool:
    """Check if text contains any ``{{`` directive syntax."""
    return "{{" in text


def strip_directives(text: str) -> str:
    """Remove any directive syntax left after rendering."""
    for pattern in CLEANUP_PATTERNS:
        text = pattern.sub("", text)
    return text


def _tag_issues(text: str, open_pattern: re.Pattern[str], close_tag: str, kind: str) -> list[str]:
    errors: list[str] = []
    events = [(m.start(), "open", m.group(1).strip()) for m in open_pattern.finditer(text)]
    events += [(m.start(), "close", "") for m in re.finditer(re.escape(close_tag), text)]
    events.sort()

    stack: list[tuple[int, str]] = []
    for offset, event, argument in events:
        if event == "open":
            stack.append((offset, argument))
        elif stack:
            stack.pop()
        else:
            errors.append(f"Unexpected {close_tag} at offset {offset}")
    for offset, argument in stack:
        errors.append(f"Unterminated {{{{@{kind} {argument}}}}} block at offset {offset}")
    return errors


def validate_syntax(text: str) -> list[str]:
    """Validate directive syntax without rendering.

    Args:
        text: Template to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: list[str] = []
    errors.extend(_tag_issues(text, EACH_OPEN, EACH_CLOSE, "each"))
    errors.extend(_tag_issues(text, IF_OPEN, IF_CLOSE, "if"))

    consumed = {tag.end - len(YIELD_CLOSE) for tag in scan_yields(text) if tag.is_definition}
    for match in re.finditer(re.escape(YIELD_CLOSE), text):
        if match.start() not in consumed:
            errors.append(f"Unexpected {YIELD_CLOSE} at offset {match.start()}")

    for match in re.finditer(r"\{\{\{", text):
        if text.find("}}}", match.end()) == -1:
            errors.append(f"Unterminated raw variable at offset {match.start()}")
            break

    return errors


def _is_dimension(token: str) -> bool:
    if token.endswith(("%", "vh", "vw")):
        return True
    try:
        float(token)
    except ValueError:
        return False
    return True


def extract_references(text: str) -> list[str]:
    """Extract every variable path a template refers to.

    E.g. ``"{{@each posts}}{{title}}{{/each}}"`` → ``["posts", "title"]``.
    Quoted literals (partial names, helper arguments) are not references.

    Args:
        text: Template to scan

    Returns:
        Paths in first-seen order, without duplicates
    """
    found: list[tuple[int, str]] = []

    for pattern in (EACH_OPEN, IF_OPEN):
        found += [(m.start(), m.group(1).strip()) for m in pattern.finditer(text)]
    found += [(m.start(), m.group(2)) for m in PARTIAL.finditer(text) if m.group(2)]
    found += [(m.start(), m.group(3)) for m in HELPER.finditer(text) if m.group(3)]
    for m in LIST.finditer(text):
        path = parse_attributes(m.group(2)).path
        if path:
            found.append((m.start(), path))
    for m in CANVAS.finditer(text):
        for token in parse_attributes(m.group(1)).tokens:
            if not _is_dimension(token):
                found.append((m.start(), token))
    found += [(m.start(), m.group(1).strip()) for m in RAW_VAR.finditer(text)]
    found += [(m.start(), m.group(1).strip()) for m in VAR.finditer(text)]

    seen: set[str] = set()
    references: list[str] = []
    for _, path in sorted(found, key=lambda item: item[0]):
        if path and path not in seen:
            seen.add(path)
            references.append(path)
    return references
