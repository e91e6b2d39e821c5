"""Front-matter preamble handling.

An artifact may start with a metadata block delimited by ``---`` lines.
The block is opaque: it is sliced off before parsing and reattached
verbatim afterwards.
"""

from __future__ import annotations

import re
from datetime import date

_PREAMBLE_RE = re.compile(r"^---\n([\s\S]*?)\n---\n")

DEFAULT_TITLE = "Generated Component"
DEFAULT_DESCRIPTION = "AI-generated React component"
DEFAULT_CATEGORY = "ui"
DEFAULT_TAGS = ("ai-generated", "component")
DEFAULT_VERSION = "1.0.0"


def split_preamble(source: str) -> tuple[str, str]:
    """Split source into ``(preamble, body)``.

    The preamble includes both delimiter lines and the trailing newline,
    so ``preamble + body == source`` always holds. Without a preamble the
    first element is an empty string.
    """
    match = _PREAMBLE_RE.match(source)
    if match is None:
        return "", source
    return source[: match.end()], source[match.end():]


def attach_preamble(preamble: str, body: str) -> str:
    return preamble + body


def has_preamble(source: str) -> bool:
    return _PREAMBLE_RE.match(source) is not None


def preamble_fields(source: str) -> dict[str, str]:
    """Read top-level ``key: value`` pairs from the preamble.

    Only flat scalar lines are returned; nested blocks and list items are
    skipped. Quotes around values are stripped.
    """
    match = _PREAMBLE_RE.match(source)
    if match is None:
        return {}
    fields: dict[str, str] = {}
    for line in match.group(1).splitlines():
        if not line or line[0].isspace() or line.startswith("-") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        fields[key.strip()] = value
    return fields


def default_preamble(title: str, *, today: date | None = None) -> str:
    """Build the preamble added to artifacts generated without one."""
    today = today or date.today()
    clean_title = " ".join(title.split())[:50].replace('"', "'").strip() or DEFAULT_TITLE
    tags = ", ".join(f'"{t}"' for t in DEFAULT_TAGS)
    return (
        "---\n"
        f'title: "{clean_title}"\n'
        f'description: "{DEFAULT_DESCRIPTION}"\n'
        f'category: "{DEFAULT_CATEGORY}"\n'
        f"tags: [{tags}]\n"
        f'version: "{DEFAULT_VERSION}"\n'
        f'createdAt: "{today.isoformat()}"\n'
        "---\n\n"
    )


def ensure_preamble(source: str, title: str, *, today: date | None = None) -> str:
    """Prepend a default preamble when the source has none."""
    if has_preamble(source):
        return source
    return default_preamble(title, today=today) + source.lstrip("\n")
