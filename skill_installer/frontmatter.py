"""Best-effort recovery of the declared skill name from SKILL.md frontmatter."""

from __future__ import annotations

import re

# Leading ---/--- block; no YAML parsing, malformed blocks simply don't match
FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
# Top-level keys only; nested mappings may carry their own name:
NAME_RE = re.compile(r"^name:[ \t]*(.*?)[ \t]*\r?$", re.MULTILINE)


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].strip()
    return value


def extract_name(content: str, fallback: str) -> str:
    """Return the ``name:`` declared in the frontmatter, or ``fallback``.

    Never raises: a missing block, a block without ``name:`` or an empty
    value all fall back.
    """
    match = FRONTMATTER_RE.match(content)
    if not match:
        return fallback

    name_match = NAME_RE.search(match.group(1))
    if not name_match:
        return fallback

    name = _strip_quotes(name_match.group(1).strip())
    return name or fallback
