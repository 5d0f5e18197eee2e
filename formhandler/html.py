"""Small HTML building helpers on top of MarkupSafe."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup, escape

VOID_ELEMENTS = frozenset({"input", "img", "br", "hr", "meta", "link"})


def attr_name(key: str) -> str:
    """Convert Python naming to HTML: class_ -> class, data_id -> data-id."""
    return key.rstrip("_").replace("_", "-")


def render_attrs(attrs: Mapping[str, Any] | None) -> str:
    """Render a mapping as an HTML attribute string.

    Returns '' or ' key="val" key2="val2"'. ``None`` and ``False`` values are
    left out, ``True`` renders the XHTML boolean form (``disabled="disabled"``).
    """
    if not attrs:
        return ""
    parts = []
    for k, v in attrs.items():
        if v is None or v is False:
            continue
        name = attr_name(k)
        if v is True:
            v = name
        parts.append(f'{name}="{escape(str(v))}"')
    if not parts:
        return ""
    return " " + " ".join(parts)


def tag(name: str, attrs: Mapping[str, Any] | None = None, content: Any = None) -> Markup:
    """Render a complete element. ``content`` is escaped unless it is Markup."""
    html = f"<{name}{render_attrs(attrs)}>"
    if name in VOID_ELEMENTS:
        return Markup(html)
    inner = "" if content is None else escape(content)
    return Markup(f"{html}{inner}</{name}>")
