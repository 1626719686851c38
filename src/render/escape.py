from typing import Any

# "&" must stay first so the entities produced below are not escaped again
_HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)

LINE_BREAK = "<br>"


def escape_html(value: Any = "") -> str:
    """Escape a value for an HTML text node or a quoted attribute."""
    text = "" if value is None else str(value)
    for char, entity in _HTML_REPLACEMENTS:
        text = text.replace(char, entity)
    return text


def escape_with_line_breaks(value: Any = "") -> str:
    text = escape_html(value).replace("\r\n", "\n")
    return text.replace("\n", LINE_BREAK)
