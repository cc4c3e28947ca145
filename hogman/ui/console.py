"""Rich consoles and the hogman color theme."""

from __future__ import annotations

from rich.console import Console
from rich.style import Style
from rich.theme import Theme

HOGMAN_THEME = Theme({
    "primary": Style(color="#C77DFF"),
    "secondary": Style(color="#FF8C42"),
    "success": Style(color="#00E676", bold=True),
    "error": Style(color="#FF5252", bold=True),
    "warning": Style(color="#FFB347"),
    "muted": Style(color="#888888"),
    "table.header": Style(color="#C77DFF", bold=True),
    "table.border": Style(color="#5D4E6D"),
    "section": Style(color="#FF8C42", bold=True),
    "code": Style(color="#00CED1"),
})


def make_console(stderr: bool = False, **kwargs) -> Console:
    """Console for stdout (data) or stderr (errors, logs, spinners)."""
    return Console(theme=HOGMAN_THEME, stderr=stderr, highlight=False, **kwargs)
