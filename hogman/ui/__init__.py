"""Output components for the hogman CLI."""

from hogman.ui.console import HOGMAN_THEME, make_console
from hogman.ui.output import Renderer, to_jsonable, truncate

__all__ = [
    "HOGMAN_THEME",
    "make_console",
    "Renderer",
    "to_jsonable",
    "truncate",
]
