"""Output rendering: JSON for agents, tables and text for humans."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator, Iterable, Optional

from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from hogman.core.errors import HogmanError
from hogman.ui.console import make_console

MAX_COL = 50
NO_RESULTS = "(no results)"
UNBOUNDED_WIDTH = 10_000


def truncate(value: str, width: int = MAX_COL) -> str:
    return value if len(value) <= width else value[: width - 1] + "…"


def to_jsonable(data: Any) -> Any:
    """Convert models (and lists/dicts of them) to plain JSON data.

    Only fields the server actually sent are kept.
    """
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", exclude_unset=True)
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_jsonable(item) for item in data]
    return data


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Renderer:
    """Writes command results to stdout and errors to stderr.

    ``json_mode`` is fixed for the lifetime of the renderer; commands
    receive it explicitly instead of consulting a global flag.
    """

    json_mode: bool = False
    console: Console = field(default_factory=make_console)
    err_console: Console = field(default_factory=lambda: make_console(stderr=True))

    def print_json(self, data: Any) -> None:
        self.console.print_json(data=to_jsonable(data), indent=2, default=str)

    def print(self, data: Any) -> None:
        """Print a value: JSON in JSON mode, strings verbatim otherwise."""
        if not self.json_mode and isinstance(data, str):
            self.console.print(data, markup=False)
        else:
            self.print_json(data)

    def print_table(self, rows: Iterable[dict[str, Any]], columns: list[str]) -> None:
        """Print rows as a table; in JSON mode the rows are printed as-is."""
        rows = list(rows)
        if self.json_mode:
            self.print_json(rows)
            return

        self.print_grid(columns, [[row.get(column) for column in columns] for row in rows])

    def print_grid(self, columns: list[str], rows: Iterable[list[Any]]) -> None:
        """Human table where the i-th value of each row sits under ``columns[i]``."""
        rows = list(rows)
        if not rows:
            self.console.print(NO_RESULTS, style="muted")
            return

        table = Table(
            box=box.SIMPLE_HEAD,
            header_style="table.header",
            border_style="table.border",
            pad_edge=False,
        )
        for column in columns:
            table.add_column(column.upper(), no_wrap=True, overflow="ellipsis")
        for row in rows:
            cells = [_cell(row[i]) if i < len(row) else "" for i in range(len(columns))]
            table.add_row(*(Text(truncate(cell)) for cell in cells))

        if not self.console.is_terminal:
            # Piped output is not bound to a terminal width; widen to fit the table.
            wide = self.console.options.update(width=UNBOUNDED_WIDTH)
            needed = Measurement.get(self.console, wide, table).maximum
            if needed > self.console.width:
                self.console.width = needed
        self.console.print(table)

    def print_message(self, message: str, style: Optional[str] = None) -> None:
        """Human-only status line; suppressed in JSON mode."""
        if not self.json_mode:
            self.console.print(message, style=style, markup=False)

    def print_error(self, error: HogmanError) -> None:
        """``[CODE] message`` on stderr, plus a JSON error object in JSON mode."""
        self.err_console.print(Text(f"[{error.code}] {error.message}", style="error"))
        if self.json_mode:
            self.print_json(error.to_dict())

    @contextmanager
    def spinner(self, message: str) -> Generator[None, None, None]:
        """Show a spinner on stderr while a request runs (interactive terminals only)."""
        if self.json_mode or not self.err_console.is_terminal:
            yield
            return
        with self.err_console.status(message, spinner="dots"):
            yield
