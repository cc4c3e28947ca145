"""Tests for JSON and human output rendering."""

import io
import json

import pytest

from hogman.core.errors import ErrorKind, HogmanError
from hogman.core.models import Project
from hogman.ui.console import make_console
from hogman.ui.output import NO_RESULTS, Renderer, to_jsonable, truncate


@pytest.fixture
def buffers():
    return io.StringIO(), io.StringIO()


def renderer(buffers, json_mode=False) -> Renderer:
    out, err = buffers
    return Renderer(
        json_mode=json_mode,
        console=make_console(file=out, width=200),
        err_console=make_console(file=err, width=200),
    )


class TestHelpers:
    """Cell truncation and model conversion."""

    def test_truncate_short_value(self):
        assert truncate("abc") == "abc"

    def test_truncate_long_value(self):
        value = truncate("x" * 80)
        assert len(value) == 50
        assert value.endswith("…")

    def test_to_jsonable_models(self):
        data = to_jsonable({"projects": [Project(id=1, name="Web", extra_field=True)]})
        assert data == {"projects": [{"id": 1, "name": "Web", "extra_field": True}]}


class TestJsonMode:
    """Everything on stdout is parseable JSON."""

    def test_print_value(self, buffers):
        renderer(buffers, json_mode=True).print({"a": [1, 2]})
        assert json.loads(buffers[0].getvalue()) == {"a": [1, 2]}

    def test_print_string_is_json(self, buffers):
        renderer(buffers, json_mode=True).print("done")
        assert json.loads(buffers[0].getvalue()) == "done"

    def test_table_prints_rows(self, buffers):
        rows = [{"id": 1, "name": "a", "hidden": "x"}]
        renderer(buffers, json_mode=True).print_table(rows, ["id", "name"])
        assert json.loads(buffers[0].getvalue()) == rows

    def test_empty_table(self, buffers):
        renderer(buffers, json_mode=True).print_table([], ["id"])
        assert json.loads(buffers[0].getvalue()) == []

    def test_messages_suppressed(self, buffers):
        renderer(buffers, json_mode=True).print_message("Working")
        assert buffers[0].getvalue() == ""

    def test_error_object(self, buffers):
        """Errors go to stderr and as a JSON object to stdout."""
        renderer(buffers, json_mode=True).print_error(
            HogmanError(ErrorKind.NOT_FOUND, "Resource not found: x", 404)
        )
        assert json.loads(buffers[0].getvalue()) == {
            "error": "Resource not found: x",
            "code": "NOT_FOUND",
            "status": 404,
        }
        assert "[NOT_FOUND] Resource not found: x" in buffers[1].getvalue()

    def test_error_object_without_status(self, buffers):
        renderer(buffers, json_mode=True).print_error(HogmanError(ErrorKind.NO_PROJECT, "No project"))
        assert json.loads(buffers[0].getvalue()) == {"error": "No project", "code": "NO_PROJECT"}


class TestHumanMode:
    """Tables and plain text."""

    def test_string_printed_verbatim(self, buffers):
        renderer(buffers).print("[not markup] done")
        assert buffers[0].getvalue() == "[not markup] done\n"

    def test_object_printed_as_json(self, buffers):
        renderer(buffers).print({"key": "beta"})
        assert json.loads(buffers[0].getvalue()) == {"key": "beta"}

    def test_table_headers_and_cells(self, buffers):
        rows = [{"id": 1, "name": "Web"}, {"id": 2, "name": None}]
        renderer(buffers).print_table(rows, ["id", "name"])
        text = buffers[0].getvalue()
        assert "ID" in text and "NAME" in text
        assert "Web" in text
        assert "None" not in text

    def test_long_cells_truncated(self, buffers):
        renderer(buffers).print_table([{"v": "y" * 120}], ["v"])
        text = buffers[0].getvalue()
        assert "y" * 49 + "…" in text
        assert "y" * 51 not in text

    def test_piped_table_not_cut_to_default_width(self):
        """Off a terminal, wide tables keep every column at full cell width."""
        out = io.StringIO()
        narrow = Renderer(console=make_console(file=out, width=80), err_console=make_console(file=io.StringIO()))
        columns = ["a", "b", "c", "d"]
        narrow.print_table([{c: c * 60 for c in columns}], columns)
        text = out.getvalue()
        for c in columns:
            assert c * 49 + "…" in text

    def test_empty_table(self, buffers):
        renderer(buffers).print_table([], ["id"])
        assert buffers[0].getvalue().strip() == NO_RESULTS

    def test_grid_handles_duplicate_columns(self, buffers):
        renderer(buffers).print_grid(["n", "n"], [[1, 2]])
        lines = buffers[0].getvalue().splitlines()
        assert any("1" in line and "2" in line for line in lines)

    def test_error_only_on_stderr(self, buffers):
        renderer(buffers).print_error(HogmanError(ErrorKind.UNAUTHORIZED, "Invalid API key", 401))
        assert buffers[0].getvalue() == ""
        assert buffers[1].getvalue().strip() == "[UNAUTHORIZED] Invalid API key"

    def test_spinner_silent_off_terminal(self, buffers):
        with renderer(buffers).spinner("Loading..."):
            pass
        assert buffers[1].getvalue() == ""
