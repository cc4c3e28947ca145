"""Query command - run HogQL against a project."""

from __future__ import annotations

import argparse
from pathlib import Path

from hogman.commands.base import BaseCommand
from hogman.core.errors import ErrorKind, HogmanError
from hogman.core.models import QueryResult
from hogman.core.query import run_query


class QueryCommand(BaseCommand):
    """Execute a HogQL query and show the rows."""

    name = "query"
    description = "Execute a HogQL query against PostHog"

    @classmethod
    def register(cls, subparsers, parents):
        parser = subparsers.add_parser(
            cls.name, help=cls.description, description=cls.description, parents=parents
        )
        parser.set_defaults(handler=cls, action="run")
        cls.add_actions(parser, parents)
        return parser

    @classmethod
    def add_actions(cls, parser: argparse.ArgumentParser, parents) -> None:
        # No sub-actions: the query arguments sit on the command parser itself.
        parser.add_argument("sql", nargs="?", help="HogQL query text")
        parser.add_argument("--file", type=Path, help="Read query from a .sql file instead of argument")
        parser.add_argument("--refresh", action="store_true", help="Force refresh cached results")

    def do_run(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        sql = self._read_query(args)

        with self.client(identity) as client:
            result = self.fetch(
                "Running query...", run_query, client, identity.project_id, sql, args.refresh
            )
        render_query_result(self, result)

    def _read_query(self, args: argparse.Namespace) -> str:
        sql = args.sql
        if args.file is not None:
            try:
                sql = args.file.read_text(encoding="utf-8").strip()
            except OSError as e:
                raise HogmanError(
                    ErrorKind.CONFIG_ERROR, f"Could not read file: {args.file} ({e.strerror or e})"
                ) from e
        if not sql:
            raise HogmanError(ErrorKind.CONFIG_ERROR, "Provide a query string or use --file <path.sql>")
        return sql


def render_query_result(
    command: BaseCommand, result: QueryResult, empty_message: str | None = None
) -> None:
    """JSON: columns/results/types. Human: a table, columns aligned by position."""
    out = command.out
    if out.json_mode:
        out.print_json({"columns": result.columns, "results": result.results, "types": result.types})
        return

    if not result.results:
        if empty_message:
            out.print(empty_message)
        else:
            out.print_grid(result.columns or [], [])
        return

    out.print_grid(result.columns or [], result.results)
