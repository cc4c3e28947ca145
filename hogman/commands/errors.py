"""Errors command - browse error tracking groups (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand, date_part
from hogman.core.api_client import ERROR_STATUSES


class ErrorsCommand(BaseCommand):
    name = "errors"
    description = "Browse PostHog error tracking (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        list_ = actions.add_parser("list", help="List error groups", parents=parents)
        list_.add_argument(
            "--status", help=f"Filter by status: {' | '.join(ERROR_STATUSES)}"
        )

        get = actions.add_parser("get", help="Get a specific error group by ID", parents=parents)
        get.add_argument("group_id", metavar="id")

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            groups = self.fetch(
                "Fetching error groups...", client.list_error_groups, identity.project_id, args.status
            )

        rows = [
            {
                "id": g.id,
                "title": g.title or "",
                "status": g.status,
                "occurrences": g.occurrences if g.occurrences is not None else "",
                "last_seen": date_part(g.last_seen),
            }
            for g in groups
        ]
        self.out.print_table(rows, ["id", "title", "status", "occurrences", "last_seen"])

    def do_get(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            group = self.fetch(
                "Fetching error group...", client.get_error_group, identity.project_id, args.group_id
            )
        self.out.print(group)
