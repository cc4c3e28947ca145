"""Orgs command - list PostHog organizations."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand, date_part


class OrgsCommand(BaseCommand):
    name = "orgs"
    description = "List PostHog organizations"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("list", help="List all organizations", parents=parents)

    def do_list(self, args: argparse.Namespace) -> None:
        with self.client(self.identity()) as client:
            orgs = self.fetch("Fetching organizations...", client.list_organizations)

        rows = [
            {"id": o.id, "name": o.name, "slug": o.slug, "created_at": date_part(o.created_at)}
            for o in orgs
        ]
        self.out.print_table(rows, ["id", "name", "slug", "created_at"])
