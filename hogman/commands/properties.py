"""Properties command - browse property definitions (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand
from hogman.core.api_client import PROPERTY_TYPES


class PropertiesCommand(BaseCommand):
    name = "properties"
    description = "Browse PostHog property definitions (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        list_ = actions.add_parser("list", help="List property definitions", parents=parents)
        list_.add_argument(
            "--type",
            dest="property_type",
            help=f"Filter by type: {' | '.join(PROPERTY_TYPES)}",
        )

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            definitions = self.fetch(
                "Fetching property definitions...",
                client.list_property_definitions,
                identity.project_id,
                args.property_type,
            )

        rows = [
            {
                "name": p.name,
                "property_type": p.property_type or "",
                "is_numerical": "yes" if p.is_numerical else "no",
            }
            for p in definitions
        ]
        self.out.print_table(rows, ["name", "property_type", "is_numerical"])
