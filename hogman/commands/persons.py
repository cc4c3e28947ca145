"""Persons command - browse persons (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand, date_part
from hogman.core.errors import ErrorKind, HogmanError

DEFAULT_LIMIT = 100


class PersonsCommand(BaseCommand):
    name = "persons"
    description = "Browse PostHog persons (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        list_ = actions.add_parser("list", help="List persons", parents=parents)
        list_.add_argument("--search", help="Search by name, email, or distinct ID")
        list_.add_argument(
            "--limit",
            type=int,
            default=DEFAULT_LIMIT,
            help=f"Maximum number of results to return (default: {DEFAULT_LIMIT}, 0 for all)",
        )

        get = actions.add_parser("get", help="Get a person by their distinct ID", parents=parents)
        get.add_argument("distinct_id", metavar="distinct-id")

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            persons = self.fetch(
                "Fetching persons...",
                client.list_persons,
                identity.project_id,
                search=args.search,
                limit=args.limit,
            )

        rows = [
            {
                "id": p.id,
                "name": p.name or "",
                "distinct_id": p.distinct_ids[0] if p.distinct_ids else "",
                "created_at": date_part(p.created_at),
            }
            for p in persons
        ]
        self.out.print_table(rows, ["id", "name", "distinct_id", "created_at"])

    def do_get(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            person = self.fetch(
                "Fetching person...",
                client.get_person_by_distinct_id,
                identity.project_id,
                args.distinct_id,
            )
        if person is None:
            raise HogmanError(
                ErrorKind.NOT_FOUND, f'No person found with distinct ID: "{args.distinct_id}"'
            )
        self.out.print(person)
