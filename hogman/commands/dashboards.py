"""Dashboards command - browse dashboards (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand, date_part


class DashboardsCommand(BaseCommand):
    name = "dashboards"
    description = "Browse PostHog dashboards (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("list", help="List all dashboards", parents=parents)

        get = actions.add_parser("get", help="Get a specific dashboard by numeric ID", parents=parents)
        get.add_argument("dashboard_id", metavar="id", type=int)

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            dashboards = self.fetch("Fetching dashboards...", client.list_dashboards, identity.project_id)

        rows = [
            {
                "id": d.id,
                "name": d.name or "(untitled)",
                "pinned": "📌" if d.pinned else "",
                "tiles": len(d.tiles or []),
                "created_at": date_part(d.created_at),
            }
            for d in dashboards
        ]
        self.out.print_table(rows, ["id", "name", "pinned", "tiles", "created_at"])

    def do_get(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            dashboard = self.fetch(
                "Fetching dashboard...", client.get_dashboard, identity.project_id, args.dashboard_id
            )
        self.out.print(dashboard)
