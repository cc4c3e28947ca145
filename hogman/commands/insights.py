"""Insights command - browse saved insights (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand, date_part


class InsightsCommand(BaseCommand):
    name = "insights"
    description = "Browse PostHog insights (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        list_ = actions.add_parser("list", help="List saved insights", parents=parents)
        list_.add_argument("--favorited", action="store_true", help="Show only favorited insights")

        get = actions.add_parser("get", help="Get a specific insight by numeric ID", parents=parents)
        get.add_argument("insight_id", metavar="id", type=int)

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            insights = self.fetch(
                "Fetching insights...", client.list_insights, identity.project_id, args.favorited
            )

        rows = [
            {
                "id": i.id,
                "short_id": i.short_id,
                "name": i.name or "(untitled)",
                "favorited": "★" if i.favorited else "",
                "last_refresh": date_part(i.last_refresh, "never"),
            }
            for i in insights
        ]
        self.out.print_table(rows, ["id", "short_id", "name", "favorited", "last_refresh"])

    def do_get(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            insight = self.fetch(
                "Fetching insight...", client.get_insight, identity.project_id, args.insight_id
            )
        self.out.print(insight)
