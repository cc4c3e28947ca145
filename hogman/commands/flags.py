"""Flags command - browse feature flags (read-only)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand


class FlagsCommand(BaseCommand):
    name = "flags"
    description = "Browse PostHog feature flags (read-only)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("list", help="List all feature flags", parents=parents)

        get = actions.add_parser("get", help="Get a feature flag by key or numeric ID", parents=parents)
        get.add_argument("key_or_id", metavar="key-or-id")

    def do_list(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            flags = self.fetch("Fetching feature flags...", client.list_feature_flags, identity.project_id)

        rows = [
            {
                "id": f.id,
                "key": f.key,
                "name": f.name or "",
                "active": "yes" if f.active else "no",
                "rollout": f"{f.rollout_percentage:g}%" if f.rollout_percentage is not None else "custom",
            }
            for f in flags
        ]
        self.out.print_table(rows, ["id", "key", "name", "active", "rollout"])

    def do_get(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            if args.key_or_id.isdigit():
                flag = self.fetch(
                    "Fetching feature flag...",
                    client.get_feature_flag_by_id,
                    identity.project_id,
                    int(args.key_or_id),
                )
            else:
                flag = self.fetch(
                    "Fetching feature flag...",
                    client.get_feature_flag_by_key,
                    identity.project_id,
                    args.key_or_id,
                )
        self.out.print(flag)
