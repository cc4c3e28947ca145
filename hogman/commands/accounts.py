"""Accounts command - manage stored PostHog account profiles."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand
from hogman.core.config import DEFAULT_HOST


class AccountsCommand(BaseCommand):
    """Add, remove and list account profiles in the credential store."""

    name = "accounts"
    description = "Manage PostHog account profiles"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("list", help="List configured accounts", parents=parents)

        add = actions.add_parser("add", help="Add or update an account profile", parents=parents)
        add.add_argument("profile", metavar="name", help="Profile name")
        add.add_argument(
            "--api-key", required=True, help="PostHog personal API key (phx_...)"
        )
        add.add_argument("--host", default=DEFAULT_HOST, help=f"PostHog host URL (default: {DEFAULT_HOST})")

        remove = actions.add_parser("remove", help="Remove an account profile", parents=parents)
        remove.add_argument("profile", metavar="name")

        default = actions.add_parser("default", help="Set the default account", parents=parents)
        default.add_argument("profile", metavar="name")

    def do_list(self, args: argparse.Namespace) -> None:
        state = self.store.load()
        rows = [
            {
                "name": name,
                "host": profile.host or DEFAULT_HOST,
                "default_project": profile.default_project if profile.default_project is not None else "",
                "default": "✓" if name == state.default_account else "",
            }
            for name, profile in state.accounts.items()
        ]
        self.out.print_table(rows, ["name", "host", "default_project", "default"])

    def do_add(self, args: argparse.Namespace) -> None:
        state = self.store.load()
        is_default = state.add_profile(args.profile, args.api_key, args.host)
        self.store.save(state)
        suffix = " (set as default)" if is_default else ""
        self.out.print(f'Account "{args.profile}" saved{suffix}.')

    def do_remove(self, args: argparse.Namespace) -> None:
        state = self.store.load()
        state.remove_profile(args.profile)
        self.store.save(state)
        self.out.print(f'Account "{args.profile}" removed.')

    def do_default(self, args: argparse.Namespace) -> None:
        state = self.store.load()
        state.set_default(args.profile)
        self.store.save(state)
        self.out.print(f'Default account set to "{args.profile}".')
