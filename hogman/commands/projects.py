"""Projects command - list projects and pick the default one."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand


class ProjectsCommand(BaseCommand):
    name = "projects"
    description = "Manage PostHog projects"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("list", help="List all accessible projects", parents=parents)

        use = actions.add_parser(
            "use", help="Set the default project for the current account", parents=parents
        )
        use.add_argument("project_id", metavar="id", type=int)

    def do_list(self, args: argparse.Namespace) -> None:
        with self.client(self.identity()) as client:
            projects = self.fetch("Fetching projects...", client.list_projects)

        rows = [
            {"id": p.id, "name": p.name, "slug": p.slug, "timezone": p.timezone}
            for p in projects
        ]
        self.out.print_table(rows, ["id", "name", "slug", "timezone"])

    def do_use(self, args: argparse.Namespace) -> None:
        """Writes to the ``--account`` profile, or the default one."""
        state = self.store.load()
        name = state.set_default_project(args.project_id, account=self.config.account)
        self.store.save(state)
        self.out.print(f'Default project for "{name}" set to {args.project_id}.')
