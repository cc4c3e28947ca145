"""LLM command - LLM observability data (generation costs per model)."""

from __future__ import annotations

import argparse

from hogman.commands.base import BaseCommand
from hogman.commands.query import render_query_result
from hogman.core.query import LLM_COST_COLUMNS, get_llm_costs


class LLMCommand(BaseCommand):
    name = "llm"
    description = "LLM observability data from PostHog"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        costs = actions.add_parser(
            "costs", help="Show LLM usage costs (default: last 30 days)", parents=parents
        )
        costs.add_argument("--from", dest="from_date", metavar="YYYY-MM-DD", help="Start date (inclusive)")
        costs.add_argument("--to", dest="to_date", metavar="YYYY-MM-DD", help="End date (inclusive)")

    def do_costs(self, args: argparse.Namespace) -> None:
        identity = self.project_identity()
        with self.client(identity) as client:
            result = self.fetch(
                "Querying LLM costs...",
                get_llm_costs,
                client,
                identity.project_id,
                args.from_date,
                args.to_date,
            )

        if not self.out.json_mode and not result.columns:
            result.columns = list(LLM_COST_COLUMNS)
        render_query_result(
            self, result, empty_message="No LLM cost data found for the specified period."
        )
