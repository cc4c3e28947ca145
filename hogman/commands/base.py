"""Base command class for CLI commands."""

from __future__ import annotations

import argparse
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from hogman.core.api_client import PostHogClient
from hogman.core.config import CLIConfig
from hogman.core.credentials import CredentialStore, ResolvedIdentity
from hogman.ui.output import Renderer


def date_part(value: Optional[str], default: str = "") -> str:
    """``2024-01-31T10:00:00Z`` -> ``2024-01-31``."""
    return value.split("T")[0] if value else default


class BaseCommand(ABC):
    """Base class for a resource command group (``hogman <name> <action>``)."""

    name: str = "base"
    description: str = "Base command"

    def __init__(
        self,
        config: CLIConfig,
        out: Renderer,
        store: Optional[CredentialStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.out = out
        self.store = store or CredentialStore(config.config_path)
        self._transport = transport

    @classmethod
    def register(
        cls, subparsers: argparse._SubParsersAction, parents: list[argparse.ArgumentParser]
    ) -> argparse.ArgumentParser:
        """Add this group and its actions to the CLI parser."""
        parser = subparsers.add_parser(
            cls.name, help=cls.description, description=cls.description, parents=parents
        )
        parser.set_defaults(handler=cls)
        actions = parser.add_subparsers(dest="action", metavar="<action>", required=True)
        cls.add_actions(actions, parents)
        return parser

    @classmethod
    @abstractmethod
    def add_actions(
        cls, actions: argparse._SubParsersAction, parents: list[argparse.ArgumentParser]
    ) -> None:
        """Declare the group's actions and their arguments."""

    def execute(self, args: argparse.Namespace) -> bool:
        """Run the selected action.

        Returns:
            True on success. Failures are raised as ``HogmanError``.
        """
        handler = getattr(self, "do_" + args.action.replace("-", "_"))
        handler(args)
        return True

    # Credentials & client

    def identity(self) -> ResolvedIdentity:
        return self.store.resolve_identity(account=self.config.account, project=self.config.project)

    def project_identity(self) -> ResolvedIdentity:
        """Identity with a guaranteed project id, for project-scoped resources."""
        return self.store.require_project_id(
            account=self.config.account, project=self.config.project
        )

    def client(self, identity: ResolvedIdentity) -> PostHogClient:
        return PostHogClient(identity.api_key, identity.host, transport=self._transport)

    def fetch(self, message: str, call, *args: Any, **kwargs: Any) -> Any:
        """Run ``call`` with a spinner in interactive human mode."""
        with self.out.spinner(message):
            return call(*args, **kwargs)
