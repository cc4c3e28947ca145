"""Credential store: named PostHog account profiles persisted as JSON.

The file keeps the camelCase layout used by earlier hogman releases::

    {
      "defaultAccount": "work",
      "accounts": {
        "work": {"apiKey": "phx_...", "host": "https://app.posthog.com", "defaultProject": 42}
      }
    }
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hogman.core.config import DEFAULT_HOST, EnvSettings, default_config_path, load_env_settings
from hogman.core.errors import ErrorKind, HogmanError

logger = logging.getLogger(__name__)

NO_ACCOUNT_HINT = "No account configured. Run: hogman accounts add <name> --api-key <key>"
NO_PROJECT_HINT = "No project configured. Run: hogman projects use <id>"


class AccountProfile(BaseModel):
    """API key, host and optional default project for one account."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(alias="apiKey")
    host: str = DEFAULT_HOST
    default_project: Optional[int] = Field(default=None, alias="defaultProject")


class CredentialStoreState(BaseModel):
    """Everything persisted in the credential store file."""

    model_config = ConfigDict(populate_by_name=True)

    default_account: Optional[str] = Field(default=None, alias="defaultAccount")
    accounts: dict[str, AccountProfile] = Field(default_factory=dict)

    def add_profile(self, name: str, api_key: str, host: str = DEFAULT_HOST) -> bool:
        """Create or overwrite a profile, keeping its default project.

        The first profile added becomes the default. Returns True when
        ``name`` is the default account afterwards.
        """
        existing = self.accounts.get(name)
        self.accounts[name] = AccountProfile(
            api_key=api_key,
            host=host or DEFAULT_HOST,
            default_project=existing.default_project if existing else None,
        )
        if not self.default_account:
            self.default_account = name
        return self.default_account == name

    def remove_profile(self, name: str) -> None:
        """Delete a profile; a removed default passes to the first remaining one."""
        if name not in self.accounts:
            raise HogmanError(ErrorKind.CONFIG_ERROR, f'Account not found: "{name}"')
        del self.accounts[name]
        if self.default_account == name:
            # Insertion order: the oldest remaining profile inherits the default.
            self.default_account = next(iter(self.accounts), None)

    def set_default(self, name: str) -> None:
        if name not in self.accounts:
            raise HogmanError(ErrorKind.CONFIG_ERROR, f'Account not found: "{name}"')
        self.default_account = name

    def set_default_project(self, project_id: int, account: Optional[str] = None) -> str:
        """Store ``project_id`` on ``account`` (or the default account).

        Returns the name of the profile that was updated.
        """
        name = account or self.default_account
        if not name:
            raise HogmanError(ErrorKind.NO_ACCOUNT, NO_ACCOUNT_HINT)
        profile = self.accounts.get(name)
        if profile is None:
            raise HogmanError(ErrorKind.NO_ACCOUNT, f'Account not found: "{name}"')
        profile.default_project = project_id
        return name


@dataclass(frozen=True)
class ResolvedIdentity:
    """Credentials and project chosen for the current invocation."""

    api_key: str
    host: str
    project_id: Optional[int] = None


class CredentialStore:
    """Reads and writes the credential store file and resolves identities."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else default_config_path()

    def load(self) -> CredentialStoreState:
        """Load the persisted state; a missing file is an empty store."""
        if not self.path.exists():
            return CredentialStoreState()
        try:
            raw = self.path.read_text(encoding="utf-8")
            return CredentialStoreState.model_validate(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise HogmanError(
                ErrorKind.CONFIG_ERROR, f"Failed to parse config file: {self.path}"
            ) from e

    def save(self, state: CredentialStoreState) -> None:
        """Persist ``state`` via a temp file renamed over the target."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(state.model_dump(by_alias=True, exclude_none=True), indent=2) + "\n"

        tmp_fh = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            delete=False,
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        tmp_path = Path(tmp_fh.name)
        try:
            with tmp_fh:
                tmp_fh.write(data)
                tmp_fh.flush()
                os.fsync(tmp_fh.fileno())
            os.replace(tmp_path, self.path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Saved %d account profile(s) to %s", len(state.accounts), self.path)

    def resolve_identity(
        self,
        account: Optional[str] = None,
        project: Optional[int] = None,
        env: Optional[EnvSettings] = None,
    ) -> ResolvedIdentity:
        """Pick credentials: environment key, then account override, then default.

        An environment API key is self-contained: its host and project come
        from the environment only, and neither the store nor the CLI
        overrides are consulted.
        """
        env = env if env is not None else load_env_settings()
        if env.api_key:
            logger.debug("Using API key from POSTHOG_API_KEY")
            return ResolvedIdentity(
                api_key=env.api_key,
                host=env.host or DEFAULT_HOST,
                project_id=env.project_id,
            )

        state = self.load()
        name = account or state.default_account
        if not name:
            raise HogmanError(ErrorKind.NO_ACCOUNT, NO_ACCOUNT_HINT)

        profile = state.accounts.get(name)
        if profile is None:
            raise HogmanError(ErrorKind.NO_ACCOUNT, f'Account not found: "{name}"')

        logger.debug("Using account profile %r", name)
        return ResolvedIdentity(
            api_key=profile.api_key,
            host=profile.host or DEFAULT_HOST,
            project_id=project if project is not None else profile.default_project,
        )

    def require_project_id(
        self,
        account: Optional[str] = None,
        project: Optional[int] = None,
        env: Optional[EnvSettings] = None,
    ) -> ResolvedIdentity:
        """Like ``resolve_identity`` but fails when no project id is known."""
        identity = self.resolve_identity(account=account, project=project, env=env)
        if identity.project_id is None:
            raise HogmanError(ErrorKind.NO_PROJECT, NO_PROJECT_HINT)
        return identity
