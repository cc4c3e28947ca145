"""Core components - credential store, PostHog API client and HogQL queries."""

from hogman.core.api_client import PostHogClient
from hogman.core.config import CLIConfig, EnvSettings
from hogman.core.credentials import CredentialStore, ResolvedIdentity
from hogman.core.errors import ErrorKind, HogmanError

__all__ = [
    "CLIConfig",
    "EnvSettings",
    "CredentialStore",
    "ResolvedIdentity",
    "PostHogClient",
    "ErrorKind",
    "HogmanError",
]
