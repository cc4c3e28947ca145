"""CLI commands for hogman, one class per resource group."""

from hogman.commands.accounts import AccountsCommand
from hogman.commands.dashboards import DashboardsCommand
from hogman.commands.errors import ErrorsCommand
from hogman.commands.flags import FlagsCommand
from hogman.commands.hogql import HogQLCommand
from hogman.commands.insights import InsightsCommand
from hogman.commands.llm import LLMCommand
from hogman.commands.orgs import OrgsCommand
from hogman.commands.persons import PersonsCommand
from hogman.commands.projects import ProjectsCommand
from hogman.commands.properties import PropertiesCommand
from hogman.commands.query import QueryCommand

# Order shown in --help
COMMANDS = [
    AccountsCommand,
    OrgsCommand,
    ProjectsCommand,
    FlagsCommand,
    InsightsCommand,
    DashboardsCommand,
    QueryCommand,
    ErrorsCommand,
    PersonsCommand,
    PropertiesCommand,
    LLMCommand,
    HogQLCommand,
]

__all__ = [
    "COMMANDS",
    "AccountsCommand",
    "OrgsCommand",
    "ProjectsCommand",
    "FlagsCommand",
    "InsightsCommand",
    "DashboardsCommand",
    "QueryCommand",
    "ErrorsCommand",
    "PersonsCommand",
    "PropertiesCommand",
    "LLMCommand",
    "HogQLCommand",
]
