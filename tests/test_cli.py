"""End-to-end tests for the hogman command line."""

import json

import pytest

from hogman.core.credentials import CredentialStoreState
from hogman.main import build_parser, run

from .conftest import HOST


@pytest.fixture
def configured(store):
    """One account pointing at the fake server, with default project 5."""
    state = CredentialStoreState()
    state.add_profile("work", "phx_work", HOST)
    state.set_default_project(5)
    store.save(state)
    return store


@pytest.fixture
def cli(configured, fake):
    def invoke(*argv):
        return run(list(argv), store=configured, transport=fake.transport)

    return invoke


def stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


class TestParser:
    """Argument parsing."""

    def test_json_flag_before_and_after(self):
        parser = build_parser()
        assert parser.parse_args(["--json", "flags", "list"]).json is True
        assert parser.parse_args(["flags", "list", "--json"]).json is True
        assert parser.parse_args(["flags", "--json", "list"]).json is True

    def test_global_flags_absent_by_default(self):
        args = build_parser().parse_args(["orgs", "list"])
        assert not hasattr(args, "json")
        assert not hasattr(args, "project")

    def test_project_override_is_int(self):
        args = build_parser().parse_args(["insights", "list", "--project", "42"])
        assert args.project == 42

    def test_missing_action_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["flags"])
        assert exc.value.code == 2

    def test_invalid_project_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["flags", "list", "--project", "abc"])
        assert exc.value.code == 2


class TestAccounts:
    """Managing profiles from the command line."""

    def test_add_list_default_remove(self, store, fake, capsys):
        def invoke(*argv):
            return run(list(argv), store=store, transport=fake.transport)

        assert invoke("accounts", "add", "work", "--api-key", "k1") == 0
        assert capsys.readouterr().out.strip() == 'Account "work" saved (set as default).'

        assert invoke("accounts", "add", "home", "--api-key", "k2", "--host", "https://eu.posthog.com") == 0
        assert capsys.readouterr().out.strip() == 'Account "home" saved.'

        assert invoke("accounts", "default", "home") == 0
        assert capsys.readouterr().out.strip() == 'Default account set to "home".'

        assert invoke("--json", "accounts", "list") == 0
        rows = stdout_json(capsys)
        assert [(r["name"], r["default"]) for r in rows] == [("work", ""), ("home", "✓")]
        assert rows[1]["host"] == "https://eu.posthog.com"

        assert invoke("accounts", "remove", "home") == 0
        capsys.readouterr()
        assert store.load().default_account == "work"

    def test_remove_unknown(self, store, capsys):
        assert run(["accounts", "remove", "ghost"], store=store) == 1
        assert "[CONFIG_ERROR]" in capsys.readouterr().err

    def test_list_empty(self, store, capsys):
        assert run(["accounts", "list"], store=store) == 0
        assert "(no results)" in capsys.readouterr().out


class TestProjects:
    """Project listing and default project selection."""

    def test_use_sets_default_project(self, cli, configured, capsys):
        assert cli("projects", "use", "9") == 0
        assert capsys.readouterr().out.strip() == 'Default project for "work" set to 9.'
        assert configured.load().accounts["work"].default_project == 9

    def test_use_without_account(self, store, capsys):
        assert run(["--json", "projects", "use", "9"], store=store) == 1
        assert stdout_json(capsys)["code"] == "NO_ACCOUNT"

    def test_list_does_not_need_project(self, store, fake, capsys):
        state = CredentialStoreState()
        state.add_profile("work", "phx_work", HOST)
        store.save(state)
        fake.page("/api/projects/", [{"id": 1, "name": "Web", "slug": "web", "timezone": "UTC"}])

        assert run(["projects", "list", "--json"], store=store, transport=fake.transport) == 0
        assert stdout_json(capsys) == [{"id": 1, "name": "Web", "slug": "web", "timezone": "UTC"}]
        assert fake.requests[0].headers["authorization"] == "Bearer phx_work"


class TestResources:
    """Project-scoped resource commands."""

    def test_flags_list_json(self, cli, fake, capsys):
        fake.page(
            "/api/projects/5/feature_flags/",
            [{"id": 1, "key": "beta", "name": "Beta", "active": True, "rollout_percentage": 50}],
        )
        assert cli("flags", "list", "--json") == 0
        assert stdout_json(capsys) == [
            {"id": 1, "key": "beta", "name": "Beta", "active": "yes", "rollout": "50%"}
        ]

    def test_flags_list_human(self, cli, fake, capsys):
        fake.page(
            "/api/projects/5/feature_flags/",
            [{"id": 1, "key": "beta", "active": False}],
        )
        assert cli("flags", "list") == 0
        out = capsys.readouterr().out
        assert "KEY" in out and "beta" in out and "custom" in out

    def test_flag_get_by_numeric_id(self, cli, fake, capsys):
        fake.add("/api/projects/5/feature_flags/12/", {"id": 12, "key": "beta", "extra": 1})
        assert cli("--json", "flags", "get", "12") == 0
        assert stdout_json(capsys) == {"id": 12, "key": "beta", "extra": 1}

    def test_project_flag_overrides_default(self, cli, fake, capsys):
        fake.page("/api/projects/77/dashboards/", [])
        assert cli("dashboards", "list", "--project", "77", "--json") == 0
        assert stdout_json(capsys) == []
        assert fake.requests[0].url.path == "/api/projects/77/dashboards/"

    def test_person_not_found(self, cli, fake, capsys):
        fake.page("/api/projects/5/persons/?distinct_id=nobody", [])
        assert cli("--json", "persons", "get", "nobody") == 1
        assert stdout_json(capsys) == {
            "error": 'No person found with distinct ID: "nobody"',
            "code": "NOT_FOUND",
        }

    def test_invalid_error_status(self, cli, fake, capsys):
        assert cli("errors", "list", "--status", "open") == 1
        assert "[API_ERROR]" in capsys.readouterr().err
        assert fake.requests == []

    def test_http_error_exit_code(self, cli, fake, capsys):
        fake.add("/api/projects/5/insights/3/", {"detail": "no"}, status=403)
        assert cli("--json", "insights", "get", "3") == 1
        assert stdout_json(capsys) == {
            "error": "Access denied to this resource",
            "code": "FORBIDDEN",
            "status": 403,
        }


class TestProjectRequirement:
    """Project-scoped commands fail early without a project."""

    def test_no_project(self, store, fake, capsys):
        state = CredentialStoreState()
        state.add_profile("work", "phx_work", HOST)
        store.save(state)

        assert run(["--json", "flags", "list"], store=store, transport=fake.transport) == 1
        error = stdout_json(capsys)
        assert error["code"] == "NO_PROJECT"
        assert "status" not in error
        assert fake.requests == []

    def test_no_account(self, store, capsys):
        assert run(["flags", "list"], store=store) == 1
        assert "[NO_ACCOUNT]" in capsys.readouterr().err

    def test_environment_credentials(self, store, fake, monkeypatch, capsys):
        """POSTHOG_* variables work without any stored account."""
        monkeypatch.setenv("POSTHOG_API_KEY", "phx_env")
        monkeypatch.setenv("POSTHOG_HOST", HOST)
        monkeypatch.setenv("POSTHOG_PROJECT_ID", "8")
        fake.page("/api/projects/8/dashboards/", [{"id": 1, "name": "Main"}])

        assert run(["--json", "dashboards", "list"], store=store, transport=fake.transport) == 0
        assert stdout_json(capsys)[0]["name"] == "Main"
        assert fake.requests[0].headers["authorization"] == "Bearer phx_env"


class TestQuery:
    """The query command."""

    def test_inline_query(self, cli, fake, capsys):
        fake.add(
            "/api/projects/5/query/",
            {"results": [["$pageview", 3]], "columns": ["event", "c"], "types": [["event", "String"]]},
            method="POST",
        )
        assert cli("--json", "query", "SELECT event, count() AS c FROM events") == 0
        assert stdout_json(capsys) == {
            "columns": ["event", "c"],
            "results": [["$pageview", 3]],
            "types": [["event", "String"]],
        }
        assert fake.json_body()["query"]["query"] == "SELECT event, count() AS c FROM events"

    def test_query_from_file(self, cli, fake, tmp_path, capsys):
        sql_file = tmp_path / "top.sql"
        sql_file.write_text("\nSELECT 1\n\n")
        fake.add("/api/projects/5/query/", {"results": [[1]], "columns": ["1"]}, method="POST")

        assert cli("query", "--file", str(sql_file), "--refresh") == 0
        body = fake.json_body()
        assert body["query"]["query"] == "SELECT 1"
        assert body["refresh"] is True
        assert capsys.readouterr().out.strip() != ""

    def test_missing_query(self, cli, fake, capsys):
        assert cli("--json", "query") == 1
        assert stdout_json(capsys)["code"] == "CONFIG_ERROR"
        assert fake.requests == []

    def test_unreadable_file(self, cli, tmp_path, capsys):
        assert cli("query", "--file", str(tmp_path / "missing.sql")) == 1
        assert "[CONFIG_ERROR]" in capsys.readouterr().err

    def test_empty_result_human(self, cli, fake, capsys):
        fake.add("/api/projects/5/query/", {"results": [], "columns": ["a"]}, method="POST")
        assert cli("query", "SELECT a FROM events WHERE 0") == 0
        assert capsys.readouterr().out.strip() == "(no results)"


class TestLLMCosts:
    """The llm costs command."""

    def test_explicit_range(self, cli, fake, capsys):
        fake.add("/api/projects/5/query/", {"results": [], "columns": []}, method="POST")
        assert cli("llm", "costs", "--from", "2026-01-01", "--to", "2026-01-31") == 0
        sql = fake.json_body()["query"]["query"]
        assert "timestamp >= '2026-01-01'" in sql
        assert "timestamp <= '2026-01-31'" in sql
        assert capsys.readouterr().out.strip() == "No LLM cost data found for the specified period."

    def test_json_output(self, cli, fake, capsys):
        fake.add(
            "/api/projects/5/query/",
            {"results": [["gpt-4o", 12, 0.5]], "columns": ["model", "generations", "total_cost_usd"]},
            method="POST",
        )
        assert cli("llm", "costs", "--json") == 0
        data = stdout_json(capsys)
        assert data["results"] == [["gpt-4o", 12, 0.5]]
        assert data["types"] == []


class TestHogQLReference:
    """The offline HogQL reference."""

    def test_help_json(self, store, capsys):
        assert run(["hogql", "help", "--json"], store=store) == 0
        data = stdout_json(capsys)
        assert {"tables", "aggregate_functions", "common_patterns"} <= set(data)

    def test_patterns_json(self, store, capsys):
        assert run(["--json", "hogql", "patterns"], store=store) == 0
        patterns = stdout_json(capsys)
        assert all({"name", "sql"} <= set(p) for p in patterns)

    def test_help_needs_no_credentials(self, store, capsys):
        """Works with an empty credential store."""
        assert run(["hogql", "help"], store=store) == 0
        assert "HogQL Quick Reference" in capsys.readouterr().out
