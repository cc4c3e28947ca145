"""HogQL queries through the PostHog query endpoint.

Query text is passed through untouched; validating it is the server's job.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Optional

from hogman.core.api_client import PostHogClient, parse_model
from hogman.core.models import QueryResult

QUERY_KIND = "HogQLQuery"
DEFAULT_WINDOW_DAYS = 30

LLM_COST_COLUMNS = ["model", "input_tokens", "output_tokens", "total_cost_usd", "events"]


def build_query_body(sql: str, refresh: bool = False) -> dict[str, Any]:
    body: dict[str, Any] = {"query": {"kind": QUERY_KIND, "query": sql}}
    if refresh:
        body["refresh"] = True
    return body


def run_query(
    client: PostHogClient, project_id: int, sql: str, refresh: bool = False
) -> QueryResult:
    """Run a HogQL query and return the server's result as-is."""
    data = client.post(f"/api/projects/{project_id}/query/", build_query_body(sql, refresh))
    return parse_model(QueryResult, data)


def default_date_window(
    today: Optional[date] = None, days: int = DEFAULT_WINDOW_DAYS
) -> tuple[str, str]:
    """(from, to) as YYYY-MM-DD strings covering the last ``days`` days."""
    today = today or date.today()
    return (today - timedelta(days=days)).isoformat(), today.isoformat()


def llm_costs_sql(from_date: str, to_date: str) -> str:
    """Aggregate ``$ai_generation`` events per model between two dates."""
    return "\n".join([
        "SELECT",
        "  properties.$ai_model AS model,",
        "  round(sum(toFloatOrDefault(toString(properties.$ai_input_tokens), 0))) AS input_tokens,",
        "  round(sum(toFloatOrDefault(toString(properties.$ai_output_tokens), 0))) AS output_tokens,",
        "  round(sum(toFloatOrDefault(toString(properties.$ai_total_cost_usd), 0)), 4) AS total_cost_usd,",
        "  count() AS events",
        "FROM events",
        "WHERE event = '$ai_generation'",
        f"  AND timestamp >= '{from_date}'",
        f"  AND timestamp <= '{to_date}'",
        "GROUP BY model",
        "ORDER BY total_cost_usd DESC",
    ])


def get_llm_costs(
    client: PostHogClient,
    project_id: int,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    today: Optional[date] = None,
) -> QueryResult:
    """LLM usage and cost per model, defaulting to the last 30 days."""
    default_from, default_to = default_date_window(today)
    sql = llm_costs_sql(from_date or default_from, to_date or default_to)
    return run_query(client, project_id, sql)
