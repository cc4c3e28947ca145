"""HogQL command - offline syntax reference for writing queries."""

from __future__ import annotations

import argparse

from rich.syntax import Syntax
from rich.text import Text

from hogman.commands.base import BaseCommand

REFERENCE = {
    "tables": [
        {"name": "events", "description": "One row per tracked event. Main table for all analytics."},
        {"name": "persons", "description": "One row per person (latest state). Use for person-level aggregations."},
        {"name": "sessions", "description": "One row per session. Includes session duration, entry/exit pages."},
    ],
    "events_columns": [
        {"column": "event", "type": "String", "note": "Event name e.g. '$pageview', 'user_signed_up'"},
        {"column": "distinct_id", "type": "String", "note": "User identifier (anonymous or identified)"},
        {"column": "timestamp", "type": "DateTime", "note": "Event time, project timezone applied automatically"},
        {"column": "properties", "type": "Object", "note": "Event properties, access as properties.key or properties.$posthog_key"},
        {"column": "person.properties", "type": "Object", "note": "Person props at event time, triggers join, use sparingly"},
        {"column": "uuid", "type": "String", "note": "Unique event ID"},
        {"column": "elements_chain", "type": "String", "note": "DOM elements for autocapture events"},
    ],
    "property_access": [
        {"example": "properties.$current_url", "note": "Built-in PostHog URL property"},
        {"example": "properties.$pathname", "note": "URL path without domain"},
        {"example": "properties.$browser", "note": "Browser name"},
        {"example": "properties.$os", "note": "Operating system"},
        {"example": "properties.$device_type", "note": "Device type: 'Desktop', 'Mobile', 'Tablet'"},
        {"example": "properties.$referrer", "note": "Referrer URL"},
        {"example": "properties.my_custom_prop", "note": "Any custom event property you track"},
        {"example": "person.properties.email", "note": "Person property, triggers expensive join, use sparingly"},
        {"example": "person.properties.plan", "note": "Any person property"},
    ],
    "aggregate_functions": {
        "use": [
            {"fn": "count()", "sql_equiv": "COUNT(*)", "note": "Total row count"},
            {"fn": "uniq(col)", "sql_equiv": "COUNT(DISTINCT col)", "note": "Approximate distinct count, prefer this"},
            {"fn": "uniqExact(col)", "sql_equiv": "COUNT(DISTINCT col)", "note": "Exact distinct count, slower, more memory"},
            {"fn": "countIf(condition)", "sql_equiv": "COUNT(*) FILTER WHERE", "note": "Conditional count"},
            {"fn": "sum(col)", "sql_equiv": "SUM(col)", "note": ""},
            {"fn": "avg(col)", "sql_equiv": "AVG(col)", "note": ""},
            {"fn": "min(col)", "sql_equiv": "MIN(col)", "note": ""},
            {"fn": "max(col)", "sql_equiv": "MAX(col)", "note": ""},
            {"fn": "argMax(val, ts)", "sql_equiv": "LAST_VALUE(val)", "note": 'Get val at the latest timestamp, use for "current" state'},
            {"fn": "argMin(val, ts)", "sql_equiv": "FIRST_VALUE(val)", "note": "Get val at the earliest timestamp"},
        ],
        "do_not_use": [
            {"fn": "countDistinct(col)", "use_instead": "uniq(col)", "note": "Not supported in HogQL"},
            {"fn": "COUNT(DISTINCT col)", "use_instead": "uniq(col)", "note": "Not supported in HogQL"},
        ],
    },
    "type_conversion": {
        "use": [
            {"fn": "toFloat(x)", "note": "Convert to float"},
            {"fn": "toFloatOrDefault(x, 0)", "note": "Convert to float or fallback, use for string to number from properties"},
            {"fn": "toInt64(x)", "note": "Convert to int"},
            {"fn": "toInt64OrDefault(x, 0)", "note": "Convert to int or fallback"},
            {"fn": "toString(x)", "note": "Convert to string"},
            {"fn": "toDate(x)", "note": "Convert to Date"},
            {"fn": "toDateTime(x)", "note": "Convert to DateTime"},
        ],
        "do_not_use": [
            {"fn": "toFloat64OrDefault()", "use_instead": "toFloatOrDefault()", "note": "Not supported"},
            {"fn": "toFloat32OrDefault()", "use_instead": "toFloatOrDefault()", "note": "Not supported"},
            {"fn": "toFloat64()", "use_instead": "toFloat()", "note": "Not supported"},
        ],
    },
    "date_functions": [
        {"fn": "now()", "note": "Current datetime"},
        {"fn": "today()", "note": "Current date"},
        {"fn": "toDate(timestamp)", "note": "Extract date part from datetime"},
        {"fn": "toStartOfDay(timestamp)", "note": "Truncate to start of day"},
        {"fn": "toStartOfWeek(timestamp)", "note": "Truncate to start of week"},
        {"fn": "toStartOfMonth(timestamp)", "note": "Truncate to start of month"},
        {"fn": "dateDiff('day', a, b)", "note": "Difference between two dates in given unit"},
        {"fn": "timestamp >= now() - interval 7 day", "note": "Last 7 days (also: 30 day, 1 hour, 3 month, etc.)"},
        {"fn": "timestamp >= '2026-01-01'", "note": "Absolute date filter (ISO string)"},
    ],
    "limits_and_gotchas": [
        "PostHog adds LIMIT 100 automatically if you omit LIMIT; add an explicit LIMIT to get more",
        "Max query execution time is 10 seconds; break complex queries into simpler ones",
        "HogQL rate limit: 120 queries/hour per project",
        "team_id is always filtered automatically; do not add it yourself",
        "Properties are stored as JSON; all values come back as strings unless cast",
        "person.properties triggers a JOIN; avoid in high-cardinality GROUP BY queries",
        "Timestamps are auto-converted to project timezone",
        "NULL properties: use ifNull(properties.key, default) to handle missing values",
        "Use equals(event, 'name') or event = 'name'; both work",
    ],
    "common_patterns": [
        {
            "name": "Daily active users (last 30 days)",
            "sql": (
                "SELECT toDate(timestamp) AS day, uniq(distinct_id) AS dau\n"
                "FROM events\n"
                "WHERE timestamp >= now() - interval 30 day\n"
                "GROUP BY day ORDER BY day"
            ),
        },
        {
            "name": "Top events by volume",
            "sql": (
                "SELECT event, count() AS total, uniq(distinct_id) AS users\n"
                "FROM events\n"
                "WHERE timestamp >= now() - interval 7 day\n"
                "GROUP BY event ORDER BY total DESC LIMIT 20"
            ),
        },
        {
            "name": "Funnel: count users who did step A then step B",
            "sql": (
                "SELECT\n"
                "  uniqIf(distinct_id, event = 'signup_page_viewed') AS step1_users,\n"
                "  uniqIf(distinct_id, event = 'user_signed_up') AS step2_users\n"
                "FROM events\n"
                "WHERE timestamp >= now() - interval 30 day\n"
                "  AND event IN ('signup_page_viewed', 'user_signed_up')"
            ),
        },
        {
            "name": "Top pages (pageview URL)",
            "sql": (
                "SELECT properties.$pathname AS path, count() AS views\n"
                "FROM events\n"
                "WHERE event = '$pageview'\n"
                "  AND timestamp >= now() - interval 7 day\n"
                "GROUP BY path ORDER BY views DESC LIMIT 20"
            ),
        },
        {
            "name": "Events with person email (use sparingly)",
            "sql": (
                "SELECT person.properties.email AS email, count() AS events\n"
                "FROM events\n"
                "WHERE event = 'user_signed_up'\n"
                "  AND timestamp >= now() - interval 30 day\n"
                "GROUP BY email ORDER BY events DESC"
            ),
        },
        {
            "name": "Property value from string (cast numbers)",
            "sql": (
                "SELECT\n"
                "  properties.$ai_model AS model,\n"
                "  sum(toFloatOrDefault(toString(properties.$ai_total_cost_usd), 0)) AS total_cost\n"
                "FROM events\n"
                "WHERE event = '$ai_generation'\n"
                "GROUP BY model ORDER BY total_cost DESC"
            ),
        },
        {
            "name": "Week-over-week comparison",
            "sql": (
                "SELECT\n"
                "  toStartOfWeek(timestamp) AS week,\n"
                "  uniq(distinct_id) AS wau\n"
                "FROM events\n"
                "WHERE timestamp >= now() - interval 12 week\n"
                "GROUP BY week ORDER BY week"
            ),
        },
        {
            "name": "Error rate by page",
            "sql": (
                "SELECT\n"
                "  properties.$current_url AS url,\n"
                "  countIf(event = '$exception') AS errors,\n"
                "  countIf(event = '$pageview') AS pageviews,\n"
                "  round(errors / pageviews * 100, 2) AS error_rate_pct\n"
                "FROM events\n"
                "WHERE timestamp >= now() - interval 7 day\n"
                "  AND event IN ('$pageview', '$exception')\n"
                "GROUP BY url\n"
                "HAVING pageviews > 5\n"
                "ORDER BY error_rate_pct DESC"
            ),
        },
    ],
}


def reference_lines() -> list[str]:
    """Plain-text cheat sheet, one section after another."""
    ref = REFERENCE
    lines = ["HogQL Quick Reference"]

    lines.append("\n── TABLES ──")
    for t in ref["tables"]:
        lines.append(f"  {t['name']:<12} {t['description']}")

    lines.append("\n── EVENTS TABLE COLUMNS ──")
    for c in ref["events_columns"]:
        lines.append(f"  {c['column']:<22} {c['type']:<10} {c['note']}")

    lines.append("\n── PROPERTY ACCESS ──")
    for p in ref["property_access"]:
        lines.append(f"  {p['example']:<36} {p['note']}")

    lines.append("\n── AGGREGATE FUNCTIONS ──")
    lines.append("  ✓ USE:")
    for f in ref["aggregate_functions"]["use"]:
        equiv = f" (SQL: {f['sql_equiv']})" if f["sql_equiv"] else ""
        lines.append(f"    {f['fn']:<26}{equiv}")
    lines.append("  ✗ DO NOT USE:")
    for f in ref["aggregate_functions"]["do_not_use"]:
        lines.append(f"    {f['fn']:<26} → use {f['use_instead']}")

    lines.append("\n── TYPE CONVERSION ──")
    lines.append("  ✓ USE:")
    for f in ref["type_conversion"]["use"]:
        lines.append(f"    {f['fn']:<30} {f['note']}")
    lines.append("  ✗ DO NOT USE:")
    for f in ref["type_conversion"]["do_not_use"]:
        lines.append(f"    {f['fn']:<30} → use {f['use_instead']}")

    lines.append("\n── DATE FUNCTIONS ──")
    for f in ref["date_functions"]:
        lines.append(f"  {f['fn']:<42} {f['note']}")

    lines.append("\n── GOTCHAS ──")
    for g in ref["limits_and_gotchas"]:
        lines.append(f"  • {g}")

    lines.append("\n── COMMON PATTERNS ──")
    for p in ref["common_patterns"]:
        lines.append(f"\n  {p['name']}:")
        lines.extend(f"    {line}" for line in p["sql"].split("\n"))

    return lines


class HogQLCommand(BaseCommand):
    """Static reference; needs no credentials."""

    name = "hogql"
    description = "HogQL reference for writing queries (LLM-friendly)"

    @classmethod
    def add_actions(cls, actions: argparse._SubParsersAction, parents) -> None:
        actions.add_parser("help", help="Full HogQL syntax reference and cheat sheet", parents=parents)
        actions.add_parser("patterns", help="Common HogQL query patterns only", parents=parents)

    def do_help(self, args: argparse.Namespace) -> None:
        if self.out.json_mode:
            self.out.print_json(REFERENCE)
            return
        for line in reference_lines():
            style = "section" if line.lstrip("\n").startswith("──") else None
            self.out.console.print(Text(line, style=style or ""))

    def do_patterns(self, args: argparse.Namespace) -> None:
        if self.out.json_mode:
            self.out.print_json(REFERENCE["common_patterns"])
            return
        for pattern in REFERENCE["common_patterns"]:
            self.out.console.print(Text(f"\n── {pattern['name']} ──", style="section"))
            self.out.console.print(Syntax(pattern["sql"], "sql", theme="monokai", background_color="default"))
