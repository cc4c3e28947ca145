"""PostHog API resource models.

Fields are lenient and unknown keys are kept, so ``model_dump()`` returns
everything the server sent.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Resource(BaseModel):
    model_config = ConfigDict(extra="allow")


class Organization(Resource):
    id: str
    name: Optional[str] = None
    slug: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    membership_level: Optional[int] = None


class Project(Resource):
    id: int
    name: Optional[str] = None
    slug: Optional[str] = None
    timezone: Optional[str] = None
    created_at: Optional[str] = None
    organization: Optional[str] = None


class FeatureFlag(Resource):
    id: int
    key: str
    name: Optional[str] = None
    active: Optional[bool] = False
    rollout_percentage: Optional[float] = None
    created_at: Optional[str] = None
    is_simple_flag: Optional[bool] = None
    filters: Optional[dict[str, Any]] = Field(default_factory=dict)


class Insight(Resource):
    id: int
    short_id: Optional[str] = None
    name: Optional[str] = None
    favorited: Optional[bool] = False
    last_refresh: Optional[str] = None
    created_at: Optional[str] = None
    description: Optional[str] = None


class Dashboard(Resource):
    id: int
    name: Optional[str] = None
    pinned: Optional[bool] = False
    tiles: Optional[list[Any]] = Field(default_factory=list)
    created_at: Optional[str] = None
    description: Optional[str] = None


class ErrorGroup(Resource):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    occurrences: Optional[int] = None
    first_seen: Optional[str] = None
    last_seen: Optional[str] = None


class Person(Resource):
    id: Union[str, int]
    name: Optional[str] = None
    distinct_ids: Optional[list[str]] = Field(default_factory=list)
    created_at: Optional[str] = None
    properties: Optional[dict[str, Any]] = Field(default_factory=dict)


class PropertyDefinition(Resource):
    id: str
    name: str
    is_numerical: Optional[bool] = False
    type: Optional[int] = None
    property_type: Optional[str] = None
    created_at: Optional[str] = None


class QueryResult(Resource):
    """HogQL query response: ``columns[i]`` names the i-th value of every row."""

    results: Optional[list[list[Any]]] = Field(default_factory=list)
    columns: Optional[list[str]] = Field(default_factory=list)
    types: Optional[list[Any]] = Field(default_factory=list)
    timings: Optional[Any] = None

    def records(self) -> list[dict[str, Any]]:
        """Rows as dicts keyed by column name, in column order."""
        columns = self.columns or []
        return [dict(zip(columns, row)) for row in self.results or []]
