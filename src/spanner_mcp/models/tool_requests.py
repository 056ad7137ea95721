"""Pydantic models for MCP tool requests.

Tool arguments arrive as loosely typed JSON. These models validate them
before any Spanner client is created so that malformed requests fail fast
with a readable message.
"""

import re
from typing import List

from pydantic import BaseModel, Field, field_validator, ConfigDict


INSTANCE_ID_PATTERN = re.compile(r'^[a-z][-a-z0-9]{0,62}[a-z0-9]$')
DATABASE_ID_PATTERN = re.compile(r'^[a-z][a-z0-9_\-]{0,28}[a-z0-9]$')


def database_path(project: str, instance: str, database: str) -> str:
    """Build the fully qualified resource name of a database."""
    return f"projects/{project}/instances/{instance}/databases/{database}"


class DatabaseRef(BaseModel):
    """Identifies one Spanner database."""

    project: str = Field(..., description="Google Cloud project")
    instance: str = Field(..., description="Spanner instance id")
    database: str = Field(..., description="Spanner database id")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "project": "my-project",
                "instance": "test-instance",
                "database": "music"
            }
        }
    )

    @field_validator('project')
    @classmethod
    def validate_project(cls, v):
        """Project ids may be domain scoped but never contain path separators."""
        if not v or not v.strip():
            raise ValueError('project must not be empty')
        if '/' in v or any(c.isspace() for c in v):
            raise ValueError(f"invalid project id: {v!r}")
        return v

    @field_validator('instance')
    @classmethod
    def validate_instance(cls, v):
        if not INSTANCE_ID_PATTERN.match(v):
            raise ValueError(f"invalid instance id: {v!r}")
        return v

    @field_validator('database')
    @classmethod
    def validate_database(cls, v):
        if not DATABASE_ID_PATTERN.match(v):
            raise ValueError(f"invalid database id: {v!r}")
        return v

    @property
    def path(self) -> str:
        return database_path(self.project, self.instance, self.database)


class PlanRequest(DatabaseRef):
    """Arguments of the plan tool."""

    query: str = Field(..., description="query text of SQL or GQL")

    @field_validator('query')
    @classmethod
    def validate_query(cls, v):
        if not v.strip():
            raise ValueError('query must not be blank')
        return v


class GetDdlRequest(DatabaseRef):
    """Arguments of the get_ddl tool."""

    include_proto_descriptors: bool = Field(
        False, description="Enable only if proto_descriptors is needed."
    )


class UpdateDdlRequest(DatabaseRef):
    """Arguments of the update_ddl tool."""

    statements: List[str] = Field(..., min_length=1, description="DDL statements")

    @field_validator('statements')
    @classmethod
    def validate_statements(cls, v):
        for i, statement in enumerate(v):
            if not statement.strip():
                raise ValueError(f"statement {i} is blank")
        return v
