"""Schema model, rendering and sample selection."""

from mschema.core.schema.examples import contains_url, examples_to_str, is_email
from mschema.core.schema.render import render_schema, render_table
from mschema.core.schema.schema import DEFAULT_DB_ID, MSchema
from mschema.core.schema.types import FieldInfo, ForeignKeyEdge, TableInfo

__all__ = [
    "DEFAULT_DB_ID",
    "FieldInfo",
    "ForeignKeyEdge",
    "MSchema",
    "TableInfo",
    "contains_url",
    "examples_to_str",
    "is_email",
    "render_schema",
    "render_table",
]
