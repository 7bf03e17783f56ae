"""Core modules for mschema."""

from mschema.core.schema import (
    FieldInfo,
    ForeignKeyEdge,
    MSchema,
    TableInfo,
    examples_to_str,
    render_schema,
    render_table,
)

__all__ = [
    "FieldInfo",
    "ForeignKeyEdge",
    "MSchema",
    "TableInfo",
    "examples_to_str",
    "render_schema",
    "render_table",
]
