"""In-memory schema model and its structured serialization."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from mschema.core.schema.types import FieldInfo, ForeignKeyEdge, TableInfo
from mschema.utils.io import read_json, write_json

DEFAULT_DB_ID = "Anonymous"


class MSchema:
    """Database schema: tables, fields, foreign keys and identifying metadata.

    Tables and fields keep insertion order, which is also their render order.

    Example:
        >>> mschema = MSchema("shop")
        >>> mschema.add_table("orders")
        >>> mschema.add_field("orders", "id", "INTEGER", primary_key=True)
        >>> print(mschema.to_mschema())
    """

    def __init__(self, db_id: str = DEFAULT_DB_ID, schema: Optional[str] = None):
        """Initialize an empty schema.

        Args:
            db_id: Logical database name
            schema: Optional namespace prefixed to rendered table names
        """
        self.db_id = db_id
        self.schema = schema
        self.tables: Dict[str, TableInfo] = {}
        self.foreign_keys: List[ForeignKeyEdge] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_table(
        self,
        name: str,
        fields: Optional[Mapping[str, Union[FieldInfo, Mapping[str, Any]]]] = None,
        comment: Optional[str] = None,
    ) -> None:
        """Insert or overwrite a table.

        Args:
            name: Table name
            fields: Optional initial fields (copied, not aliased)
            comment: Optional table description
        """
        self.tables[name] = TableInfo(
            fields={
                field_name: _copy_field(info)
                for field_name, info in (fields or {}).items()
            },
            examples=[],
            comment=comment,
        )

    def add_field(
        self,
        table_name: str,
        field_name: str,
        field_type: str = "",
        primary_key: bool = False,
        nullable: bool = True,
        default: Any = None,
        autoincrement: bool = False,
        comment: str = "",
        examples: Optional[Sequence[str]] = None,
    ) -> None:
        """Insert or overwrite a field of an existing table.

        Non-null defaults are stored in their string form.

        Args:
            table_name: Existing table name
            field_name: Column name
            field_type: Declared type, possibly parameterized
            primary_key: Whether the column is part of the primary key
            nullable: Whether the column accepts NULL
            default: Default value
            autoincrement: Whether the column auto-increments
            comment: Column description
            examples: Sample values

        Raises:
            KeyError: If the table has not been added
        """
        self.tables[table_name].fields[field_name] = FieldInfo(
            type=field_type,
            primary_key=primary_key,
            nullable=nullable,
            default=None if default is None else str(default),
            autoincrement=autoincrement,
            comment=comment,
            examples=list(examples or []),
        )

    def add_foreign_key(
        self,
        table_name: str,
        field_name: str,
        ref_schema: Optional[str],
        ref_table_name: str,
        ref_field_name: str,
    ) -> None:
        """Append a foreign key edge. Duplicates are kept."""
        self.foreign_keys.append(
            (table_name, field_name, ref_schema, ref_table_name, ref_field_name)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @staticmethod
    def get_field_type(field_type: str, simple_mode: bool = True) -> str:
        """Simplify a declared type.

        Args:
            field_type: Declared type, e.g. ``VARCHAR(255)``
            simple_mode: Strip parameters when True

        Returns:
            The type up to its first ``(`` in simple mode, otherwise unchanged
        """
        if not simple_mode:
            return field_type
        return field_type.split("(", 1)[0]

    def has_table(self, table_name: str) -> bool:
        return table_name in self.tables

    def has_column(self, table_name: str, field_name: str) -> bool:
        if self.has_table(table_name):
            return field_name in self.tables[table_name].fields
        return False

    def get_field_info(self, table_name: str, field_name: str) -> Optional[FieldInfo]:
        """Look up a field, returning None when the table or field is missing."""
        table = self.tables.get(table_name)
        if table is None:
            return None
        return table.fields.get(field_name)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def single_table_mschema(
        self,
        table_name: str,
        selected_columns: Optional[Sequence[str]] = None,
        example_num: int = 3,
        show_type_detail: bool = False,
    ) -> str:
        """Render one table. See :func:`mschema.core.schema.render.render_table`."""
        from mschema.core.schema.render import render_table

        return render_table(
            self,
            table_name,
            selected_columns=selected_columns,
            example_num=example_num,
            show_type_detail=show_type_detail,
        )

    def to_mschema(
        self,
        selected_tables: Optional[Sequence[str]] = None,
        selected_columns: Optional[Sequence[str]] = None,
        example_num: int = 3,
        show_type_detail: bool = False,
    ) -> str:
        """Render the schema. See :func:`mschema.core.schema.render.render_schema`."""
        from mschema.core.schema.render import render_schema

        return render_schema(
            self,
            selected_tables=selected_tables,
            selected_columns=selected_columns,
            example_num=example_num,
            show_type_detail=show_type_detail,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def dump(self) -> Dict[str, Any]:
        """Convert to the persisted dictionary form.

        The result shares no containers with the model.
        """
        return {
            "db_id": self.db_id,
            "schema": self.schema,
            "tables": {name: info.to_dict() for name, info in self.tables.items()},
            "foreign_keys": [list(fk) for fk in self.foreign_keys],
        }

    def load(self, data: Mapping[str, Any]) -> None:
        """Replace all state with a document produced by :meth:`dump`.

        Missing keys fall back to defaults; present keys with the wrong shape
        raise.

        Args:
            data: Schema document

        Raises:
            ValueError: If the document is structurally invalid
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"Schema document must be a mapping, got {type(data).__name__}"
            )

        tables = data.get("tables")
        if tables is None:
            tables = {}
        if not isinstance(tables, Mapping):
            raise ValueError(
                f"'tables' must be a mapping, got {type(tables).__name__}"
            )

        foreign_keys = data.get("foreign_keys")
        if foreign_keys is None:
            foreign_keys = []
        if not isinstance(foreign_keys, (list, tuple)):
            raise ValueError(
                f"'foreign_keys' must be a list, got {type(foreign_keys).__name__}"
            )

        parsed_tables = {name: TableInfo.from_dict(info) for name, info in tables.items()}
        parsed_fks = [_parse_foreign_key(fk) for fk in foreign_keys]

        db_id = data.get("db_id")
        schema = data.get("schema")
        for key, value in (("db_id", db_id), ("schema", schema)):
            if value is not None and not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string, got {value!r}")

        self.db_id = DEFAULT_DB_ID if db_id is None else db_id
        self.schema = schema
        self.tables = parsed_tables
        self.foreign_keys = parsed_fks

    def save(self, path: str | Path) -> Path:
        """Save the dumped document to a JSON file.

        Args:
            path: Destination file

        Returns:
            Path that was written
        """
        return write_json(path, self.dump())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MSchema:
        """Create a new schema from a dumped document."""
        mschema = cls()
        mschema.load(data)
        return mschema

    @classmethod
    def from_file(cls, path: str | Path) -> MSchema:
        """Create a new schema from a JSON file written by :meth:`save`."""
        return cls.from_dict(read_json(path))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MSchema):
            return NotImplemented
        return (
            self.db_id == other.db_id
            and self.schema == other.schema
            and list(self.tables.items()) == list(other.tables.items())
            and self.foreign_keys == other.foreign_keys
        )

    def __repr__(self) -> str:
        return (
            f"MSchema(db_id={self.db_id!r}, schema={self.schema!r}, "
            f"tables={len(self.tables)}, fks={len(self.foreign_keys)})"
        )


def _copy_field(info: Union[FieldInfo, Mapping[str, Any]]) -> FieldInfo:
    if isinstance(info, FieldInfo):
        return info.copy()
    return FieldInfo.from_dict(info)


def _parse_foreign_key(fk: Any) -> ForeignKeyEdge:
    if not isinstance(fk, (list, tuple)) or len(fk) != 5:
        raise ValueError(f"Foreign key must be a 5-element list, got {fk!r}")
    table_name, field_name, ref_schema, ref_table_name, ref_field_name = fk
    names = (table_name, field_name, ref_table_name, ref_field_name)
    if not all(isinstance(name, str) for name in names) or not (
        ref_schema is None or isinstance(ref_schema, str)
    ):
        raise ValueError(f"Foreign key entries must be strings, got {fk!r}")
    return (table_name, field_name, ref_schema, ref_table_name, ref_field_name)
