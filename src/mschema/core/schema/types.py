"""Schema data types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

# (table, column, referenced_schema, referenced_table, referenced_column)
ForeignKeyEdge = Tuple[str, str, Optional[str], str, str]


@dataclass
class FieldInfo:
    """Metadata for a single column."""

    type: str = ""
    primary_key: bool = False
    nullable: bool = True
    default: Optional[str] = None
    autoincrement: bool = False
    comment: str = ""
    examples: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {
            "type": self.type,
            "primary_key": self.primary_key,
            "nullable": self.nullable,
            "default": self.default,
            "autoincrement": self.autoincrement,
            "comment": self.comment,
            "examples": list(self.examples),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldInfo:
        """Create from the persisted dictionary form.

        Args:
            data: Field dictionary

        Returns:
            FieldInfo instance

        Raises:
            ValueError: If data is not a mapping or examples is not a list
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Field entry must be a mapping, got {type(data).__name__}")

        examples = data.get("examples")
        if examples is None:
            examples = []
        if not isinstance(examples, (list, tuple)):
            raise ValueError(
                f"Field examples must be a list, got {type(examples).__name__}"
            )

        field_type = data.get("type")
        if field_type is None:
            field_type = ""
        comment = data.get("comment")
        if comment is None:
            comment = ""
        if not isinstance(field_type, str) or not isinstance(comment, str):
            raise ValueError(
                f"Field type and comment must be strings, got {field_type!r}, {comment!r}"
            )

        return cls(
            type=field_type,
            primary_key=bool(data.get("primary_key", False)),
            nullable=bool(data.get("nullable", True)),
            default=data.get("default"),
            autoincrement=bool(data.get("autoincrement", False)),
            comment=comment,
            examples=list(examples),
        )

    def copy(self) -> FieldInfo:
        """Return an independent copy."""
        return FieldInfo.from_dict(self.to_dict())


@dataclass
class TableInfo:
    """Metadata for a single table."""

    fields: Dict[str, FieldInfo] = field(default_factory=dict)
    examples: List[str] = field(default_factory=list)
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {
            "fields": {name: info.to_dict() for name, info in self.fields.items()},
            "examples": list(self.examples),
            "comment": self.comment,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TableInfo:
        """Create from the persisted dictionary form.

        Args:
            data: Table dictionary

        Returns:
            TableInfo instance

        Raises:
            ValueError: If data or its fields are not mappings
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Table entry must be a mapping, got {type(data).__name__}")

        fields = data.get("fields")
        if fields is None:
            fields = {}
        if not isinstance(fields, Mapping):
            raise ValueError(
                f"Table fields must be a mapping, got {type(fields).__name__}"
            )

        examples = data.get("examples")
        if examples is None:
            examples = []
        if not isinstance(examples, (list, tuple)):
            raise ValueError(
                f"Table examples must be a list, got {type(examples).__name__}"
            )

        comment = data.get("comment")
        if comment is not None and not isinstance(comment, str):
            raise ValueError(f"Table comment must be a string, got {comment!r}")

        return cls(
            fields={name: FieldInfo.from_dict(info) for name, info in fields.items()},
            examples=list(examples),
            comment=comment,
        )

    def __repr__(self) -> str:
        return f"TableInfo(fields={len(self.fields)}, comment={self.comment!r})"
