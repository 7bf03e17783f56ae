"""Base connector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from mschema.core.schema import MSchema
from mschema.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SampleFetchResult:
    """Outcome of fetching sample values for one column.

    ``error`` is set when the query failed, which distinguishes a failed
    fetch from a column that simply has no values.
    """

    values: List[Any] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_empty(self) -> bool:
        return not self.values

    @classmethod
    def failed(cls, reason: str) -> SampleFetchResult:
        return cls(values=[], error=reason)


class BaseConnector(ABC):
    """Abstract base class for schema introspection sources."""

    def __init__(self, **kwargs):
        """Initialize connector.

        Args:
            **kwargs: Connector-specific configuration
        """
        self.config = kwargs
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def get_table_names(self) -> List[str]:
        """Get list of table names to describe.

        Returns:
            List of table names

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        pass

    @abstractmethod
    def build_mschema(self) -> MSchema:
        """Introspect the source into a new schema model.

        Returns:
            Populated MSchema

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        pass

    def validate_table(self, table_name: str) -> bool:
        """Validate that a table exists.

        Args:
            table_name: Table name

        Returns:
            True if table exists

        Raises:
            ValueError: If table doesn't exist
        """
        table_names = self.get_table_names()

        if table_name not in table_names:
            raise ValueError(
                f"Table '{table_name}' not found. Available tables: {table_names}"
            )

        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config})"
