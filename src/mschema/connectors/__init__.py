"""Schema introspection connectors."""

from mschema.connectors.base import BaseConnector, SampleFetchResult
from mschema.connectors.db_connector import DBConnector, build_mschema_from_database

__all__ = [
    "BaseConnector",
    "DBConnector",
    "SampleFetchResult",
    "build_mschema_from_database",
]
