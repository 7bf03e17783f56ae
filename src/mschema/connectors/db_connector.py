"""Database schema introspection using SQLAlchemy."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import column, create_engine, inspect, select, table, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import CompileError, SQLAlchemyError

from mschema.connectors.base import BaseConnector, SampleFetchResult
from mschema.core.schema import DEFAULT_DB_ID, MSchema, examples_to_str
from mschema.utils.config import Config, get_config


class DBConnector(BaseConnector):
    """Build an M-Schema from a relational database via SQLAlchemy."""

    def __init__(
        self,
        connection: Union[str, Engine],
        db_id: Optional[str] = None,
        schema: Optional[str] = None,
        tables: Optional[List[str]] = None,
        sample_limit: Optional[int] = None,
        include_views: Optional[bool] = None,
        config: Optional[Config] = None,
    ):
        """Initialize database connector.

        Settings left as None are read from the ``introspection`` config
        section.

        Args:
            connection: SQLAlchemy connection string or an existing Engine
            db_id: Logical database name used in the rendered header
            schema: Database schema to inspect (default schema if None)
            tables: Optional list of specific tables to describe
            sample_limit: Distinct sample values fetched per column
            include_views: Also describe views
            config: Config instance (uses global config if None)

        Example:
            >>> connector = DBConnector("sqlite:///path/to/shop.db", db_id="shop")
            >>> print(connector.build_mschema().to_mschema())
        """
        config = config or get_config()

        if db_id is None:
            db_id = config.get("introspection.db_id")
        if schema is None:
            schema = config.get("introspection.schema")
        if sample_limit is None:
            sample_limit = config.get("introspection.sample_limit", 5)
        if include_views is None:
            include_views = config.get("introspection.include_views", False)

        url = connection.url if isinstance(connection, Engine) else make_url(connection)

        super().__init__(
            url=repr(url),
            db_id=db_id,
            schema=schema,
            tables=tables,
            sample_limit=sample_limit,
            include_views=include_views,
        )

        self.db_id = db_id or DEFAULT_DB_ID
        self.schema = schema
        self.table_filter = tables
        self.sample_limit = int(sample_limit)
        self.include_views = bool(include_views)
        self.fetch_failures: Dict[str, str] = {}
        self._ddl_cache: Dict[str, str] = {}

        if isinstance(connection, Engine):
            self.engine = connection
            self._owns_engine = False
        else:
            self.logger.info("Creating database engine")
            self.engine = create_engine(url)
            self._owns_engine = True

        # Test connection
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            self.logger.info("Database connection successful")
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to connect to database: {e}")
            raise

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def get_table_names(self) -> List[str]:
        """Get list of table (and optionally view) names.

        Returns:
            List of table names
        """
        inspector = inspect(self.engine)
        all_tables = list(inspector.get_table_names(schema=self.schema))
        if self.include_views:
            all_tables += inspector.get_view_names(schema=self.schema)

        # Filter if specific tables requested
        if self.table_filter:
            tables = [t for t in all_tables if t in self.table_filter]
            self.logger.info(
                f"Filtered to {len(tables)} tables from {len(all_tables)} available"
            )
        else:
            tables = all_tables

        return tables

    def get_table_comment(self, table_name: str) -> Optional[str]:
        """Get the table comment, or None when the dialect has none."""
        try:
            comment = inspect(self.engine).get_table_comment(
                table_name, schema=self.schema
            )
        except NotImplementedError:
            return None
        return comment.get("text")

    def get_columns(self, table_name: str) -> List[Dict[str, Any]]:
        """Get SQLAlchemy column descriptions for a table."""
        return inspect(self.engine).get_columns(table_name, schema=self.schema)

    def get_primary_keys(self, table_name: str) -> List[str]:
        """Get primary key column names for a table."""
        pk = inspect(self.engine).get_pk_constraint(table_name, schema=self.schema)
        return list(pk.get("constrained_columns") or [])

    def get_foreign_keys(self, table_name: str) -> List[Dict[str, Any]]:
        """Get foreign keys of a table, one entry per column pair.

        Example result:
            [
                {
                    "column": "customer_id",
                    "referred_schema": None,
                    "referred_table": "customers",
                    "referred_column": "id"
                }
            ]
        """
        fks = []

        for fk in inspect(self.engine).get_foreign_keys(table_name, schema=self.schema):
            # Composite keys are split into one edge per column pair
            for child, parent in zip(fk["constrained_columns"], fk["referred_columns"]):
                fks.append(
                    {
                        "column": child,
                        "referred_schema": fk.get("referred_schema") or self.schema,
                        "referred_table": fk["referred_table"],
                        "referred_column": parent,
                    }
                )

        return fks

    def fetch_distinct_values(
        self,
        table_name: str,
        column_name: str,
        limit: Optional[int] = None,
        type_: Any = None,
    ) -> SampleFetchResult:
        """Fetch distinct sample values of a column.

        NULL and empty-string values are removed.

        Args:
            table_name: Table name
            column_name: Column name
            limit: Maximum number of values (defaults to ``sample_limit``)
            type_: Optional SQLAlchemy type used to convert result values

        Returns:
            SampleFetchResult with the values, or the failure reason
        """
        limit = self.sample_limit if limit is None else limit
        stmt = (
            select(column(column_name, type_))
            .select_from(table(table_name, schema=self.schema))
            .distinct()
            .limit(limit)
        )

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).fetchall()
        except (SQLAlchemyError, ValueError) as e:
            # ValueError comes from result processors, e.g. unparseable dates
            self.logger.warning(
                f"Failed to fetch sample values for {table_name}.{column_name}: {e}"
            )
            return SampleFetchResult.failed(str(e))

        values = [row[0] for row in rows if row[0] is not None and row[0] != ""]
        return SampleFetchResult(values=values)

    def _table_ddl(self, table_name: str) -> str:
        if table_name not in self._ddl_cache:
            master = "sqlite_master"
            if self.schema:
                quoted = self.engine.dialect.identifier_preparer.quote_identifier(
                    self.schema
                )
                master = f"{quoted}.sqlite_master"

            with self.engine.connect() as conn:
                ddl = conn.execute(
                    text(f"SELECT sql FROM {master} WHERE name = :name"),
                    {"name": table_name},
                ).scalar()
            self._ddl_cache[table_name] = ddl or ""
        return self._ddl_cache[table_name]

    def _is_autoincrement(
        self, table_name: str, col: Dict[str, Any], field_type: str, is_pk: bool
    ) -> bool:
        if self.dialect == "sqlite":
            return (
                is_pk
                and field_type == "INTEGER"
                and "AUTOINCREMENT" in self._table_ddl(table_name).upper()
            )
        return col.get("autoincrement") is True

    def _type_name(self, type_: Any) -> str:
        try:
            return type_.compile(dialect=self.engine.dialect).upper()
        except CompileError:
            # Untyped columns reflect as NullType
            return ""

    def build_mschema(self) -> MSchema:
        """Introspect the database into a new schema model.

        Sample fetch failures do not abort the build; they are recorded in
        ``fetch_failures`` as ``"table.column" -> reason``.

        Returns:
            Populated MSchema

        Raises:
            ValueError: If a requested table does not exist
        """
        for requested in self.table_filter or []:
            self.validate_table(requested)

        table_names = self.get_table_names()
        self.logger.info(f"Building M-Schema for {len(table_names)} tables")

        mschema = MSchema(self.db_id, self.schema)
        self.fetch_failures = {}

        for table_name in table_names:
            mschema.add_table(table_name, comment=self.get_table_comment(table_name))

            for fk in self.get_foreign_keys(table_name):
                mschema.add_foreign_key(
                    table_name,
                    fk["column"],
                    fk["referred_schema"],
                    fk["referred_table"],
                    fk["referred_column"],
                )

            primary_keys = set(self.get_primary_keys(table_name))
            columns = self.get_columns(table_name)

            for col in columns:
                result = self.fetch_distinct_values(
                    table_name, col["name"], type_=col["type"]
                )
                if not result.ok:
                    self.fetch_failures[f"{table_name}.{col['name']}"] = result.error

                field_type = self._type_name(col["type"])
                is_pk = col["name"] in primary_keys

                mschema.add_field(
                    table_name,
                    col["name"],
                    field_type,
                    primary_key=is_pk,
                    nullable=bool(col.get("nullable", True)),
                    default=col.get("default"),
                    autoincrement=self._is_autoincrement(
                        table_name, col, field_type, is_pk
                    ),
                    comment=col.get("comment") or "",
                    examples=examples_to_str(result.values),
                )

            self.logger.debug(
                f"Table {table_name}: {len(columns)} columns, PK={sorted(primary_keys)}"
            )

        if self.fetch_failures:
            self.logger.warning(
                f"Sample values unavailable for {len(self.fetch_failures)} columns"
            )
        self.logger.info(
            f"Built M-Schema: {len(mschema.tables)} tables, "
            f"{len(mschema.foreign_keys)} foreign keys"
        )

        return mschema

    def close(self):
        """Dispose of the engine if this connector created it."""
        if self._owns_engine:
            self.engine.dispose()
            self.logger.info("Database connection closed")

    def __enter__(self) -> DBConnector:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def build_mschema_from_database(
    connection: Union[str, Engine], **kwargs
) -> MSchema:
    """Introspect a database and return its schema model.

    Args:
        connection: SQLAlchemy connection string or Engine
        **kwargs: Extra DBConnector arguments

    Returns:
        Populated MSchema

    Example:
        >>> mschema = build_mschema_from_database("sqlite:///shop.db", db_id="shop")
    """
    with DBConnector(connection, **kwargs) as connector:
        return connector.build_mschema()
