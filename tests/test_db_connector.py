"""Tests for SQLAlchemy schema introspection."""

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError

from mschema.connectors import DBConnector, SampleFetchResult, build_mschema_from_database
from mschema.utils.config import Config

DDL = [
    """
    CREATE TABLE customers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(100) NOT NULL,
        email TEXT,
        signup DATE
    )
    """,
    """
    CREATE TABLE orders (
        id INTEGER PRIMARY KEY,
        customer_id INTEGER REFERENCES customers(id),
        status TEXT DEFAULT 'pending',
        total REAL
    )
    """,
    "CREATE VIEW big_orders AS SELECT * FROM orders WHERE total > 100",
    "INSERT INTO customers (id, name, email, signup) VALUES "
    "(1, 'Alice', 'alice@example.com', '2024-01-05'), "
    "(2, 'Bob', 'bob@example.com', '2024-02-01')",
    "INSERT INTO orders (id, customer_id, status, total) VALUES "
    "(1, 1, 'paid', 50.5), (2, 2, 'shipped', 150.0), (3, 1, NULL, 20.0)",
]


@pytest.fixture
def db_url(tmp_path):
    """SQLite database with customers and orders."""
    url = f"sqlite:///{tmp_path / 'shop.db'}"
    engine = create_engine(url)
    with engine.begin() as conn:
        for statement in DDL:
            conn.execute(text(statement))
    engine.dispose()
    return url


@pytest.fixture
def connector(db_url):
    """Connector with default settings."""
    with DBConnector(db_url, db_id="shop", config=Config()) as conn:
        yield conn


def test_get_table_names(db_url, connector):
    """Test table discovery with and without views."""
    assert sorted(connector.get_table_names()) == ["customers", "orders"]

    with DBConnector(db_url, include_views=True, config=Config()) as with_views:
        assert "big_orders" in with_views.get_table_names()


def test_table_filter(db_url):
    """Test restricting introspection to chosen tables."""
    with DBConnector(db_url, tables=["orders"], config=Config()) as conn:
        mschema = conn.build_mschema()

    assert list(mschema.tables) == ["orders"]
    assert mschema.db_id == "Anonymous"


def test_fetch_distinct_values(connector):
    """Test sample values drop NULLs and honour the limit."""
    result = connector.fetch_distinct_values("orders", "status")

    assert result.ok
    assert sorted(result.values) == ["paid", "shipped"]
    assert len(connector.fetch_distinct_values("orders", "status", limit=1).values) == 1


def test_fetch_distinct_values_failure_is_reported(connector):
    """Test a failing query returns a typed failure instead of raising."""
    result = connector.fetch_distinct_values("orders", "no_such_column")

    assert isinstance(result, SampleFetchResult)
    assert not result.ok
    assert result.is_empty
    assert result.error


def test_build_mschema_fields(connector):
    """Test columns are described with keys, types and examples."""
    mschema = connector.build_mschema()

    assert mschema.db_id == "shop"
    assert list(mschema.tables) == ["customers", "orders"]
    assert list(mschema.tables["customers"].fields) == ["id", "name", "email", "signup"]

    cid = mschema.get_field_info("customers", "id")
    assert cid.type == "INTEGER"
    assert cid.primary_key is True
    assert cid.autoincrement is True

    name = mschema.get_field_info("customers", "name")
    assert name.type == "VARCHAR(100)"
    assert name.nullable is False
    assert sorted(name.examples) == ["Alice", "Bob"]

    assert mschema.get_field_info("customers", "email").examples == []

    signup = mschema.get_field_info("customers", "signup").examples
    assert len(signup) == 1
    assert signup[0] in ("2024-01-05", "2024-02-01")

    oid = mschema.get_field_info("orders", "id")
    assert oid.primary_key is True
    assert oid.autoincrement is False

    status = mschema.get_field_info("orders", "status")
    assert status.default == "'pending'"
    assert sorted(status.examples) == ["paid", "shipped"]

    assert connector.fetch_failures == {}


def test_build_mschema_foreign_keys(connector):
    """Test foreign keys are added and rendered."""
    mschema = connector.build_mschema()

    assert mschema.foreign_keys == [("orders", "customer_id", None, "customers", "id")]

    output = mschema.to_mschema()
    assert output.startswith("【DB_ID】 shop\n【Schema】\n# Table: customers\n[")
    assert "(id:INTEGER, Primary Key, Examples: [1, 2])" in output
    assert "(email:TEXT)" in output
    assert "orders.customer_id=customers.id" in output


def test_sample_limit_from_config(db_url):
    """Test the sample limit is read from configuration."""
    config = Config({"introspection": {"sample_limit": 1}})

    with DBConnector(db_url, config=config) as conn:
        assert conn.sample_limit == 1
        mschema = conn.build_mschema()

    assert len(mschema.get_field_info("orders", "status").examples) == 1


def test_existing_engine_is_not_disposed(db_url):
    """Test an Engine passed in stays usable after close."""
    engine = create_engine(db_url)
    mschema = build_mschema_from_database(engine, db_id="shop", config=Config())

    assert mschema.has_table("orders")
    with engine.connect() as conn:
        assert conn.execute(text("SELECT COUNT(*) FROM orders")).scalar() == 3
    engine.dispose()


def test_round_trip_of_introspected_schema(connector, tmp_path):
    """Test an introspected schema survives save and reload."""
    from mschema.core.schema import MSchema

    mschema = connector.build_mschema()
    path = mschema.save(tmp_path / "shop.json")

    assert MSchema.from_file(path) == mschema


def test_connection_failure_raises(tmp_path):
    """Test unreachable databases raise on construction."""
    with pytest.raises(SQLAlchemyError):
        DBConnector(f"sqlite:///{tmp_path / 'missing' / 'x.db'}", config=Config())


def test_validate_table(connector):
    """Test table validation."""
    assert connector.validate_table("orders")
    with pytest.raises(ValueError):
        connector.validate_table("nope")


def test_missing_requested_table_raises(db_url):
    """Test asking for an unknown table fails the build."""
    with DBConnector(db_url, tables=["orders", "ghost"], config=Config()) as conn:
        with pytest.raises(ValueError):
            conn.build_mschema()


def test_autoincrement_in_attached_schema(db_url, tmp_path):
    """Test AUTOINCREMENT is read from the inspected schema's own DDL."""
    other_path = tmp_path / "other.db"
    other = create_engine(f"sqlite:///{other_path}")
    with other.begin() as conn:
        conn.execute(text("CREATE TABLE orders (id INTEGER PRIMARY KEY AUTOINCREMENT)"))
        conn.execute(text("INSERT INTO orders (id) VALUES (7)"))
    other.dispose()

    engine = create_engine(db_url)

    @event.listens_for(engine, "connect")
    def attach(dbapi_connection, connection_record):
        dbapi_connection.execute(f"ATTACH DATABASE '{other_path}' AS other")

    with DBConnector(engine, schema="other", config=Config()) as conn:
        mschema = conn.build_mschema()

    assert list(mschema.tables) == ["orders"]
    assert mschema.schema == "other"
    assert mschema.get_field_info("orders", "id").autoincrement is True
    assert mschema.get_field_info("orders", "id").examples == ["7"]
    assert "# Table: other.orders" in mschema.to_mschema()
    engine.dispose()
