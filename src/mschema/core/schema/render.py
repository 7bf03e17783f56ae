"""M-Schema text rendering.

Output layout::

    【DB_ID】 shop
    【Schema】
    # Table: orders, customer orders
    [
    (id:INTEGER, Primary Key),
    (status:TEXT, Examples: [paid, shipped])
    ]
    【Foreign keys】
    orders.customer_id=customers.id
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from mschema.core.schema.examples import examples_to_str
from mschema.core.schema.types import FieldInfo

if TYPE_CHECKING:
    from mschema.core.schema.schema import MSchema

DATE_TYPES = ("DATE", "TIME", "DATETIME", "TIMESTAMP")

# Examples longer than this are summarized by the first one
SHORT_EXAMPLE_LENGTH = 20
# Examples longer than this hide the field's examples entirely
MAX_EXAMPLE_LENGTH = 50


def _table_header(mschema: MSchema, table_name: str, comment: Optional[str]) -> str:
    if mschema.schema:
        header = f"# Table: {mschema.schema}.{table_name}"
    else:
        header = f"# Table: {table_name}"

    if comment is not None and comment != "None" and comment.strip():
        header += f", {comment}"
    return header


def select_display_examples(
    examples: Sequence[str], field_type: str, example_num: int = 3
) -> List[str]:
    """Pick the examples shown for one field.

    Args:
        examples: Stored examples of the field
        field_type: Simplified, upper-cased type of the field
        example_num: Maximum number of examples

    Returns:
        Examples to display, possibly empty
    """
    if example_num <= 0:
        return []

    values = examples_to_str([e for e in examples if e is not None])
    values = values[:example_num]

    if not values:
        return values

    if field_type in DATE_TYPES:
        return values[:1]

    longest = max(len(v) for v in values)
    if longest > MAX_EXAMPLE_LENGTH:
        return []
    if longest > SHORT_EXAMPLE_LENGTH:
        return values[:1]
    return values


def render_field(
    mschema: MSchema,
    field_name: str,
    field_info: FieldInfo,
    example_num: int = 3,
    show_type_detail: bool = False,
) -> str:
    """Render one ``(name:TYPE, ...)`` field line."""
    field_type = mschema.get_field_type(field_info.type, not show_type_detail)
    line = f"({field_name}:{field_type.upper()}"

    comment = (field_info.comment or "").strip()
    if comment:
        line += f", {comment}"

    if field_info.primary_key:
        line += ", Primary Key"

    examples = select_display_examples(
        field_info.examples,
        mschema.get_field_type(field_info.type).upper(),
        example_num,
    )
    if examples:
        line += f", Examples: [{', '.join(examples)}]"

    return line + ")"


def render_table(
    mschema: MSchema,
    table_name: str,
    selected_columns: Optional[Sequence[str]] = None,
    example_num: int = 3,
    show_type_detail: bool = False,
) -> str:
    """Render one table block.

    Unknown tables render with an empty field list.

    Args:
        mschema: Schema to render from
        table_name: Table to render
        selected_columns: Optional column names to keep (case-insensitive)
        example_num: Maximum examples per field
        show_type_detail: Keep type parameters such as ``(255)``

    Returns:
        Rendered table block
    """
    table_info = mschema.tables.get(table_name)
    comment = table_info.comment if table_info is not None else None
    fields = table_info.fields if table_info is not None else {}

    selected = None
    if selected_columns is not None:
        selected = {c.lower() for c in selected_columns}

    field_lines = [
        render_field(mschema, name, info, example_num, show_type_detail)
        for name, info in fields.items()
        if selected is None or name.lower() in selected
    ]

    output = [
        _table_header(mschema, table_name, comment),
        "[",
        ",\n".join(field_lines),
        "]",
    ]
    return "\n".join(output)


def _table_qualifier(column_selector: str) -> str:
    return column_selector.rsplit(".", 1)[0]


def render_schema(
    mschema: MSchema,
    selected_tables: Optional[Sequence[str]] = None,
    selected_columns: Optional[Sequence[str]] = None,
    example_num: int = 3,
    show_type_detail: bool = False,
) -> str:
    """Render the whole schema in M-Schema format.

    When ``selected_columns`` (``table.column`` selectors) is given, the
    tables it names replace ``selected_tables``. Foreign keys are listed only
    when both endpoints are selected and the referenced schema matches
    ``mschema.schema``.

    Args:
        mschema: Schema to render
        selected_tables: Optional table names (case-insensitive)
        selected_columns: Optional ``table.column`` selectors (case-insensitive)
        example_num: Maximum examples per field
        show_type_detail: Keep type parameters such as ``(255)``

    Returns:
        Rendered schema text
    """
    output = [f"【DB_ID】 {mschema.db_id}", "【Schema】"]

    tables_filter = None
    columns_filter = None
    if selected_tables is not None:
        tables_filter = {t.lower() for t in selected_tables}
    if selected_columns is not None:
        columns_filter = {c.lower() for c in selected_columns}
        tables_filter = {_table_qualifier(c) for c in columns_filter}

    for table_name, table_info in mschema.tables.items():
        if tables_filter is not None and table_name.lower() not in tables_filter:
            continue

        cur_columns = None
        if columns_filter is not None:
            cur_columns = [
                name
                for name in table_info.fields
                if f"{table_name}.{name}".lower() in columns_filter
            ]

        output.append(
            render_table(
                mschema,
                table_name,
                selected_columns=cur_columns,
                example_num=example_num,
                show_type_detail=show_type_detail,
            )
        )

    if mschema.foreign_keys:
        output.append("【Foreign keys】")
        for table, column, ref_schema, ref_table, ref_column in mschema.foreign_keys:
            if tables_filter is not None and not (
                table.lower() in tables_filter and ref_table.lower() in tables_filter
            ):
                continue
            if ref_schema != mschema.schema:
                continue
            output.append(f"{table}.{column}={ref_table}.{ref_column}")

    return "\n".join(output)
