#!/usr/bin/env python3
"""
SQLShift SQL Server Strategy

Bracket quoting, IDENTITY(1,1) autoincrement and an OBJECT_ID guard in
place of CREATE TABLE IF NOT EXISTS.
"""

from typing import Optional

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, NormalizedType
from sqlshift.strategies.base import DialectStrategy
from sqlshift.value_formatter import quote_string


class SQLServerStrategy(DialectStrategy):
    """Microsoft SQL Server"""

    dialect = DialectTag.SQLSERVER
    quote_open = '['
    quote_close = ']'
    max_insert_rows = 1000  # row limit of a single INSERT ... VALUES
    autoincrement_on_add = True

    def render_type(self, column: ColumnDef, include_autoincrement: bool = True) -> str:
        rendered = super().render_type(column, include_autoincrement)
        if include_autoincrement and column.auto_increment \
                and column.normalized_type is NormalizedType.INTEGER:
            rendered += ' IDENTITY(1,1)'
        return rendered

    def create_table_header(self, table_name: str, if_not_exists: bool) -> str:
        if if_not_exists:
            guard = quote_string(table_name)
            return f"IF OBJECT_ID(N{guard}, N'U') IS NULL\nCREATE TABLE {table_name} ("
        return f"CREATE TABLE {table_name} ("

    def add_column(self, table_name: str, column_sql: str, after: Optional[str] = None) -> str:
        return f"ALTER TABLE {table_name} ADD {column_sql};"
