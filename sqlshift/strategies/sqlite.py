#!/usr/bin/env python3
"""
SQLShift SQLite Strategy

SQLite ties AUTOINCREMENT to an inline ``INTEGER PRIMARY KEY`` column
declaration, so that column is rendered specially and the table-level
primary key clause is omitted.
"""

import logging
from typing import Optional

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, NormalizedType, SchemaTable
from sqlshift.strategies.base import DialectStrategy

logger = logging.getLogger(__name__)


class SQLiteStrategy(DialectStrategy):
    """SQLite 3"""

    dialect = DialectTag.SQLITE

    def inline_primary_key(self, table: SchemaTable) -> Optional[str]:
        auto = [c for c in table.columns if c.auto_increment]
        if not auto:
            return None
        column = auto[0]
        if len(table.primary_key) == 1 and table.primary_key[0] == column.name \
                and column.normalized_type is NormalizedType.INTEGER:
            return column.name
        logger.warning(f"SQLite AUTOINCREMENT requires a single INTEGER PRIMARY KEY; "
                       f"dropping autoincrement of {table.name}.{column.name}")
        return None

    def column_definition(self, column: ColumnDef, table: SchemaTable,
                          always_quote: bool = False, include_autoincrement: bool = True) -> str:
        if include_autoincrement and column.auto_increment and self.inline_primary_key(table) == column.name:
            return f"{self.quote_identifier(column.name, always_quote)} INTEGER PRIMARY KEY AUTOINCREMENT"
        return super().column_definition(column, table, always_quote, include_autoincrement)

    def add_primary_key(self, table_name: str, columns: str) -> Optional[str]:
        logger.warning(f"SQLite cannot add a primary key to existing table {table_name}")
        return None
