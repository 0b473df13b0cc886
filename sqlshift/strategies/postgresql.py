#!/usr/bin/env python3
"""
SQLShift PostgreSQL Strategy

Autoincrement is expressed through serial types in CREATE TABLE and
through an explicit sequence when retrofitted with ALTER TABLE.
"""

from typing import List

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, SchemaTable
from sqlshift.strategies.base import DialectStrategy
from sqlshift.value_formatter import quote_string

SERIAL_BASE_TYPES = {
    'smallserial': 'smallint',
    'serial': 'integer',
    'bigserial': 'bigint',
}


class PostgreSQLStrategy(DialectStrategy):
    """PostgreSQL"""

    dialect = DialectTag.POSTGRESQL

    def render_type(self, column: ColumnDef, include_autoincrement: bool = True) -> str:
        if not include_autoincrement and column.raw_type in SERIAL_BASE_TYPES:
            return SERIAL_BASE_TYPES[column.raw_type]
        return super().render_type(column, include_autoincrement)

    def retrofit_autoincrement(self, table_name: str, column: ColumnDef, table: SchemaTable,
                               always_quote: bool = False) -> List[str]:
        sequence = f"{table.name}_{column.name}"
        quoted_sequence = self.quote_identifier(sequence, always_quote)
        quoted_column = self.quote_identifier(column.name, always_quote)
        return [
            f"DROP SEQUENCE IF EXISTS {quoted_sequence};",
            f"CREATE SEQUENCE {quoted_sequence} MINVALUE 1;",
            f"ALTER TABLE {table_name} ALTER COLUMN {quoted_column} "
            f"SET DEFAULT nextval({quote_string(quoted_sequence)});",
        ]
