#!/usr/bin/env python3
"""
SQLShift MySQL / MariaDB Strategy

Backtick quoting, AUTO_INCREMENT, ENGINE/CHARSET table options and
positional ALTER TABLE ... AFTER.
"""

from typing import List, Optional

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, ConstraintDef, ConstraintKind, NormalizedType, SchemaTable
from sqlshift.strategies.base import DialectStrategy
from sqlshift.value_formatter import quote_string


class MySQLStrategy(DialectStrategy):
    """MySQL and MariaDB"""

    dialect = DialectTag.MYSQL
    quote_open = '`'
    quote_close = '`'

    def render_type(self, column: ColumnDef, include_autoincrement: bool = True) -> str:
        rendered = super().render_type(column, include_autoincrement)
        if column.unsigned:
            rendered += ' unsigned'
        return rendered

    def explicit_null(self, column: ColumnDef) -> bool:
        # A bare timestamp column is NOT NULL by default in MySQL
        return column.raw_type == 'timestamp'

    def column_suffixes(self, column: ColumnDef, include_autoincrement: bool = True) -> List[str]:
        suffixes = []
        if column.on_update:
            suffixes.append(f"ON UPDATE {column.on_update}")
        if column.auto_increment and include_autoincrement \
                and column.normalized_type is NormalizedType.INTEGER:
            suffixes.append('AUTO_INCREMENT')
        if column.comment:
            suffixes.append(f"COMMENT {quote_string(column.comment)}")
        return suffixes

    def constraint_clause(self, constraint: ConstraintDef, always_quote: bool = False) -> Optional[str]:
        if constraint.kind is ConstraintKind.UNIQUE and constraint.name:
            return (f"UNIQUE KEY {self.quote_identifier(constraint.name, always_quote)} "
                    f"({self.quote_list(constraint.columns, always_quote)})")
        return super().constraint_clause(constraint, always_quote)

    def table_options(self, engine: Optional[str], charset: Optional[str]) -> str:
        options = ''
        if engine:
            options += f" ENGINE={engine}"
        if charset:
            options += f" DEFAULT CHARSET={charset}"
        return options

    def add_column(self, table_name: str, column_sql: str, after: Optional[str] = None) -> str:
        if after:
            return f"ALTER TABLE {table_name} ADD COLUMN {column_sql} AFTER {after};"
        return f"ALTER TABLE {table_name} ADD COLUMN {column_sql};"

    def retrofit_autoincrement(self, table_name: str, column: ColumnDef, table: SchemaTable,
                               always_quote: bool = False) -> List[str]:
        definition = self.column_definition(column, table, always_quote, include_autoincrement=True)
        return [f"ALTER TABLE {table_name} MODIFY {definition};"]
