#!/usr/bin/env python3
"""
SQLShift Dialect Strategy Base
==============================

A DialectStrategy bundles everything that differs per target dialect:
identifier quoting, type rendering, autoincrement syntax, table options
and the shape of DROP / CREATE / ALTER statements. The emitter and the
data dumper pick one strategy per call and never branch on the dialect
themselves.
"""

import logging
import re
from typing import Any, List, Optional, Sequence

from sqlshift.dialects import DialectTag
from sqlshift.ddl_parser import DDLParser
from sqlshift.schema_ir import ColumnDef, ConstraintDef, ConstraintKind, NormalizedType, SchemaTable
from sqlshift.type_registry import TargetType, TypeRegistry
from sqlshift.value_formatter import format_default, format_value

logger = logging.getLogger(__name__)

_PLAIN_IDENTIFIER = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

RESERVED_WORDS = frozenset("""
    add all alter analyze and any as asc authorization between binary both by
    case cast check collate column constraint create cross current_date
    current_time current_timestamp current_user database default delete desc
    distinct do drop else end except exists false fetch for foreign from full
    function grant group having identity if in index inner insert intersect
    interval into is join key keys left like limit lock natural not null
    offset on only or order outer over primary procedure range references
    rename replace returning right rowcount schema select session_user set
    some table then to top trigger true union unique update usage use user
    using values view when where while window with
""".split())


class DialectStrategy:
    """Target dialect behaviour shared by all dialects"""

    dialect: DialectTag = None
    quote_open = '"'
    quote_close = '"'
    max_insert_rows: Optional[int] = None
    # ALTER TABLE ADD carries the autoincrement clause instead of a retrofit
    autoincrement_on_add = False

    def __init__(self, dialect: Optional[DialectTag] = None):
        if dialect is not None:
            self.dialect = dialect

    def __repr__(self):
        return f"{self.__class__.__name__}({self.dialect.value})"

    # ------------------------------------------------------------------
    # Parsing, mapping and value formatting
    # ------------------------------------------------------------------

    def parser(self) -> DDLParser:
        return DDLParser(self.dialect)

    def map_column(self, column: ColumnDef, source_dialect: DialectTag) -> ColumnDef:
        return TypeRegistry.map_column(column, source_dialect, self.dialect)

    def format_value(self, value: Any, normalized_type: NormalizedType) -> str:
        return format_value(value, normalized_type, self.dialect)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def needs_quoting(self, name: str) -> bool:
        return not _PLAIN_IDENTIFIER.match(name) or name.lower() in RESERVED_WORDS

    def quote_identifier(self, name: str, always: bool = False) -> str:
        """Quote ``name`` when required (or always), doubling embedded closers."""
        if not always and not self.needs_quoting(name):
            return name
        escaped = name.replace(self.quote_close, self.quote_close * 2)
        return f"{self.quote_open}{escaped}{self.quote_close}"

    def quote_list(self, names: Sequence[str], always: bool = False) -> str:
        return ', '.join(self.quote_identifier(n, always) for n in names)

    # ------------------------------------------------------------------
    # Column definitions
    # ------------------------------------------------------------------

    def render_type(self, column: ColumnDef, include_autoincrement: bool = True) -> str:
        return TargetType(column.raw_type, column.length, column.scale, column.enum_values).render()

    def explicit_null(self, column: ColumnDef) -> bool:
        """Whether a nullable column spells out NULL."""
        return False

    def default_clause(self, column: ColumnDef) -> Optional[str]:
        if column.default_value is None or column.auto_increment:
            return None
        rendered = format_default(column.default_value, column.normalized_type, self.dialect)
        if rendered is None:
            logger.warning(f"Default {column.default_value!r} of column {column.name} "
                           f"dropped for {self.dialect.value}")
        return rendered

    def column_suffixes(self, column: ColumnDef, include_autoincrement: bool = True) -> List[str]:
        """Clauses written after NULL/DEFAULT, e.g. AUTO_INCREMENT or COMMENT."""
        return []

    def column_definition(self, column: ColumnDef, table: SchemaTable,
                          always_quote: bool = False, include_autoincrement: bool = True) -> str:
        """
        Render one column line of a CREATE TABLE or ALTER TABLE ADD.

        Args:
            column: Column already mapped to this dialect
            table: Table the column belongs to
            always_quote: Quote the column name unconditionally
            include_autoincrement: False when autoincrement is retrofitted later
        """
        parts = [self.quote_identifier(column.name, always_quote),
                 self.render_type(column, include_autoincrement)]
        if not column.nullable:
            parts.append('NOT NULL')
        elif self.explicit_null(column):
            parts.append('NULL')
        default = self.default_clause(column)
        if default is not None:
            parts.append(f"DEFAULT {default}")
        parts.extend(self.column_suffixes(column, include_autoincrement))
        return ' '.join(parts)

    def inline_primary_key(self, table: SchemaTable) -> Optional[str]:
        """Name of a primary key column that must be declared inline, if any."""
        return None

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    def constraint_clause(self, constraint: ConstraintDef, always_quote: bool = False) -> Optional[str]:
        prefix = ''
        if constraint.name:
            prefix = f"CONSTRAINT {self.quote_identifier(constraint.name, always_quote)} "
        if constraint.kind is ConstraintKind.UNIQUE:
            return f"{prefix}UNIQUE ({self.quote_list(constraint.columns, always_quote)})"
        if constraint.kind is ConstraintKind.FOREIGN_KEY:
            clause = (f"{prefix}FOREIGN KEY ({self.quote_list(constraint.columns, always_quote)}) "
                      f"REFERENCES {self.quote_identifier(constraint.ref_table, always_quote)}")
            if constraint.ref_columns:
                clause += f" ({self.quote_list(constraint.ref_columns, always_quote)})"
            if constraint.actions:
                clause += f" {constraint.actions}"
            return clause
        if constraint.kind is ConstraintKind.CHECK:
            return f"{prefix}CHECK ({constraint.expression})"
        return None

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def drop_table(self, table_name: str) -> str:
        return f"DROP TABLE IF EXISTS {table_name};"

    def create_table_header(self, table_name: str, if_not_exists: bool) -> str:
        if if_not_exists:
            return f"CREATE TABLE IF NOT EXISTS {table_name} ("
        return f"CREATE TABLE {table_name} ("

    def table_options(self, engine: Optional[str], charset: Optional[str]) -> str:
        return ''

    def add_column(self, table_name: str, column_sql: str, after: Optional[str] = None) -> str:
        return f"ALTER TABLE {table_name} ADD COLUMN {column_sql};"

    def add_primary_key(self, table_name: str, columns: str) -> Optional[str]:
        return f"ALTER TABLE {table_name} ADD PRIMARY KEY ({columns});"

    def retrofit_autoincrement(self, table_name: str, column: ColumnDef, table: SchemaTable,
                               always_quote: bool = False) -> List[str]:
        """Statements that turn an existing column into an autoincrement column."""
        logger.warning(f"{self.dialect.value} cannot add autoincrement to existing column "
                       f"{table_name}.{column.name}")
        return []
