#!/usr/bin/env python3
"""
SQLShift DDL Emitter
====================

Renders a SchemaTable as CREATE TABLE (and ALTER TABLE) statements for a
target dialect. Every dialect-specific detail is delegated to the
target's DialectStrategy; this module only fixes the statement layout:

    [-- ]DROP TABLE IF EXISTS name;

    CREATE TABLE [IF NOT EXISTS] name (
        col type [NOT NULL] [DEFAULT x] [...],
        ...
        PRIMARY KEY (col, ...),
        constraints...
    )[table options];
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Union

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, ConstraintDef, ConstraintKind, SchemaTable
from sqlshift.strategies import DialectStrategy, get_strategy
from sqlshift.value_formatter import quote_string

logger = logging.getLogger(__name__)

INDENT = '    '

QUOTE_MODES = ('auto', 'always')


@dataclass
class EmitOptions:
    """Switches controlling the shape of emitted DDL"""
    create_if_not_exists: bool = False
    drop_if_exists: bool = False
    comment_out_drop: bool = True
    engine: Optional[str] = 'InnoDB'
    charset: Optional[str] = 'utf8mb4'
    quote_identifiers: str = 'auto'
    include_foreign_keys: bool = True
    enum_check_constraints: bool = True

    def __post_init__(self):
        if self.quote_identifiers not in QUOTE_MODES:
            raise ValueError(f"quote_identifiers must be one of {QUOTE_MODES}, "
                             f"got {self.quote_identifiers!r}")

    @property
    def always_quote(self) -> bool:
        return self.quote_identifiers == 'always'


def _requote(expression: str, source: DialectStrategy, target: DialectStrategy, always: bool) -> str:
    """Rewrite identifiers quoted in the source dialect's style for the target."""
    if source.quote_open == target.quote_open and not always:
        return expression
    pattern = re.compile(re.escape(source.quote_open) + r'((?:[^' + re.escape(source.quote_close)
                         + r']|' + re.escape(source.quote_close * 2) + r')+)'
                         + re.escape(source.quote_close))

    def swap(match):
        name = match.group(1).replace(source.quote_close * 2, source.quote_close)
        return target.quote_identifier(name, always)

    return pattern.sub(swap, expression)


class DDLEmitter:
    """Emits CREATE TABLE / ALTER TABLE statements for one target dialect per call"""

    def __init__(self, options: Optional[EmitOptions] = None):
        self.options = options or EmitOptions()

    def _mapped_table(self, table: SchemaTable, strategy: DialectStrategy) -> SchemaTable:
        source = table.dialect or strategy.dialect
        columns = tuple(strategy.map_column(c, source) for c in table.columns)
        return replace(table, columns=columns, dialect=strategy.dialect)

    def _enum_checks(self, table: SchemaTable, strategy: DialectStrategy,
                     options: EmitOptions) -> List[ConstraintDef]:
        """CHECK (col IN (...)) constraints emulating enum columns outside MySQL."""
        if strategy.dialect.is_mysql_family or not options.enum_check_constraints:
            return []
        checks = []
        always = options.always_quote
        for column in table.columns:
            if not column.enum_values or not column.raw_type.lower().startswith('enum'):
                continue
            values = ', '.join(quote_string(v) for v in column.enum_values)
            name = strategy.quote_identifier(column.name, always)
            checks.append(ConstraintDef(ConstraintKind.CHECK, expression=f"{name} IN ({values})"))
        return checks

    def _constraint_lines(self, table: SchemaTable, source: DialectStrategy, strategy: DialectStrategy,
                          options: EmitOptions) -> List[str]:
        always = options.always_quote
        lines = []
        for constraint in table.constraints:
            if constraint.kind is ConstraintKind.FOREIGN_KEY and not options.include_foreign_keys:
                continue
            if constraint.kind is ConstraintKind.CHECK:
                constraint = replace(constraint,
                                     expression=_requote(constraint.expression, source, strategy, always))
            clause = strategy.constraint_clause(constraint, always)
            if clause:
                lines.append(clause)
        for constraint in self._enum_checks(table, strategy, options):
            lines.append(strategy.constraint_clause(constraint, always))
        return lines

    def emit(self, table: SchemaTable, target_dialect: Union[DialectTag, str],
             options: Optional[EmitOptions] = None) -> str:
        """
        Render ``table`` as a CREATE TABLE statement in the target dialect.

        Args:
            table: Parsed or hand-built table; its ``dialect`` is the source
                dialect of the column types (the target is assumed if unset)
            target_dialect: Dialect to emit
            options: Per-call override of the emitter's options

        Returns:
            DDL text, ending in ``;``

        Raises:
            UnsupportedDialectError: if the target has no strategy
        """
        options = options or self.options
        strategy = get_strategy(target_dialect)
        source = get_strategy(table.dialect) if table.dialect else strategy
        always = options.always_quote
        mapped = self._mapped_table(table, strategy)
        table_name = strategy.quote_identifier(table.name, always)

        lines = []
        for column in mapped.columns:
            lines.append(strategy.column_definition(column, mapped, always))

        inline_pk = strategy.inline_primary_key(mapped)
        if mapped.primary_key and inline_pk is None:
            lines.append(f"PRIMARY KEY ({strategy.quote_list(mapped.primary_key, always)})")
        lines.extend(self._constraint_lines(table, source, strategy, options))

        body = ',\n'.join(INDENT + line for line in lines)
        statement = (f"{strategy.create_table_header(table_name, options.create_if_not_exists)}\n"
                     f"{body}\n"
                     f"){strategy.table_options(options.engine, options.charset)};")

        if options.drop_if_exists:
            drop = strategy.drop_table(table_name)
            if options.comment_out_drop:
                drop = f"-- {drop}"
            statement = f"{drop}\n\n{statement}"

        logger.debug(f"Emitted {strategy.dialect.value} DDL for table {table.name} "
                     f"({len(mapped.columns)} columns)")
        return statement

    def emit_alter_add_columns(self, table: SchemaTable, existing_columns: Iterable[str],
                               target_dialect: Union[DialectTag, str],
                               options: Optional[EmitOptions] = None) -> List[str]:
        """
        Build the ALTER TABLE statements that bring an existing table up to ``table``.

        Columns of ``table`` missing from ``existing_columns`` are added in
        declaration order, followed by ADD PRIMARY KEY when primary key
        columns were among them, followed by the dialect's autoincrement
        retrofit statements.

        Returns:
            Statements in execution order; empty when nothing is missing
        """
        options = options or self.options
        always = options.always_quote
        strategy = get_strategy(target_dialect)
        mapped = self._mapped_table(table, strategy)
        table_name = strategy.quote_identifier(table.name, always)
        existing = {name.lower() for name in existing_columns}

        statements = []
        added: List[ColumnDef] = []
        previous: Optional[str] = None
        for column in mapped.columns:
            if column.name.lower() in existing:
                previous = column.name
                continue
            definition = strategy.column_definition(
                column, mapped, always, include_autoincrement=strategy.autoincrement_on_add)
            after = strategy.quote_identifier(previous, always) if previous else None
            statements.append(strategy.add_column(table_name, definition, after))
            added.append(column)
            previous = column.name

        added_pk = [c.name for c in added if c.is_primary_key]
        if added_pk:
            pk_statement = strategy.add_primary_key(table_name, strategy.quote_list(mapped.primary_key, always))
            if pk_statement:
                statements.append(pk_statement)

        if not strategy.autoincrement_on_add:
            for column in added:
                if column.auto_increment:
                    statements.extend(strategy.retrofit_autoincrement(table_name, column, mapped, always))

        logger.debug(f"ALTER TABLE {table.name}: {len(added)} columns added for {strategy.dialect.value}")
        return statements


def emit_create_table(table: SchemaTable, target_dialect: Union[DialectTag, str],
                      options: Optional[EmitOptions] = None) -> str:
    """Emit CREATE TABLE DDL for ``table`` in the target dialect."""
    return DDLEmitter(options).emit(table, target_dialect)
