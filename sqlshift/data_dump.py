#!/usr/bin/env python3
"""
SQLShift Data Dump
==================

Turns row records into batched ``INSERT ... VALUES`` statements for a
target dialect, plus the helpers used when importing rows from another
database: column renaming maps and per-column value coercion.

Rows are consumed lazily, one batch at a time, so a dump can be
streamed to a file or socket through a callback without holding the
whole table in memory.
"""

import logging
from decimal import Decimal, InvalidOperation
from itertools import islice
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from sqlshift.dialects import DialectTag
from sqlshift.errors import FormatError, SchemaError
from sqlshift.schema_ir import ColumnDef, NormalizedType, SchemaTable
from sqlshift.strategies import get_strategy
from sqlshift.value_formatter import to_boolean

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
UNMAPPED_SOURCE = '???'

Row = Mapping[str, Any]


def parse_column_map(entries: Iterable[str]) -> Dict[str, str]:
    """
    Parse ``target:source`` mapping entries into a {target: source} dict.

    Entries whose source is empty or the ``???`` placeholder are skipped.

    Raises:
        ValueError: If an entry has no ``:`` separator
    """
    mapping = {}
    for entry in entries:
        if ':' not in entry:
            raise ValueError(f"Invalid column mapping '{entry}', expected 'target:source'")
        target, source = (part.strip() for part in entry.split(':', 1))
        if not target or not source or source == UNMAPPED_SOURCE:
            logger.debug(f"Skipping unmapped column entry '{entry}'")
            continue
        mapping[target] = source
    return mapping


def fix_import_value(value: Any, column: ColumnDef) -> Any:
    """Coerce an imported value to the Python type matching the column's class.

    Raises:
        FormatError: If a numeric column receives a non-numeric string
    """
    normalized = column.normalized_type
    if normalized is NormalizedType.BOOLEAN:
        if value is None or value == '':
            return None
        return to_boolean(value)
    if normalized is NormalizedType.INTEGER or normalized is NormalizedType.FLOAT:
        if value is None or value == '':
            return None
        if isinstance(value, bool):
            return int(value)
        try:
            if normalized is NormalizedType.INTEGER:
                return int(Decimal(str(value).strip()))
            return float(value)
        except (InvalidOperation, ValueError) as e:
            raise FormatError(f"Cannot import {value!r} into {normalized.value} column {column.name}: {e}",
                              value, normalized)
    return value


class DataDumper:
    """Batched INSERT generation for one target dialect"""

    def __init__(self, dialect: Union[DialectTag, str], batch_size: int = DEFAULT_BATCH_SIZE,
                 quote_identifiers: str = 'auto'):
        self.strategy = get_strategy(dialect)
        self.dialect = self.strategy.dialect
        self.batch_size = batch_size
        self.always_quote = quote_identifiers == 'always'

    def get_max_record(self, batch_size: Optional[int] = None) -> int:
        """Effective rows per INSERT: at least 1 and within the dialect's row limit."""
        size = self.batch_size if batch_size is None else batch_size
        if size < 1:
            logger.warning(f"Batch size {size} is below 1; using 1")
            size = 1
        limit = self.strategy.max_insert_rows
        if limit is not None and size > limit:
            logger.warning(f"Batch size {size} exceeds the {self.dialect.value} limit; using {limit}")
            size = limit
        return size

    @staticmethod
    def map_rows(rows: Iterable[Row], column_map: Mapping[str, str]) -> Iterator[Dict[str, Any]]:
        """Rename source keys to target column names, lazily."""
        for row in rows:
            record = dict(row)
            for target, source in column_map.items():
                if source in record:
                    record[target] = record.pop(source)
            yield record

    def fix_import_data(self, row: Row, columns: Sequence[ColumnDef]) -> Dict[str, Any]:
        """Keep only schema columns of ``row`` and coerce their values."""
        return {c.name: fix_import_value(row[c.name], c) for c in columns if c.name in row}

    def _insert_statement(self, table_name: str, columns: Sequence[ColumnDef], chunk: List[Row]) -> str:
        present = set()
        for row in chunk:
            present.update(row.keys())
        used = [c for c in columns if c.name in present] or list(columns)

        column_list = self.strategy.quote_list([c.name for c in used], self.always_quote)
        tuples = []
        for row in chunk:
            values = [self.strategy.format_value(row.get(c.name), c.normalized_type) for c in used]
            tuples.append(f"({', '.join(values)})")
        return f"INSERT INTO {table_name} ({column_list}) VALUES\n" + ',\n'.join(tuples) + ';'

    def _batches(self, columns: Sequence[ColumnDef], table_name: str, rows: Iterable[Row],
                 batch_size: Optional[int], column_map: Optional[Mapping[str, str]]) -> Iterator[Tuple[str, int]]:
        columns = list(columns)
        if not columns:
            raise SchemaError(f"Cannot dump rows into {table_name}: no columns given")
        size = self.get_max_record(batch_size)
        quoted_table = self.strategy.quote_identifier(table_name, self.always_quote)
        if column_map:
            rows = self.map_rows(rows, column_map)

        iterator = iter(rows)
        batch_number = 0
        while True:
            chunk = list(islice(iterator, size))
            if not chunk:
                return
            batch_number += 1
            logger.debug(f"{table_name}: batch {batch_number} with {len(chunk)} rows")
            yield self._insert_statement(quoted_table, columns, chunk), len(chunk)

    def dump_batches(self, columns: Sequence[ColumnDef], table_name: str, rows: Iterable[Row],
                     batch_size: Optional[int] = None,
                     column_map: Optional[Mapping[str, str]] = None) -> Iterator[str]:
        """
        Yield one INSERT statement per batch of rows.

        Keys of a row that are not schema columns are dropped. Within a
        batch the column list is the union of the keys present, in schema
        order; a row lacking one of them gets NULL.

        Args:
            columns: Schema columns; their normalized types drive value formatting
            table_name: Target table
            rows: Records mapping column names to raw values
            batch_size: Rows per statement, defaults to the dumper's batch size
            column_map: Optional {target: source} key renaming applied first

        Raises:
            FormatError: If a value has an unexpected shape for its column
            SchemaError: If ``columns`` is empty
        """
        for statement, _ in self._batches(columns, table_name, rows, batch_size, column_map):
            yield statement

    def dump_data(self, columns: Sequence[ColumnDef], table_name: str, rows: Iterable[Row],
                  callback: Callable[[str], Any], batch_size: Optional[int] = None,
                  column_map: Optional[Mapping[str, str]] = None) -> int:
        """Stream each INSERT statement to ``callback`` and return the number of rows written."""
        total = 0
        for statement, count in self._batches(columns, table_name, rows, batch_size, column_map):
            callback(statement)
            total += count
        logger.info(f"Dumped {total} rows into {table_name} ({self.dialect.value})")
        return total

    def dump_table(self, table: SchemaTable, rows: Iterable[Row],
                   batch_size: Optional[int] = None) -> Iterator[str]:
        return self.dump_batches(table.columns, table.name, rows, batch_size)


def dump_batches(columns: Sequence[ColumnDef], table_name: str, rows: Iterable[Row],
                 batch_size: int = DEFAULT_BATCH_SIZE,
                 dialect: Union[DialectTag, str] = DialectTag.MYSQL) -> Iterator[str]:
    """Yield batched INSERT statements for ``rows`` in the given dialect."""
    return DataDumper(dialect, batch_size).dump_batches(columns, table_name, rows)


def dump_data(columns: Sequence[ColumnDef], table_name: str, rows: Iterable[Row],
              callback: Callable[[str], Any], batch_size: int = DEFAULT_BATCH_SIZE,
              dialect: Union[DialectTag, str] = DialectTag.MYSQL) -> int:
    return DataDumper(dialect, batch_size).dump_data(columns, table_name, rows, callback)
