#!/usr/bin/env python3
"""
SQLShift Schema Converter
=========================

Facade over parser, type mapper and emitter: translate CREATE TABLE
statements from one dialect into another.

Lossy type mappings never stop a translation. Each one is logged at
warning level, handed to the optional ``on_lossy`` hook and returned in
``TranslationResult.warnings`` so callers can report them.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from sqlshift.ddl_emitter import DDLEmitter, EmitOptions
from sqlshift.ddl_parser import DDLParser
from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.schema_ir import SchemaTable
from sqlshift.type_registry import LossyMapping, describe_lossy
from utils.helpers import read_file, write_file

logger = logging.getLogger(__name__)

DialectLike = Union[DialectTag, str]


@dataclass
class TranslationResult:
    """Translated DDL with the parsed table and any lossy mappings"""
    sql: str
    table: SchemaTable
    warnings: List[LossyMapping] = field(default_factory=list)

    @property
    def is_lossy(self) -> bool:
        return bool(self.warnings)


class SchemaConverter:
    """Translates table definitions between SQL dialects"""

    def __init__(self, options: Optional[EmitOptions] = None,
                 on_lossy: Optional[Callable[[LossyMapping], None]] = None):
        self.options = options or EmitOptions()
        self.on_lossy = on_lossy
        self.emitter = DDLEmitter(self.options)

    def _report_lossy(self, table: SchemaTable, source: DialectTag, target: DialectTag) -> List[LossyMapping]:
        warnings = []
        for column in table.columns:
            lossy = describe_lossy(column, table.name, source, target)
            if lossy is None:
                continue
            logger.warning(f"Lossy mapping: {lossy}")
            if self.on_lossy is not None:
                self.on_lossy(lossy)
            warnings.append(lossy)
        return warnings

    def translate_table(self, table: SchemaTable, target_dialect: DialectLike) -> TranslationResult:
        """Emit an already parsed table in the target dialect."""
        target = normalize_dialect(target_dialect)
        source = table.dialect or target
        warnings = self._report_lossy(table, source, target)
        sql = self.emitter.emit(table, target)
        logger.info(f"Translated table {table.name} from {source.value} to {target.value}"
                    f"{f' ({len(warnings)} lossy columns)' if warnings else ''}")
        return TranslationResult(sql, table, warnings)

    def translate(self, sql: str, source_dialect: DialectLike,
                  target_dialect: DialectLike) -> TranslationResult:
        """
        Translate the first CREATE TABLE statement found in ``sql``.

        Raises:
            ParseError: if ``sql`` holds no CREATE TABLE statement
            UnsupportedDialectError: if either dialect is unknown
        """
        source = normalize_dialect(source_dialect)
        target = normalize_dialect(target_dialect)
        table = DDLParser(source).parse(sql)
        return self.translate_table(table, target)

    def translate_create_table(self, sql: str, source_dialect: DialectLike,
                               target_dialect: DialectLike) -> str:
        return self.translate(sql, source_dialect, target_dialect).sql

    def translate_script(self, sql: str, source_dialect: DialectLike,
                         target_dialect: DialectLike) -> List[TranslationResult]:
        """Translate every CREATE TABLE statement of a script, in order."""
        source = normalize_dialect(source_dialect)
        target = normalize_dialect(target_dialect)
        tables = DDLParser(source).parse_all(sql)
        if not tables:
            logger.warning(f"No CREATE TABLE statement found in {source.value} script")
        return [self.translate_table(table, target) for table in tables]

    def translate_file(self, input_path: str, output_path: str, source_dialect: DialectLike,
                       target_dialect: DialectLike) -> List[TranslationResult]:
        """Translate every table of a SQL script file and write the DDL to output_path.

        Raises:
            FileOperationError: If either file cannot be accessed
        """
        results = self.translate_script(read_file(input_path), source_dialect, target_dialect)
        write_file(output_path, "\n\n".join(r.sql for r in results) + "\n")
        return results


def translate_create_table(sql: str, source_dialect: DialectLike, target_dialect: DialectLike,
                           options: Optional[EmitOptions] = None) -> str:
    """Translate one CREATE TABLE statement between dialects and return the DDL."""
    return SchemaConverter(options).translate_create_table(sql, source_dialect, target_dialect)
