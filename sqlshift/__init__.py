#!/usr/bin/env python3
"""
SQLShift Package Initialization
Exports the main components for clean imports

Version: 1.0.0
"""

from sqlshift.errors import (
    ErrorCode,
    FormatError,
    ParseError,
    SchemaError,
    SQLShiftError,
    UnsupportedDialectError,
)
from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.schema_ir import ColumnDef, ConstraintDef, ConstraintKind, NormalizedType, SchemaTable, merge
from sqlshift.type_registry import LossyMapping, TypeRegistry
from sqlshift.value_formatter import format_default, format_value, to_boolean
from sqlshift.ddl_parser import DDLParser, parse_all, parse_create_table, split_statements, strip_sql_comments
from sqlshift.ddl_emitter import DDLEmitter, EmitOptions, emit_create_table
from sqlshift.converter import SchemaConverter, TranslationResult, translate_create_table
from sqlshift.data_dump import DataDumper, dump_batches, dump_data, fix_import_value, parse_column_map

__version__ = "1.0.0"

__all__ = [
    'ErrorCode', 'SQLShiftError', 'ParseError', 'UnsupportedDialectError', 'FormatError', 'SchemaError',
    'DialectTag', 'normalize_dialect',
    'NormalizedType', 'ColumnDef', 'ConstraintDef', 'ConstraintKind', 'SchemaTable', 'merge',
    'TypeRegistry', 'LossyMapping',
    'to_boolean', 'format_value', 'format_default',
    'DDLParser', 'parse_create_table', 'parse_all', 'split_statements', 'strip_sql_comments',
    'DDLEmitter', 'EmitOptions', 'emit_create_table',
    'SchemaConverter', 'TranslationResult', 'translate_create_table',
    'DataDumper', 'dump_batches', 'dump_data', 'fix_import_value', 'parse_column_map',
]
