#!/usr/bin/env python3
"""
SQLShift Schema IR
==================

Immutable, dialect-neutral description of a parsed table. The parser
builds these values; the type mapper and emitter derive new values from
them with ``dataclasses.replace`` and never mutate them in place.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from sqlshift.dialects import DialectTag
from sqlshift.errors import SchemaError

logger = logging.getLogger(__name__)


class NormalizedType(Enum):
    """Dialect-neutral classification of a column type"""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BINARY = "binary"
    JSON = "json"
    UUID = "uuid"
    ENUM = "enum"
    GEOMETRY = "geometry"
    UNKNOWN = "unknown"

    @property
    def is_numeric(self) -> bool:
        return self in (NormalizedType.INTEGER, NormalizedType.FLOAT)


class ConstraintKind(Enum):
    UNIQUE = "UNIQUE"
    FOREIGN_KEY = "FOREIGN_KEY"
    CHECK = "CHECK"


@dataclass(frozen=True)
class ColumnDef:
    """Column definition.

    ``raw_type`` is the type token as written in the source dialect,
    without its parenthesized arguments, which live in ``length``,
    ``scale`` and ``enum_values``. When ``normalized_type`` is omitted it
    is derived from ``raw_type`` and ``length``.
    """
    name: str
    raw_type: str
    normalized_type: Optional[NormalizedType] = None
    length: Optional[int] = None
    scale: Optional[int] = None
    nullable: bool = True
    default_value: Optional[str] = None
    auto_increment: bool = False
    is_primary_key: bool = False
    unsigned: bool = False
    enum_values: Tuple[str, ...] = ()
    comment: Optional[str] = None
    on_update: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.enum_values, tuple):
            object.__setattr__(self, 'enum_values', tuple(self.enum_values))
        if self.normalized_type is None:
            from sqlshift.type_registry import TypeRegistry
            object.__setattr__(self, 'normalized_type',
                               TypeRegistry.normalize(self.raw_type, self.length))

    @property
    def length_spec(self) -> Optional[str]:
        """Length/precision as written in DDL, e.g. ``"40"`` or ``"10,2"``."""
        if self.length is None:
            return None
        if self.scale is not None:
            return f"{self.length},{self.scale}"
        return str(self.length)

    @property
    def full_type(self) -> str:
        spec = self.length_spec
        return f"{self.raw_type}({spec})" if spec else self.raw_type


@dataclass(frozen=True)
class ConstraintDef:
    """Table-level constraint other than the primary key"""
    kind: ConstraintKind
    columns: Tuple[str, ...] = ()
    name: Optional[str] = None
    ref_table: Optional[str] = None
    ref_columns: Tuple[str, ...] = ()
    actions: Optional[str] = None  # ON DELETE / ON UPDATE tail of a foreign key
    expression: Optional[str] = None  # CHECK body

    def __post_init__(self):
        object.__setattr__(self, 'columns', tuple(self.columns))
        object.__setattr__(self, 'ref_columns', tuple(self.ref_columns))


@dataclass(frozen=True)
class SchemaTable:
    """One table: ordered columns, primary key and constraints.

    Construction enforces the invariants: column names are unique
    (case-insensitive) and every primary key entry names a column.
    Primary key columns get ``is_primary_key`` set and become
    non-nullable. When ``primary_key`` is empty it is derived from the
    columns flagged ``is_primary_key``.
    """
    name: str
    columns: Tuple[ColumnDef, ...] = ()
    primary_key: Tuple[str, ...] = ()
    constraints: Tuple[ConstraintDef, ...] = ()
    dialect: Optional[DialectTag] = None

    def __post_init__(self):
        columns = tuple(self.columns)
        seen = {}
        for column in columns:
            key = column.name.lower()
            if key in seen:
                raise SchemaError(f"Duplicate column '{column.name}' in table '{self.name}'",
                                  {'table': self.name, 'column': column.name})
            seen[key] = column

        primary_key = tuple(self.primary_key)
        if not primary_key:
            primary_key = tuple(c.name for c in columns if c.is_primary_key)

        resolved = []
        for pk_name in primary_key:
            column = seen.get(pk_name.lower())
            if column is None:
                raise SchemaError(
                    f"Primary key column '{pk_name}' does not exist in table '{self.name}'",
                    {'table': self.name, 'column': pk_name})
            if column.name not in resolved:
                resolved.append(column.name)

        pk_set = {n.lower() for n in resolved}
        normalized = []
        for column in columns:
            is_pk = column.name.lower() in pk_set
            if column.is_primary_key != is_pk or (is_pk and column.nullable):
                column = replace(column, is_primary_key=is_pk,
                                 nullable=False if is_pk else column.nullable)
            normalized.append(column)

        object.__setattr__(self, 'columns', tuple(normalized))
        object.__setattr__(self, 'primary_key', tuple(resolved))
        object.__setattr__(self, 'constraints', tuple(self.constraints))

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDef]:
        key = name.lower()
        for column in self.columns:
            if column.name.lower() == key:
                return column
        return None

    @property
    def has_composite_primary_key(self) -> bool:
        return len(self.primary_key) > 1

    @property
    def auto_increment_columns(self) -> List[ColumnDef]:
        return [c for c in self.columns if c.auto_increment]


def merge(table_a: SchemaTable, table_b: SchemaTable) -> SchemaTable:
    """Merge two descriptions of the same table into a new value.

    Columns of ``table_a`` come first, followed by the columns of
    ``table_b`` that ``table_a`` lacks. On a name clash ``table_a``'s
    definition wins. The primary key is ``table_a``'s when declared,
    otherwise ``table_b``'s.

    Raises:
        SchemaError: if the tables were described in different dialects
    """
    if (table_a.dialect is not None and table_b.dialect is not None
            and table_a.dialect.family is not table_b.dialect.family):
        raise SchemaError(
            f"Cannot merge '{table_a.name}' ({table_a.dialect.value}) with "
            f"'{table_b.name}' ({table_b.dialect.value}): dialects differ",
            {'table_a': table_a.name, 'table_b': table_b.name})

    known = {c.name.lower() for c in table_a.columns}
    columns = [replace(c, is_primary_key=False) if c.is_primary_key else c for c in table_a.columns]
    for column in table_b.columns:
        if column.name.lower() in known:
            logger.debug(f"merge: keeping '{table_a.name}.{column.name}' definition from first table")
            continue
        columns.append(replace(column, is_primary_key=False) if column.is_primary_key else column)

    primary_key = table_a.primary_key or table_b.primary_key
    constraints = list(table_a.constraints)
    constraints.extend(c for c in table_b.constraints if c not in constraints)

    return SchemaTable(
        name=table_a.name,
        columns=tuple(columns),
        primary_key=primary_key,
        constraints=tuple(constraints),
        dialect=table_a.dialect or table_b.dialect,
    )
