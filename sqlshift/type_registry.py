#!/usr/bin/env python3
"""
SQLShift Type Registry
======================

Type Mapper: classifies dialect type tokens into a NormalizedType and
maps a column type from one dialect's vocabulary into the nearest type
of another dialect.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, Optional, Sequence, Tuple, Union

from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.schema_ir import ColumnDef, NormalizedType
from sqlshift.value_formatter import quote_string

logger = logging.getLogger(__name__)

DialectLike = Union[DialectTag, str]


@dataclass(frozen=True)
class TargetType:
    """A type token in the target dialect with its reattached arguments"""
    name: str
    length: Optional[int] = None
    scale: Optional[int] = None
    values: Tuple[str, ...] = ()

    def render(self) -> str:
        if self.values:
            return f"{self.name}({', '.join(quote_string(v) for v in self.values)})"
        if self.length is not None and self.scale is not None:
            return f"{self.name}({self.length},{self.scale})"
        if self.length is not None:
            return f"{self.name}({self.length})"
        return self.name


@dataclass
class LossyMapping:
    """A column whose type has no faithful equivalent in the target dialect"""
    table: Optional[str]
    column: str
    source_dialect: DialectTag
    target_dialect: DialectTag
    source_type: str
    target_type: str
    reason: str

    def __str__(self):
        where = f"{self.table}.{self.column}" if self.table else self.column
        return (f"{where}: {self.source_dialect.value} {self.source_type} -> "
                f"{self.target_dialect.value} {self.target_type} ({self.reason})")


# Base type token (lower case, arguments stripped) -> NormalizedType
SOURCE_TO_NORMALIZED: Dict[str, NormalizedType] = {
    # Integer
    'int': NormalizedType.INTEGER,
    'integer': NormalizedType.INTEGER,
    'smallint': NormalizedType.INTEGER,
    'mediumint': NormalizedType.INTEGER,
    'bigint': NormalizedType.INTEGER,
    'tinyint': NormalizedType.INTEGER,
    'int2': NormalizedType.INTEGER,
    'int4': NormalizedType.INTEGER,
    'int8': NormalizedType.INTEGER,
    'serial': NormalizedType.INTEGER,
    'bigserial': NormalizedType.INTEGER,
    'smallserial': NormalizedType.INTEGER,
    'serial2': NormalizedType.INTEGER,
    'serial4': NormalizedType.INTEGER,
    'serial8': NormalizedType.INTEGER,
    # Float
    'float': NormalizedType.FLOAT,
    'float4': NormalizedType.FLOAT,
    'float8': NormalizedType.FLOAT,
    'double': NormalizedType.FLOAT,
    'double precision': NormalizedType.FLOAT,
    'decimal': NormalizedType.FLOAT,
    'dec': NormalizedType.FLOAT,
    'fixed': NormalizedType.FLOAT,
    'numeric': NormalizedType.FLOAT,
    'real': NormalizedType.FLOAT,
    'money': NormalizedType.FLOAT,
    'smallmoney': NormalizedType.FLOAT,
    # Boolean
    'boolean': NormalizedType.BOOLEAN,
    'bool': NormalizedType.BOOLEAN,
    'bit': NormalizedType.BOOLEAN,
    # String
    'char': NormalizedType.STRING,
    'character': NormalizedType.STRING,
    'varchar': NormalizedType.STRING,
    'character varying': NormalizedType.STRING,
    'nchar': NormalizedType.STRING,
    'nvarchar': NormalizedType.STRING,
    'text': NormalizedType.STRING,
    'tinytext': NormalizedType.STRING,
    'mediumtext': NormalizedType.STRING,
    'longtext': NormalizedType.STRING,
    'ntext': NormalizedType.STRING,
    'citext': NormalizedType.STRING,
    'clob': NormalizedType.STRING,
    'xml': NormalizedType.STRING,
    # UUID
    'uuid': NormalizedType.UUID,
    'uniqueidentifier': NormalizedType.UUID,
    # JSON
    'json': NormalizedType.JSON,
    'jsonb': NormalizedType.JSON,
    # Binary
    'blob': NormalizedType.BINARY,
    'tinyblob': NormalizedType.BINARY,
    'mediumblob': NormalizedType.BINARY,
    'longblob': NormalizedType.BINARY,
    'binary': NormalizedType.BINARY,
    'varbinary': NormalizedType.BINARY,
    'image': NormalizedType.BINARY,
    'bytea': NormalizedType.BINARY,
    'rowversion': NormalizedType.BINARY,
    # Date/Time
    'date': NormalizedType.DATE,
    'time': NormalizedType.TIME,
    'timetz': NormalizedType.TIME,
    'time with time zone': NormalizedType.TIME,
    'time without time zone': NormalizedType.TIME,
    'datetime': NormalizedType.DATETIME,
    'datetime2': NormalizedType.DATETIME,
    'smalldatetime': NormalizedType.DATETIME,
    'datetimeoffset': NormalizedType.DATETIME,
    'timestamp': NormalizedType.DATETIME,
    'timestamptz': NormalizedType.DATETIME,
    'timestamp with time zone': NormalizedType.DATETIME,
    'timestamp without time zone': NormalizedType.DATETIME,
    'year': NormalizedType.DATETIME,
    # Enumerations
    'enum': NormalizedType.ENUM,
    'set': NormalizedType.ENUM,
    # Spatial
    'geometry': NormalizedType.GEOMETRY,
    'geography': NormalizedType.GEOMETRY,
    'point': NormalizedType.GEOMETRY,
    'linestring': NormalizedType.GEOMETRY,
    'polygon': NormalizedType.GEOMETRY,
    'multipoint': NormalizedType.GEOMETRY,
    'multilinestring': NormalizedType.GEOMETRY,
    'multipolygon': NormalizedType.GEOMETRY,
    'geometrycollection': NormalizedType.GEOMETRY,
}

# Integer width classes, used to keep the storage size across dialects
INTEGER_WIDTH: Dict[str, int] = {
    'tinyint': 1,
    'smallint': 2, 'int2': 2, 'smallserial': 2, 'serial2': 2,
    'mediumint': 3,
    'int': 4, 'integer': 4, 'int4': 4, 'serial': 4, 'serial4': 4,
    'bigint': 8, 'int8': 8, 'bigserial': 8, 'serial8': 8,
}

SERIAL_TYPES = ('serial', 'bigserial', 'smallserial', 'serial2', 'serial4', 'serial8')

INTEGER_TARGETS: Dict[DialectTag, Dict[int, str]] = {
    DialectTag.MYSQL: {1: 'tinyint', 2: 'smallint', 3: 'mediumint', 4: 'int', 8: 'bigint'},
    DialectTag.POSTGRESQL: {1: 'smallint', 2: 'smallint', 3: 'integer', 4: 'integer', 8: 'bigint'},
    DialectTag.SQLITE: {1: 'integer', 2: 'integer', 3: 'integer', 4: 'integer', 8: 'integer'},
    DialectTag.SQLSERVER: {1: 'smallint', 2: 'smallint', 3: 'int', 4: 'int', 8: 'bigint'},
}

POSTGRES_SERIALS: Dict[int, str] = {1: 'smallserial', 2: 'smallserial', 3: 'serial', 4: 'serial', 8: 'bigserial'}

# Target type per NormalizedType for classes that need no further context
SIMPLE_TARGETS: Dict[DialectTag, Dict[NormalizedType, TargetType]] = {
    DialectTag.MYSQL: {
        NormalizedType.BOOLEAN: TargetType('tinyint', 1),
        NormalizedType.UUID: TargetType('char', 36),
        NormalizedType.JSON: TargetType('json'),
        NormalizedType.DATE: TargetType('date'),
    },
    DialectTag.POSTGRESQL: {
        NormalizedType.BOOLEAN: TargetType('boolean'),
        NormalizedType.UUID: TargetType('uuid'),
        NormalizedType.JSON: TargetType('jsonb'),
        NormalizedType.DATE: TargetType('date'),
    },
    DialectTag.SQLITE: {
        NormalizedType.BOOLEAN: TargetType('integer'),
        NormalizedType.UUID: TargetType('text'),
        NormalizedType.JSON: TargetType('text'),
        NormalizedType.DATE: TargetType('date'),
    },
    DialectTag.SQLSERVER: {
        NormalizedType.BOOLEAN: TargetType('bit'),
        NormalizedType.UUID: TargetType('uniqueidentifier'),
        NormalizedType.JSON: TargetType('nvarchar(max)'),
        NormalizedType.DATE: TargetType('date'),
    },
}

# Default source token for a class when no raw type is known
DEFAULT_TOKENS: Dict[NormalizedType, str] = {
    NormalizedType.STRING: 'varchar',
    NormalizedType.INTEGER: 'int',
    NormalizedType.FLOAT: 'double',
    NormalizedType.BOOLEAN: 'boolean',
    NormalizedType.DATE: 'date',
    NormalizedType.TIME: 'time',
    NormalizedType.DATETIME: 'datetime',
    NormalizedType.BINARY: 'blob',
    NormalizedType.JSON: 'json',
    NormalizedType.UUID: 'uuid',
    NormalizedType.ENUM: 'enum',
    NormalizedType.GEOMETRY: 'geometry',
    NormalizedType.UNKNOWN: 'text',
}

FIXED_CHAR_TYPES = ('char', 'character', 'nchar')
VARYING_CHAR_TYPES = ('varchar', 'character varying', 'nvarchar')
EXACT_NUMERIC_TYPES = ('decimal', 'dec', 'fixed', 'numeric')
SINGLE_FLOAT_TYPES = ('float', 'float4', 'real')
TZ_DATETIME_TYPES = ('timestamptz', 'timestamp with time zone', 'datetimeoffset')
FIXED_BINARY_TYPES = ('binary', 'varbinary')
MYSQL_SPATIAL_TYPES = ('geometry', 'point', 'linestring', 'polygon', 'multipoint',
                       'multilinestring', 'multipolygon', 'geometrycollection')

SQLSERVER_MAX_NVARCHAR = 4000

_TYPE_PATTERN = re.compile(
    r'^([a-z_][a-z0-9_ ]*?)\s*(?:\((.*)\))?((?:\s+with(?:out)?\s+time\s+zone)?)$')
_MODIFIER_PATTERN = re.compile(r'\b(unsigned|signed|zerofill)\b')
_MAX_ARGUMENT = re.compile(r'\(\s*max\s*\)', re.IGNORECASE)


class TypeRegistry:
    """Static lookup tables and mapping functions for column types"""

    @staticmethod
    def parse_type_string(type_str: str) -> Tuple[str, Optional[int], Optional[int]]:
        """Parse 'varchar(255)' -> ('varchar', 255, None)

        Also handles 'decimal(10, 2)' -> ('decimal', 10, 2),
        'timestamp(6) with time zone' -> ('timestamp with time zone', 6, None)
        and 'nvarchar(max)' -> ('nvarchar', None, None).
        """
        text = ' '.join(type_str.lower().split())
        text = _MODIFIER_PATTERN.sub('', text).strip()
        match = _TYPE_PATTERN.match(text)
        if not match:
            return (text, None, None)

        base = match.group(1).strip()
        trailing = match.group(3).strip()
        if trailing:
            base = f"{base} {' '.join(trailing.split())}"

        length = scale = None
        if match.group(2) is not None:
            args = [a.strip() for a in match.group(2).split(',')]
            if args and all(a.isdigit() for a in args):
                length = int(args[0])
                if len(args) > 1:
                    scale = int(args[1])
        return (base, length, scale)

    @staticmethod
    def normalize(raw_type: str, length: Optional[int] = None,
                  dialect: Optional[DialectLike] = None) -> NormalizedType:
        """Classify a raw type token.

        ``tinyint`` with an explicit length of 1 is boolean (MySQL
        convention); any other ``tinyint`` is an integer.
        """
        base, parsed_length, _ = TypeRegistry.parse_type_string(raw_type or '')
        if length is None:
            length = parsed_length

        if base == 'tinyint':
            return NormalizedType.BOOLEAN if length == 1 else NormalizedType.INTEGER

        if base == 'timestamp' and dialect is not None:
            # SQL Server's timestamp is a row version, not a point in time
            if normalize_dialect(dialect) is DialectTag.SQLSERVER:
                return NormalizedType.BINARY

        normalized = SOURCE_TO_NORMALIZED.get(base)
        if normalized is None and ' ' in base:
            normalized = SOURCE_TO_NORMALIZED.get(base.split(' ')[0])
        return normalized or NormalizedType.UNKNOWN

    @staticmethod
    def resolve(normalized_type: NormalizedType, source_dialect: DialectLike,
                target_dialect: DialectLike, length: Optional[int] = None,
                scale: Optional[int] = None, raw_type: Optional[str] = None,
                auto_increment: bool = False, unsigned: bool = False,
                enum_values: Sequence[str] = ()) -> TargetType:
        """Resolve the target dialect type for a column type."""
        source = normalize_dialect(source_dialect)
        target = normalize_dialect(target_dialect)
        family = target.family

        if raw_type:
            base, parsed_length, parsed_scale = TypeRegistry.parse_type_string(raw_type)
            if length is None:
                length, scale = parsed_length, parsed_scale
        else:
            base = DEFAULT_TOKENS[normalized_type]

        if raw_type and source.family is family:
            # Same family: keep the source token, MySQL timestamp semantics included
            if family is DialectTag.POSTGRESQL and auto_increment and base in INTEGER_WIDTH:
                return TargetType(POSTGRES_SERIALS[INTEGER_WIDTH[base]])
            if length is None and _MAX_ARGUMENT.search(raw_type):
                base = f"{base}(max)"
            return TargetType(base, length, scale, tuple(enum_values))

        if normalized_type is NormalizedType.INTEGER:
            return TypeRegistry._resolve_integer(base, family, auto_increment, unsigned)
        if normalized_type is NormalizedType.FLOAT:
            return TypeRegistry._resolve_float(base, source, family, length, scale)
        if normalized_type is NormalizedType.STRING:
            return TypeRegistry._resolve_string(base, family, length)
        if normalized_type is NormalizedType.TIME:
            if family is DialectTag.POSTGRESQL and base in ('timetz', 'time with time zone'):
                return TargetType('timetz', length if family is not DialectTag.SQLITE else None)
            return TargetType('time', length if family is not DialectTag.SQLITE else None)
        if normalized_type is NormalizedType.DATETIME:
            return TypeRegistry._resolve_datetime(base, source, family, length)
        if normalized_type is NormalizedType.BINARY:
            return TypeRegistry._resolve_binary(base, family, length)
        if normalized_type is NormalizedType.ENUM:
            return TypeRegistry._resolve_enum(base, family, enum_values)
        if normalized_type is NormalizedType.GEOMETRY:
            if family is DialectTag.MYSQL:
                return TargetType(base if base in MYSQL_SPATIAL_TYPES else 'geometry')
            if family is DialectTag.SQLITE:
                return TargetType('blob')
            if family is DialectTag.SQLSERVER and base == 'geography':
                return TargetType('geography')
            return TargetType('geometry')
        if normalized_type is NormalizedType.UNKNOWN:
            return TargetType(raw_type.strip() if raw_type else 'text')

        return SIMPLE_TARGETS[family][normalized_type]

    @staticmethod
    def _resolve_integer(base: str, family: DialectTag, auto_increment: bool,
                         unsigned: bool) -> TargetType:
        width = INTEGER_WIDTH.get(base, 4)
        if unsigned and family is not DialectTag.MYSQL:
            # Widen so the unsigned range still fits
            width = {1: 2, 2: 4, 3: 4, 4: 8, 8: 8}[width]
        if family is DialectTag.POSTGRESQL and auto_increment:
            return TargetType(POSTGRES_SERIALS[width])
        return TargetType(INTEGER_TARGETS[family][width])

    @staticmethod
    def _resolve_float(base: str, source: DialectTag, family: DialectTag,
                       length: Optional[int], scale: Optional[int]) -> TargetType:
        if base in EXACT_NUMERIC_TYPES:
            if family is DialectTag.SQLITE:
                return TargetType('real')
            name = 'numeric' if family is DialectTag.POSTGRESQL else 'decimal'
            return TargetType(name, length, scale if length is not None else None)
        if base in ('money', 'smallmoney'):
            if family is DialectTag.MYSQL:
                return TargetType('decimal', 19 if base == 'money' else 10, 4)
            if family is DialectTag.POSTGRESQL:
                return TargetType('money')
            if family is DialectTag.SQLSERVER:
                return TargetType(base)
            return TargetType('real')

        single = base in SINGLE_FLOAT_TYPES
        if source is DialectTag.SQLSERVER and base == 'float':
            single = False  # SQL Server float is 8 bytes
        if family is DialectTag.MYSQL:
            return TargetType('float' if single else 'double')
        if family is DialectTag.POSTGRESQL:
            return TargetType('real' if single else 'double precision')
        if family is DialectTag.SQLSERVER:
            return TargetType('real' if single else 'float')
        return TargetType('real')

    @staticmethod
    def _resolve_string(base: str, family: DialectTag, length: Optional[int]) -> TargetType:
        if base in FIXED_CHAR_TYPES:
            name = 'nchar' if family is DialectTag.SQLSERVER else 'char'
            return TargetType(name, length)
        if base in VARYING_CHAR_TYPES and length is not None:
            if family is DialectTag.SQLSERVER:
                if length > SQLSERVER_MAX_NVARCHAR:
                    return TargetType('nvarchar(max)')
                return TargetType('nvarchar', length)
            return TargetType('varchar', length)
        # Unbounded text
        if family is DialectTag.SQLSERVER:
            return TargetType('nvarchar(max)')
        if family is DialectTag.MYSQL and base in ('ntext', 'xml', 'clob'):
            return TargetType('longtext')
        return TargetType('text')

    @staticmethod
    def _resolve_datetime(base: str, source: DialectTag, family: DialectTag,
                          length: Optional[int]) -> TargetType:
        if base == 'year':
            if family is DialectTag.MYSQL:
                return TargetType('year')
            return TargetType(INTEGER_TARGETS[family][2])

        with_tz = base in TZ_DATETIME_TYPES or (base == 'timestamp' and source is DialectTag.MYSQL)
        fraction = length if length is not None and length <= 7 else None
        if family is DialectTag.MYSQL:
            return TargetType('timestamp' if with_tz else 'datetime',
                              min(fraction, 6) if fraction is not None else None)
        if family is DialectTag.POSTGRESQL:
            return TargetType('timestamptz' if with_tz else 'timestamp',
                              min(fraction, 6) if fraction is not None else None)
        if family is DialectTag.SQLSERVER:
            return TargetType('datetimeoffset' if with_tz else 'datetime2', fraction)
        return TargetType('datetime')

    @staticmethod
    def _resolve_binary(base: str, family: DialectTag, length: Optional[int]) -> TargetType:
        if family is DialectTag.POSTGRESQL:
            return TargetType('bytea')
        if family is DialectTag.SQLITE:
            return TargetType('blob')
        if base == 'rowversion' or base == 'timestamp':
            return TargetType('binary', 8)
        if base in FIXED_BINARY_TYPES and length is not None:
            return TargetType(base, length)
        if family is DialectTag.SQLSERVER:
            return TargetType('varbinary(max)')
        return TargetType('blob' if base == 'blob' else 'longblob')

    @staticmethod
    def _resolve_enum(base: str, family: DialectTag, enum_values: Sequence[str]) -> TargetType:
        values = tuple(enum_values)
        if family is DialectTag.MYSQL and values:
            return TargetType(base, values=values)
        longest = max((len(v) for v in values), default=0)
        if family is DialectTag.SQLSERVER:
            return TargetType('nvarchar', longest or 255)
        if family is DialectTag.SQLITE and not values:
            return TargetType('text')
        return TargetType('varchar', longest or 255)

    @staticmethod
    def map_type(normalized_type: NormalizedType, source_dialect: DialectLike,
                 target_dialect: DialectLike, length: Optional[int] = None, **kwargs) -> str:
        """Map a normalized type into a target dialect type token.

        Keyword arguments (``scale``, ``raw_type``, ``auto_increment``,
        ``unsigned``, ``enum_values``) refine the choice; see resolve().

        Returns:
            Target type with length/precision reattached, e.g. ``varchar(40)``
        """
        return TypeRegistry.resolve(normalized_type, source_dialect, target_dialect,
                                    length, **kwargs).render()

    @staticmethod
    def map_column(column: ColumnDef, source_dialect: DialectLike,
                   target_dialect: DialectLike) -> ColumnDef:
        """Return a new ColumnDef whose type is expressed in the target dialect.

        The semantic class (``normalized_type``) is kept so defaults and
        data values are still formatted by meaning, e.g. a boolean mapped to
        SQLite ``integer`` still formats ``true`` as ``1``.
        """
        target = normalize_dialect(target_dialect)
        resolved = TypeRegistry.resolve(
            column.normalized_type, source_dialect, target,
            length=column.length, scale=column.scale, raw_type=column.full_type,
            auto_increment=column.auto_increment, unsigned=column.unsigned,
            enum_values=column.enum_values)
        keep_values = resolved.values if target.is_mysql_family else ()
        return replace(
            column,
            raw_type=resolved.name,
            length=resolved.length,
            scale=resolved.scale,
            enum_values=keep_values,
            unsigned=column.unsigned and target.is_mysql_family,
        )

    @staticmethod
    def is_lossy(column: ColumnDef, source_dialect: DialectLike,
                 target_dialect: DialectLike) -> Tuple[bool, Optional[str]]:
        """Check if mapping a column into the target dialect is lossy"""
        source = normalize_dialect(source_dialect)
        target = normalize_dialect(target_dialect)
        if source.family is target.family:
            return (False, None)

        normalized = column.normalized_type
        if normalized is NormalizedType.UNKNOWN:
            return (True, f"Unknown type '{column.full_type}' passed through unchanged")

        resolved = TypeRegistry.resolve(
            normalized, source, target, length=column.length, scale=column.scale,
            raw_type=column.full_type, unsigned=column.unsigned,
            enum_values=column.enum_values)
        mapped = resolved.render()
        mapped_class = TypeRegistry.normalize(resolved.name, resolved.length, target)
        if mapped_class is not normalized:
            return (True, f"Type class change: {normalized.value} stored as {mapped_class.value}")

        base, _, _ = TypeRegistry.parse_type_string(column.full_type)
        if normalized is NormalizedType.FLOAT and target.family is DialectTag.SQLITE \
                and base in EXACT_NUMERIC_TYPES + ('money', 'smallmoney'):
            return (True, f"Precision loss: {column.full_type} -> SQLite {mapped} (floating point)")
        if normalized is NormalizedType.DATETIME and target.family is DialectTag.SQLITE \
                and (base in TZ_DATETIME_TYPES or (base == 'timestamp' and source.is_mysql_family)):
            return (True, f"Timezone loss: {column.full_type} -> SQLite {mapped}")
        return (False, None)

    @staticmethod
    def is_lossy_type(normalized_type: NormalizedType, source_dialect: DialectLike,
                      target_dialect: DialectLike) -> bool:
        """True when a class has no faithful equivalent in the target dialect."""
        mapped = TypeRegistry.map_type(normalized_type, source_dialect, target_dialect)
        target = normalize_dialect(target_dialect)
        return TypeRegistry.normalize(mapped, dialect=target) is not normalized_type


def describe_lossy(column: ColumnDef, table: Optional[str], source_dialect: DialectLike,
                   target_dialect: DialectLike) -> Optional[LossyMapping]:
    """Build a LossyMapping for a column, or None when the mapping is faithful."""
    lossy, reason = TypeRegistry.is_lossy(column, source_dialect, target_dialect)
    if not lossy:
        return None
    source = normalize_dialect(source_dialect)
    target = normalize_dialect(target_dialect)
    mapped = TypeRegistry.resolve(
        column.normalized_type, source, target, length=column.length, scale=column.scale,
        raw_type=column.full_type, unsigned=column.unsigned,
        enum_values=column.enum_values).render()
    return LossyMapping(table, column.name, source, target, column.full_type, mapped, reason)
