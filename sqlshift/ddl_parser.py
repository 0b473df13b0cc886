#!/usr/bin/env python3
"""
SQLShift DDL Parser
===================

Parses CREATE TABLE statements written for MySQL/MariaDB, PostgreSQL,
SQLite or SQL Server into SchemaTable values.

The body of a CREATE TABLE is split with a quote- and parenthesis-aware
scanner, so ``decimal(10,2)``, ``enum('a,b')`` and quoted identifiers
containing commas stay in one clause. Regular expressions are only used
on single clauses.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.errors import ParseError
from sqlshift.schema_ir import ColumnDef, ConstraintDef, ConstraintKind, SchemaTable
from sqlshift.type_registry import SERIAL_TYPES, TypeRegistry

logger = logging.getLogger(__name__)

DialectLike = Union[DialectTag, str]

QUOTE_CLOSERS = {"'": "'", '"': '"', '`': '`', '[': ']'}

_DOLLAR_TAG = re.compile(r'\$[A-Za-z_]*\$')
_GO_SEPARATOR = re.compile(r'^\s*GO\s*$', re.IGNORECASE | re.MULTILINE)
_WHITESPACE = re.compile(r'\s+')
_BARE_IDENTIFIER = re.compile(r'[\w$#@]+')

_CREATE_TABLE = re.compile(
    r'^\s*(?:IF\s+OBJECT_ID\s*\([^)]*\)\s+IS\s+NULL\s+)?'
    r'CREATE\s+(?:OR\s+REPLACE\s+)?(?:(?:GLOBAL|LOCAL)\s+)?(?:TEMP(?:ORARY)?\s+|UNLOGGED\s+)?'
    r'TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?', re.IGNORECASE)

_TYPE_WORD = re.compile(
    r'(double\s+precision|character\s+varying|[A-Za-z_][A-Za-z0-9_]*)', re.IGNORECASE)
_TIME_ZONE_SUFFIX = re.compile(r'\s+with(?:out)?\s+time\s+zone\b', re.IGNORECASE)

# Words that can follow a column name but are never a type
NON_TYPE_WORDS = {
    'not', 'null', 'default', 'primary', 'unique', 'references', 'check', 'constraint',
    'auto_increment', 'autoincrement', 'identity', 'generated', 'collate', 'comment', 'as',
}

_CONSTRAINT_NAME = re.compile(r'CONSTRAINT\s+', re.IGNORECASE)
_PRIMARY_KEY = re.compile(r'PRIMARY\s+KEY\b', re.IGNORECASE)
_UNIQUE = re.compile(r'UNIQUE\b(?:\s+(?:KEY|INDEX)\b)?', re.IGNORECASE)
_FOREIGN_KEY = re.compile(r'FOREIGN\s+KEY\b', re.IGNORECASE)
_CHECK = re.compile(r'CHECK\s*(?=\()', re.IGNORECASE)
_INDEX = re.compile(r'(?:(?:FULLTEXT|SPATIAL)\s+)?(?:KEY|INDEX)\b', re.IGNORECASE)
_OTHER_CONSTRAINT = re.compile(r'EXCLUDE\s+(?:USING\b|\()|PERIOD\s+FOR\b', re.IGNORECASE)
_REFERENCES = re.compile(r'\s*REFERENCES\s+', re.IGNORECASE)
_FK_ACTIONS = re.compile(
    r'\s*((?:(?:ON\s+(?:DELETE|UPDATE)\s+(?:CASCADE|RESTRICT|NO\s+ACTION|SET\s+NULL|SET\s+DEFAULT))'
    r'|(?:MATCH\s+(?:FULL|PARTIAL|SIMPLE))|(?:NOT\s+)?DEFERRABLE|INITIALLY\s+(?:DEFERRED|IMMEDIATE))'
    r'(?:\s+|$))+', re.IGNORECASE)
_INDEX_OPTIONS = re.compile(r'\s*(?:CLUSTERED|NONCLUSTERED|USING\s+\w+)\b', re.IGNORECASE)

# Column attribute patterns, tried in order at the current position
_ATTR_NOT_NULL = re.compile(r'NOT\s+NULL\b', re.IGNORECASE)
_ATTR_NULL = re.compile(r'NULL\b', re.IGNORECASE)
_ATTR_DEFAULT = re.compile(r'DEFAULT\b', re.IGNORECASE)
_ATTR_AUTO = re.compile(r'(?:AUTO_INCREMENT|AUTOINCREMENT)\b', re.IGNORECASE)
_ATTR_IDENTITY = re.compile(r'IDENTITY\b(?:\s*\(\s*-?\d+\s*,\s*-?\d+\s*\))?', re.IGNORECASE)
_ATTR_GENERATED_IDENTITY = re.compile(
    r'GENERATED\s+(?:ALWAYS|BY\s+DEFAULT(?:\s+ON\s+NULL)?)\s+AS\s+IDENTITY\b', re.IGNORECASE)
_ATTR_COMPUTED = re.compile(r'(?:GENERATED\s+ALWAYS\s+)?AS\s*(?=\()', re.IGNORECASE)
_ATTR_PRIMARY_KEY = re.compile(
    r'PRIMARY\s+KEY\b(?:\s+(?:ASC|DESC)\b)?(?:\s+(?:CLUSTERED|NONCLUSTERED)\b)?', re.IGNORECASE)
_ATTR_UNIQUE = re.compile(r'UNIQUE\b(?:\s+KEY\b)?', re.IGNORECASE)
_ATTR_COMMENT = re.compile(r'COMMENT\s+', re.IGNORECASE)
_ATTR_ON_UPDATE = re.compile(r'ON\s+UPDATE\s+', re.IGNORECASE)
_ATTR_CHARSET = re.compile(r'(?:CHARACTER\s+SET|CHARSET|COLLATE)\s+', re.IGNORECASE)
_ATTR_UNSIGNED = re.compile(r'UNSIGNED\b', re.IGNORECASE)
_ATTR_CONSTRAINT = re.compile(r'CONSTRAINT\s+', re.IGNORECASE)
_ATTR_IGNORED = re.compile(
    r'(?:SIGNED|ZEROFILL|SPARSE|ROWGUIDCOL|FILESTREAM|NOT\s+FOR\s+REPLICATION|VISIBLE|INVISIBLE'
    r'|BINARY|ASC|DESC|STORED|VIRTUAL|PERSISTED|ON\s+CONFLICT\s+\w+|COLUMN_FORMAT\s+\w+'
    r'|STORAGE\s+\w+|SRID\s+\d+)\b', re.IGNORECASE)
_DEFAULT_WORD = re.compile(r"[+-]?[\w.$]+")
_CAST = re.compile(
    r'\s*::\s*(?:double\s+precision|character\s+varying|timestamp\s+with(?:out)?\s+time\s+zone|\w+)',
    re.IGNORECASE)
_ARRAY_SUFFIX = re.compile(r'\s*\[\s*\d*\s*\]')


# ============================================================================
# SCANNER
# ============================================================================

def skip_quoted(text: str, pos: int, backslash_escapes: bool = False) -> int:
    """Return the index just past the quoted span opening at ``pos``.

    Handles '...' strings, "..." / `...` / [...] identifiers with their
    doubled-closer escapes, and PostgreSQL $tag$...$tag$ bodies.

    Raises:
        ParseError: if the quoted span is never closed
    """
    opener = text[pos]
    if opener == '$':
        tag = _DOLLAR_TAG.match(text, pos)
        end = text.find(tag.group(0), tag.end())
        if end < 0:
            raise ParseError(f"Unterminated dollar-quoted text starting at offset {pos}")
        return end + len(tag.group(0))

    closer = QUOTE_CLOSERS[opener]
    index = pos + 1
    length = len(text)
    while index < length:
        char = text[index]
        if backslash_escapes and char == '\\' and opener in ("'", '"'):
            index += 2
            continue
        if char == closer:
            if index + 1 < length and text[index + 1] == closer:
                index += 2
                continue
            return index + 1
        index += 1
    raise ParseError(f"Unterminated quoted text starting at offset {pos}")


def _opens_quote(text: str, pos: int) -> bool:
    char = text[pos]
    if char in QUOTE_CLOSERS:
        return True
    if char != '$' or (pos > 0 and (text[pos - 1].isalnum() or text[pos - 1] in '_$')):
        return False
    return _DOLLAR_TAG.match(text, pos) is not None


def split_top_level(text: str, separator: str = ',', backslash_escapes: bool = False) -> List[str]:
    """
    Split text on ``separator`` occurring outside parentheses and quotes.

    Args:
        text: Text to split, e.g. the body of a CREATE TABLE
        separator: Single separator character
        backslash_escapes: Treat backslash as an escape inside strings (MySQL)

    Returns:
        Stripped, non-empty parts in order

    Raises:
        ParseError: on unbalanced parentheses or unterminated quotes
    """
    parts = []
    depth = 0
    start = 0
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if _opens_quote(text, index):
            index = skip_quoted(text, index, backslash_escapes)
            continue
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth < 0:
                raise ParseError(f"Unbalanced ')' at offset {index}", clause=text)
        elif char == separator and depth == 0:
            parts.append(text[start:index].strip())
            start = index + 1
        index += 1
    if depth != 0:
        raise ParseError("Unbalanced parentheses", clause=text)
    parts.append(text[start:].strip())
    return [part for part in parts if part]


def find_closing_paren(text: str, open_pos: int, backslash_escapes: bool = False) -> int:
    """Index of the ')' matching the '(' at ``open_pos``."""
    depth = 0
    index = open_pos
    length = len(text)
    while index < length:
        if _opens_quote(text, index):
            index = skip_quoted(text, index, backslash_escapes)
            continue
        char = text[index]
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return index
        index += 1
    raise ParseError(f"Unbalanced '(' at offset {open_pos}", clause=text[open_pos:open_pos + 80])


def strip_sql_comments(sql: str, backslash_escapes: bool = False, hash_comments: bool = False) -> str:
    """Remove -- and /* */ comments (and # comments for MySQL) outside quotes."""
    out = []
    index = 0
    length = len(sql)
    while index < length:
        char = sql[index]
        if _opens_quote(sql, index):
            end = skip_quoted(sql, index, backslash_escapes)
            out.append(sql[index:end])
            index = end
        elif sql.startswith('--', index) or (hash_comments and char == '#'):
            newline = sql.find('\n', index)
            index = length if newline < 0 else newline
        elif sql.startswith('/*', index):
            end = sql.find('*/', index + 2)
            index = length if end < 0 else end + 2
            out.append(' ')
        else:
            out.append(char)
            index += 1
    return ''.join(out)


def split_statements(sql: str, dialect: Optional[DialectLike] = None) -> List[str]:
    """Split a SQL script into statements, dropping comments."""
    tag = normalize_dialect(dialect) if dialect is not None else None
    mysql = tag is not None and tag.is_mysql_family
    text = strip_sql_comments(sql, backslash_escapes=mysql, hash_comments=mysql)
    if tag is DialectTag.SQLSERVER:
        text = _GO_SEPARATOR.sub(';', text)

    statements = []
    start = 0
    index = 0
    length = len(text)
    while index < length:
        if _opens_quote(text, index):
            index = skip_quoted(text, index, mysql)
            continue
        if text[index] == ';':
            statements.append(text[start:index].strip())
            start = index + 1
        index += 1
    statements.append(text[start:].strip())
    return [statement for statement in statements if statement]


def read_identifier(text: str, pos: int) -> Tuple[str, int]:
    """
    Read a quoted or bare identifier at ``pos`` (leading whitespace skipped).

    Returns:
        (unescaped name, index after the identifier)
    """
    while pos < len(text) and text[pos].isspace():
        pos += 1
    if pos >= len(text):
        raise ParseError("Expected identifier", clause=text)
    opener = text[pos]
    if opener in ('`', '"', '['):
        end = skip_quoted(text, pos)
        closer = QUOTE_CLOSERS[opener]
        name = text[pos + 1:end - 1].replace(closer * 2, closer)
        return name, end
    match = _BARE_IDENTIFIER.match(text, pos)
    if not match:
        raise ParseError(f"Expected identifier at: {text[pos:pos + 30]!r}", clause=text)
    return match.group(0), match.end()


def _unquote_string(token: str) -> str:
    token = token.strip()
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
        quote = token[0]
        return token[1:-1].replace(quote * 2, quote).replace('\\' + quote, quote)
    return token


# ============================================================================
# PARSER
# ============================================================================

class DDLParser:
    """CREATE TABLE parser for one source dialect"""

    def __init__(self, dialect: DialectLike):
        self.dialect = normalize_dialect(dialect)
        self.backslash_escapes = self.dialect.is_mysql_family

    def parse(self, ddl_text: str) -> SchemaTable:
        """
        Parse the first CREATE TABLE statement in ``ddl_text``.

        Unrelated statements before or after it are ignored.

        Raises:
            ParseError: if no CREATE TABLE is found or a clause is malformed
        """
        for statement in split_statements(ddl_text, self.dialect):
            if _CREATE_TABLE.match(statement):
                return self.parse_statement(statement)
        raise ParseError("No CREATE TABLE statement found", statement=ddl_text[:200])

    def parse_all(self, sql: str) -> List[SchemaTable]:
        """Parse every CREATE TABLE statement of a script, in order."""
        tables = [self.parse_statement(statement)
                  for statement in split_statements(sql, self.dialect)
                  if _CREATE_TABLE.match(statement)]
        logger.info(f"Parsed {len(tables)} table(s) from {self.dialect.value} script")
        return tables

    def parse_statement(self, statement: str) -> SchemaTable:
        """Parse a single CREATE TABLE statement (comments already removed)."""
        match = _CREATE_TABLE.match(statement)
        if not match:
            raise ParseError("No CREATE TABLE statement found", statement=statement[:200])

        name, pos = self._read_table_name(statement, match.end())
        while pos < len(statement) and statement[pos].isspace():
            pos += 1
        if pos >= len(statement) or statement[pos] != '(':
            raise ParseError(f"Expected column list after table name '{name}'",
                             statement=statement[:200])

        close = find_closing_paren(statement, pos, self.backslash_escapes)
        body = statement[pos + 1:close]
        options = statement[close + 1:].strip().rstrip(';').strip()
        if options:
            logger.debug(f"Ignoring table options for {name}: {options}")

        clauses = split_top_level(body, ',', self.backslash_escapes)
        if not clauses:
            raise ParseError(f"Table '{name}' has no column definitions", statement=statement[:200])

        columns: List[ColumnDef] = []
        constraints: List[ConstraintDef] = []
        table_pk: Optional[List[str]] = None
        inline_pk: List[str] = []

        for clause in clauses:
            if self._is_constraint_clause(clause):
                kind, value = self._parse_constraint(clause)
                if kind == 'primary_key':
                    if table_pk is not None:
                        raise ParseError(f"Multiple primary keys defined for table '{name}'", clause=clause)
                    table_pk = value
                elif value is not None:
                    constraints.append(value)
                continue

            column, is_pk, column_constraints = self._parse_column(clause)
            if any(c.name.lower() == column.name.lower() for c in columns):
                raise ParseError(f"Duplicate column '{column.name}' in table '{name}'", clause=clause)
            columns.append(column)
            constraints.extend(column_constraints)
            if is_pk:
                inline_pk.append(column.name)

        if len(inline_pk) > 1:
            raise ParseError(f"Multiple inline primary keys defined for table '{name}'",
                             statement=statement[:200])
        if table_pk is not None and inline_pk and [n.lower() for n in table_pk] != [inline_pk[0].lower()]:
            raise ParseError(f"Multiple primary keys defined for table '{name}'", statement=statement[:200])
        primary_key = table_pk if table_pk is not None else inline_pk

        known = {c.name.lower() for c in columns}
        for pk_name in primary_key:
            if pk_name.lower() not in known:
                raise ParseError(f"Primary key column '{pk_name}' does not exist in table '{name}'",
                                 statement=statement[:200])

        table = SchemaTable(
            name=name,
            columns=tuple(columns),
            primary_key=tuple(primary_key),
            constraints=tuple(constraints),
            dialect=self.dialect,
        )
        logger.debug(f"Parsed table {name}: {len(table.columns)} columns, primary key {list(table.primary_key)}")
        return table

    def _read_table_name(self, statement: str, pos: int) -> Tuple[str, int]:
        name, pos = read_identifier(statement, pos)
        # schema.table: keep the table part
        while pos < len(statement) and statement[pos] == '.':
            name, pos = read_identifier(statement, pos + 1)
        return name, pos

    def _is_constraint_clause(self, clause: str) -> bool:
        if clause[0] in ('`', '"', '['):
            return False
        if (_CONSTRAINT_NAME.match(clause) or _PRIMARY_KEY.match(clause) or _FOREIGN_KEY.match(clause)
                or _CHECK.match(clause) or _OTHER_CONSTRAINT.match(clause)):
            return True
        if _UNIQUE.match(clause):
            return True
        # KEY and INDEX are reserved in MySQL only; elsewhere they can name a column
        return self.dialect.is_mysql_family and _INDEX.match(clause) is not None

    def _column_list(self, text: str, pos: int) -> Tuple[List[str], int]:
        open_pos = text.find('(', pos)
        if open_pos < 0:
            raise ParseError("Expected column list", clause=text)
        close = find_closing_paren(text, open_pos, self.backslash_escapes)
        names = []
        for part in split_top_level(text[open_pos + 1:close], ',', self.backslash_escapes):
            # ASC/DESC and MySQL prefix lengths are not part of the name
            name, _ = read_identifier(part, 0)
            names.append(name)
        if not names:
            raise ParseError("Empty column list", clause=text)
        return names, close + 1

    def _parse_constraint(self, clause: str):
        """Returns ('primary_key', [columns]) or ('constraint', ConstraintDef or None)."""
        rest = clause
        name = None
        match = _CONSTRAINT_NAME.match(rest)
        if match:
            name, pos = read_identifier(rest, match.end())
            rest = rest[pos:].lstrip()

        match = _PRIMARY_KEY.match(rest)
        if match:
            pos = match.end()
            options = _INDEX_OPTIONS.match(rest, pos)
            while options:
                pos = options.end()
                options = _INDEX_OPTIONS.match(rest, pos)
            columns, _ = self._column_list(rest, pos)
            return 'primary_key', columns

        match = _FOREIGN_KEY.match(rest)
        if match:
            pos = match.end()
            if rest[pos:].lstrip()[:1] != '(':
                _, pos = read_identifier(rest, pos)  # MySQL index name
            columns, pos = self._column_list(rest, pos)
            constraint, _ = self._parse_references(rest, pos, columns, name, clause)
            return 'constraint', constraint

        match = _UNIQUE.match(rest)
        if match:
            pos = match.end()
            if rest[pos:].lstrip()[:1] not in ('(', ''):
                index_name, pos = read_identifier(rest, pos)
                name = name or index_name
            options = _INDEX_OPTIONS.match(rest, pos)
            while options:
                pos = options.end()
                options = _INDEX_OPTIONS.match(rest, pos)
            columns, _ = self._column_list(rest, pos)
            return 'constraint', ConstraintDef(ConstraintKind.UNIQUE, tuple(columns), name=name)

        match = _CHECK.match(rest)
        if match:
            open_pos = match.end()
            close = find_closing_paren(rest, open_pos, self.backslash_escapes)
            expression = rest[open_pos + 1:close].strip()
            return 'constraint', ConstraintDef(ConstraintKind.CHECK, (), name=name, expression=expression)

        if (self.dialect.is_mysql_family and _INDEX.match(rest)) or _OTHER_CONSTRAINT.match(rest):
            logger.debug(f"Dropping index clause: {clause}")
            return 'constraint', None

        raise ParseError(f"Unrecognized constraint clause: {clause}", clause=clause)

    def _parse_references(self, text: str, pos: int, columns: List[str],
                          name: Optional[str], clause: str) -> Tuple[ConstraintDef, int]:
        match = _REFERENCES.match(text, pos)
        if not match:
            raise ParseError("Expected REFERENCES in foreign key", clause=clause)
        ref_table, pos = read_identifier(text, match.end())
        while pos < len(text) and text[pos] == '.':
            ref_table, pos = read_identifier(text, pos + 1)
        ref_columns: List[str] = []
        if text[pos:].lstrip()[:1] == '(':
            ref_columns, pos = self._column_list(text, pos)
        actions = None
        action_match = _FK_ACTIONS.match(text, pos)
        if action_match:
            actions = _WHITESPACE.sub(' ', action_match.group(0).strip()).upper()
            pos = action_match.end()
        constraint = ConstraintDef(ConstraintKind.FOREIGN_KEY, tuple(columns), name=name,
                                   ref_table=ref_table, ref_columns=tuple(ref_columns), actions=actions)
        return constraint, pos

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def _parse_column(self, clause: str) -> Tuple[ColumnDef, bool, List[ConstraintDef]]:
        name, pos = read_identifier(clause, 0)
        raw_type, length, scale, enum_values, pos = self._parse_type(clause, pos, name)

        attrs = {
            'nullable': True,
            'default_value': None,
            'auto_increment': raw_type in SERIAL_TYPES,
            # SQL Server tinyint holds 0..255
            'unsigned': self.dialect is DialectTag.SQLSERVER and raw_type == 'tinyint',
            'comment': None,
            'on_update': None,
        }
        is_pk = False
        constraints: List[ConstraintDef] = []
        constraint_name = None
        text = clause
        length_text = len(text)

        while pos < length_text:
            if text[pos].isspace():
                pos += 1
                continue

            match = _ATTR_NOT_NULL.match(text, pos)
            if match:
                attrs['nullable'] = False
                pos = match.end()
                continue
            match = _ATTR_NULL.match(text, pos)
            if match:
                attrs['nullable'] = True
                pos = match.end()
                continue
            match = _ATTR_DEFAULT.match(text, pos)
            if match:
                attrs['default_value'], pos = self._read_value(text, match.end(), clause)
                continue
            match = (_ATTR_AUTO.match(text, pos) or _ATTR_GENERATED_IDENTITY.match(text, pos)
                     or _ATTR_IDENTITY.match(text, pos))
            if match:
                attrs['auto_increment'] = True
                pos = match.end()
                if text[pos:].lstrip()[:1] == '(':
                    # identity sequence options
                    pos = find_closing_paren(text, text.index('(', pos), self.backslash_escapes) + 1
                continue
            match = _ATTR_PRIMARY_KEY.match(text, pos)
            if match:
                is_pk = True
                constraint_name = None
                pos = match.end()
                continue
            match = _ATTR_UNIQUE.match(text, pos)
            if match:
                constraints.append(ConstraintDef(ConstraintKind.UNIQUE, (name,), name=constraint_name))
                constraint_name = None
                pos = match.end()
                continue
            match = _REFERENCES.match(text, pos)
            if match:
                constraint, pos = self._parse_references(text, pos, [name], constraint_name, clause)
                constraints.append(constraint)
                constraint_name = None
                continue
            match = _CHECK.match(text, pos)
            if match:
                open_pos = match.end()
                close = find_closing_paren(text, open_pos, self.backslash_escapes)
                constraints.append(ConstraintDef(ConstraintKind.CHECK, (), name=constraint_name,
                                                 expression=text[open_pos + 1:close].strip()))
                constraint_name = None
                pos = close + 1
                continue
            match = _ATTR_COMPUTED.match(text, pos)
            if match:
                open_pos = text.index('(', match.end())
                pos = find_closing_paren(text, open_pos, self.backslash_escapes) + 1
                logger.debug(f"Column {name}: computed expression ignored")
                continue
            match = _ATTR_COMMENT.match(text, pos)
            if match:
                token, pos = self._read_value(text, match.end(), clause)
                attrs['comment'] = _unquote_string(token)
                continue
            match = _ATTR_ON_UPDATE.match(text, pos)
            if match:
                attrs['on_update'], pos = self._read_value(text, match.end(), clause)
                continue
            match = _ATTR_CHARSET.match(text, pos)
            if match:
                _, pos = read_identifier(text, match.end())
                continue
            match = _ATTR_UNSIGNED.match(text, pos)
            if match:
                attrs['unsigned'] = True
                pos = match.end()
                continue
            match = _ATTR_CONSTRAINT.match(text, pos)
            if match:
                constraint_name, pos = read_identifier(text, match.end())
                continue
            match = _ATTR_IGNORED.match(text, pos)
            if match:
                pos = match.end()
                continue

            token, pos = self._read_value(text, pos, clause)
            logger.debug(f"Column {name}: ignoring unrecognized attribute {token!r}")

        default = attrs['default_value']
        if default is not None and default.lower().startswith('nextval'):
            attrs['auto_increment'] = True
            attrs['default_value'] = None
        if attrs['auto_increment']:
            attrs['default_value'] = None

        column = ColumnDef(
            name=name,
            raw_type=raw_type,
            normalized_type=TypeRegistry.normalize(raw_type, length, self.dialect),
            length=length,
            scale=scale,
            enum_values=tuple(enum_values),
            **attrs,
        )
        return column, is_pk, constraints

    def _parse_type(self, clause: str, pos: int, column_name: str):
        while pos < len(clause) and clause[pos].isspace():
            pos += 1
        if clause[pos:pos + 1] == '[':
            # SSMS scripts bracket type names: [nvarchar](50)
            bracketed, pos = read_identifier(clause, pos)
            raw_type = _WHITESPACE.sub(' ', bracketed.strip().lower())
            if not raw_type:
                raise ParseError(f"Cannot determine type of column '{column_name}'", clause=clause)
        else:
            match = _TYPE_WORD.match(clause, pos)
            if not match or match.group(1).lower() in NON_TYPE_WORDS:
                raise ParseError(f"Cannot determine type of column '{column_name}'", clause=clause)
            raw_type = _WHITESPACE.sub(' ', match.group(1).lower())
            pos = match.end()
        length = scale = None
        enum_values: List[str] = []

        scan = pos
        while scan < len(clause) and clause[scan].isspace():
            scan += 1
        if scan < len(clause) and clause[scan] == '(':
            close = find_closing_paren(clause, scan, self.backslash_escapes)
            args = clause[scan + 1:close].strip()
            pos = close + 1
            if raw_type in ('enum', 'set'):
                enum_values = [_unquote_string(v) for v in split_top_level(args, ',', self.backslash_escapes)]
            elif args.lower() == 'max':
                raw_type = f"{raw_type}(max)"
            else:
                numbers = [a.strip() for a in args.split(',')]
                if all(n.isdigit() for n in numbers):
                    length = int(numbers[0])
                    scale = int(numbers[1]) if len(numbers) > 1 else None
                else:
                    logger.debug(f"Column {column_name}: type arguments {args!r} ignored")

        suffix = _TIME_ZONE_SUFFIX.match(clause, pos)
        if suffix and raw_type in ('time', 'timestamp'):
            raw_type = f"{raw_type} {_WHITESPACE.sub(' ', suffix.group(0).strip().lower())}"
            pos = suffix.end()
        array = _ARRAY_SUFFIX.match(clause, pos)
        if array:
            raw_type = f"{raw_type}[]"
            pos = array.end()
        return raw_type, length, scale, enum_values, pos

    def _read_value(self, text: str, pos: int, clause: str) -> Tuple[str, int]:
        """Read one value token: quoted literal, parenthesized expression, word or call."""
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            raise ParseError("Expected a value", clause=clause)
        start = pos
        char = text[pos]
        if char in ('N', 'n', 'E', 'e', 'B', 'b', 'X', 'x') and text[pos + 1:pos + 2] == "'":
            pos = skip_quoted(text, pos + 1, self.backslash_escapes)
        elif _opens_quote(text, pos):
            pos = skip_quoted(text, pos, self.backslash_escapes)
        elif char == '(':
            pos = find_closing_paren(text, pos, self.backslash_escapes) + 1
        else:
            match = _DEFAULT_WORD.match(text, pos)
            if not match:
                raise ParseError(f"Unexpected character {char!r}", clause=clause)
            pos = match.end()
            scan = pos
            while scan < len(text) and text[scan].isspace():
                scan += 1
            if scan < len(text) and text[scan] == '(':
                pos = find_closing_paren(text, scan, self.backslash_escapes) + 1

        cast = _CAST.match(text, pos)
        while cast:
            pos = cast.end()
            if text[pos:pos + 1] == '(':
                pos = find_closing_paren(text, pos, self.backslash_escapes) + 1
            array = _ARRAY_SUFFIX.match(text, pos)
            if array:
                pos = array.end()
            cast = _CAST.match(text, pos)
        return text[start:pos].strip(), pos


def parse_create_table(ddl_text: str, dialect: DialectLike) -> SchemaTable:
    """Parse the first CREATE TABLE statement of ``ddl_text``."""
    return DDLParser(dialect).parse(ddl_text)


def parse_all(sql: str, dialect: DialectLike) -> List[SchemaTable]:
    """Parse every CREATE TABLE statement of a script."""
    return DDLParser(dialect).parse_all(sql)
