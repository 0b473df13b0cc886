#!/usr/bin/env python3
"""
SQLShift Dialect Tags
=====================

Enumeration of the supported RDBMS dialects and the alias table used to
resolve user supplied dialect names.
"""

from enum import Enum
from typing import Dict, Union

from sqlshift.errors import UnsupportedDialectError


class DialectTag(Enum):
    """Supported SQL dialects"""
    MYSQL = "mysql"
    MARIADB = "mariadb"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"
    SQLSERVER = "sqlserver"

    @property
    def family(self) -> 'DialectTag':
        """MariaDB shares MySQL's type system and DDL syntax."""
        if self is DialectTag.MARIADB:
            return DialectTag.MYSQL
        return self

    @property
    def is_mysql_family(self) -> bool:
        return self.family is DialectTag.MYSQL


DIALECT_ALIASES: Dict[str, DialectTag] = {
    'mysql': DialectTag.MYSQL,
    'mariadb': DialectTag.MARIADB,
    'postgresql': DialectTag.POSTGRESQL,
    'postgres': DialectTag.POSTGRESQL,
    'pgsql': DialectTag.POSTGRESQL,
    'sqlite': DialectTag.SQLITE,
    'sqlite3': DialectTag.SQLITE,
    'sqlserver': DialectTag.SQLSERVER,
    'mssql': DialectTag.SQLSERVER,
    'sqlsrv': DialectTag.SQLSERVER,
}


def normalize_dialect(dialect: Union[DialectTag, str]) -> DialectTag:
    """Resolve a DialectTag or a dialect name/alias to a DialectTag.

    Raises:
        UnsupportedDialectError: if the name is not a known dialect
    """
    if isinstance(dialect, DialectTag):
        return dialect
    if isinstance(dialect, str):
        tag = DIALECT_ALIASES.get(dialect.strip().lower())
        if tag is not None:
            return tag
    raise UnsupportedDialectError(dialect)
