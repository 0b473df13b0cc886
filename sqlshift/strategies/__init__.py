"""
Per-dialect strategy registry.

One stateless strategy instance per dialect; get_strategy() resolves a
DialectTag or alias and fails for dialects without a strategy.
"""

from typing import Dict, Union

from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.errors import UnsupportedDialectError
from sqlshift.strategies.base import DialectStrategy
from sqlshift.strategies.mysql import MySQLStrategy
from sqlshift.strategies.postgresql import PostgreSQLStrategy
from sqlshift.strategies.sqlite import SQLiteStrategy
from sqlshift.strategies.sqlserver import SQLServerStrategy

STRATEGIES: Dict[DialectTag, DialectStrategy] = {
    DialectTag.MYSQL: MySQLStrategy(),
    DialectTag.MARIADB: MySQLStrategy(DialectTag.MARIADB),
    DialectTag.POSTGRESQL: PostgreSQLStrategy(),
    DialectTag.SQLITE: SQLiteStrategy(),
    DialectTag.SQLSERVER: SQLServerStrategy(),
}


def get_strategy(dialect: Union[DialectTag, str]) -> DialectStrategy:
    """Return the strategy for a dialect.

    Raises:
        UnsupportedDialectError: if no strategy is registered
    """
    tag = normalize_dialect(dialect)
    strategy = STRATEGIES.get(tag)
    if strategy is None:
        raise UnsupportedDialectError(dialect)
    return strategy


__all__ = [
    'DialectStrategy',
    'MySQLStrategy',
    'PostgreSQLStrategy',
    'SQLiteStrategy',
    'SQLServerStrategy',
    'STRATEGIES',
    'get_strategy',
]
