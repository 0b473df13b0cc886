import unittest

from sqlshift.ddl_parser import parse_create_table
from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.errors import ErrorCode, UnsupportedDialectError
from sqlshift.strategies import MySQLStrategy, SQLServerStrategy, get_strategy
from sqlshift.type_registry import TypeRegistry


class TestDialectResolution(unittest.TestCase):

    def test_aliases(self):
        self.assertIs(normalize_dialect('Postgres'), DialectTag.POSTGRESQL)
        self.assertIs(normalize_dialect(' mssql '), DialectTag.SQLSERVER)
        self.assertIs(normalize_dialect('sqlite3'), DialectTag.SQLITE)
        self.assertIs(normalize_dialect(DialectTag.MARIADB), DialectTag.MARIADB)

    def test_unsupported(self):
        with self.assertRaises(UnsupportedDialectError) as ctx:
            normalize_dialect('oracle')
        self.assertEqual(ctx.exception.code, ErrorCode.UNSUPPORTED_DIALECT)
        self.assertEqual(ctx.exception.dialect, 'oracle')

        with self.assertRaises(UnsupportedDialectError):
            get_strategy(None)

    def test_strategies(self):
        self.assertIsInstance(get_strategy('mysql'), MySQLStrategy)
        self.assertIsInstance(get_strategy('sqlsrv'), SQLServerStrategy)


class TestMariaDBCompatibility(unittest.TestCase):

    def test_mariadb_is_mysql_family(self):
        self.assertIs(DialectTag.MARIADB.family, DialectTag.MYSQL)
        self.assertTrue(DialectTag.MARIADB.is_mysql_family)
        self.assertFalse(DialectTag.SQLITE.is_mysql_family)

    def test_mariadb_strategy_keeps_its_tag(self):
        strategy = get_strategy('mariadb')
        self.assertIsInstance(strategy, MySQLStrategy)
        self.assertIs(strategy.dialect, DialectTag.MARIADB)

    def test_mariadb_uses_mysql_types(self):
        self.assertEqual(TypeRegistry.map_type(TypeRegistry.normalize('boolean'), 'postgresql', 'mariadb'),
                         'tinyint(1)')
        self.assertEqual(TypeRegistry.map_type(TypeRegistry.normalize('uuid'), 'postgresql', 'mariadb'),
                         'char(36)')

    def test_mariadb_ddl_to_mysql(self):
        """MariaDB dumps translate to MySQL without changing the column types"""
        table = parse_create_table(
            "CREATE TABLE `t` (`id` bigint(20) unsigned NOT NULL AUTO_INCREMENT, "
            "`payload` longtext, PRIMARY KEY (`id`)) ENGINE=Aria;", 'mariadb')
        strategy = get_strategy('mysql')
        mapped = [strategy.map_column(c, table.dialect) for c in table.columns]
        self.assertEqual([m.full_type for m in mapped], ['bigint(20)', 'longtext'])
        self.assertTrue(mapped[0].unsigned)


if __name__ == '__main__':
    unittest.main()
