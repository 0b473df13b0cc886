import itertools
import unittest

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, NormalizedType
from sqlshift.type_registry import TypeRegistry

ALL_DIALECTS = list(DialectTag)


class TestTypeRegistryMatrix(unittest.TestCase):

    def assertMapping(self, dialect, source_type, expected):
        normalized = TypeRegistry.normalize(source_type, dialect=dialect)
        self.assertEqual(normalized, expected, f"{dialect}: {source_type} -> {normalized} (Expected {expected})")

    def assertReverseMapping(self, source, target, normalized_type, expected_target_str, **kwargs):
        mapped = TypeRegistry.map_type(normalized_type, source, target, **kwargs)
        self.assertEqual(mapped, expected_target_str, f"{source}->{target}: {normalized_type} -> {mapped}")

    # --- POSTGRES ---
    def test_postgres_matrix(self):
        self.assertMapping('postgresql', 'boolean', NormalizedType.BOOLEAN)
        self.assertMapping('postgresql', 'uuid', NormalizedType.UUID)
        self.assertMapping('postgresql', 'jsonb', NormalizedType.JSON)
        self.assertMapping('postgresql', 'timestamp with time zone', NormalizedType.DATETIME)
        self.assertMapping('postgresql', 'timestamp(6) without time zone', NormalizedType.DATETIME)
        self.assertMapping('postgresql', 'bytea', NormalizedType.BINARY)
        self.assertMapping('postgresql', 'numeric(12,2)', NormalizedType.FLOAT)
        self.assertMapping('postgresql', 'double precision', NormalizedType.FLOAT)
        self.assertMapping('postgresql', 'character varying(20)', NormalizedType.STRING)
        self.assertMapping('postgresql', 'bigserial', NormalizedType.INTEGER)

    # --- MYSQL ---
    def test_mysql_matrix(self):
        self.assertMapping('mysql', 'tinyint(1)', NormalizedType.BOOLEAN)
        self.assertMapping('mysql', 'tinyint(4)', NormalizedType.INTEGER)
        self.assertMapping('mysql', 'int(11) unsigned', NormalizedType.INTEGER)
        self.assertMapping('mysql', 'datetime', NormalizedType.DATETIME)
        self.assertMapping('mysql', 'varbinary(16)', NormalizedType.BINARY)
        self.assertMapping('mysql', 'json', NormalizedType.JSON)
        self.assertMapping('mysql', 'enum', NormalizedType.ENUM)
        self.assertMapping('mysql', 'point', NormalizedType.GEOMETRY)
        self.assertMapping('mysql', 'longtext', NormalizedType.STRING)

        self.assertReverseMapping('postgresql', 'mysql', NormalizedType.BOOLEAN, 'tinyint(1)')
        self.assertReverseMapping('postgresql', 'mysql', NormalizedType.JSON, 'json')
        self.assertReverseMapping('postgresql', 'mysql', NormalizedType.UUID, 'char(36)')

    # --- SQLITE ---
    def test_sqlite_matrix(self):
        self.assertMapping('sqlite', 'integer', NormalizedType.INTEGER)
        self.assertMapping('sqlite', 'text', NormalizedType.STRING)
        self.assertMapping('sqlite', 'blob', NormalizedType.BINARY)
        self.assertMapping('sqlite', 'boolean', NormalizedType.BOOLEAN)
        self.assertMapping('sqlite', 'datetime', NormalizedType.DATETIME)
        self.assertMapping('sqlite', 'real', NormalizedType.FLOAT)

    # --- MSSQL ---
    def test_mssql_matrix(self):
        self.assertMapping('sqlserver', 'bit', NormalizedType.BOOLEAN)
        self.assertMapping('sqlserver', 'datetimeoffset', NormalizedType.DATETIME)
        self.assertMapping('sqlserver', 'uniqueidentifier', NormalizedType.UUID)
        self.assertMapping('sqlserver', 'money', NormalizedType.FLOAT)
        self.assertMapping('sqlserver', 'nvarchar(max)', NormalizedType.STRING)
        self.assertMapping('sqlserver', 'timestamp', NormalizedType.BINARY)

        self.assertReverseMapping('postgresql', 'sqlserver', NormalizedType.BOOLEAN, 'bit')
        self.assertReverseMapping('postgresql', 'sqlserver', NormalizedType.UUID, 'uniqueidentifier')
        self.assertReverseMapping('postgresql', 'sqlserver', NormalizedType.STRING, 'nvarchar(max)')
        self.assertReverseMapping('postgresql', 'sqlserver', NormalizedType.STRING, 'nvarchar(40)', length=40)
        self.assertReverseMapping('postgresql', 'sqlserver', NormalizedType.STRING, 'nvarchar(max)', length=8000)

    def test_tinyint_length_rule(self):
        self.assertEqual(TypeRegistry.normalize('tinyint', 1), NormalizedType.BOOLEAN)
        self.assertEqual(TypeRegistry.normalize('tinyint', 11), NormalizedType.INTEGER)
        self.assertEqual(TypeRegistry.normalize('tinyint', None), NormalizedType.INTEGER)

    def test_unknown_type(self):
        self.assertEqual(TypeRegistry.normalize('tsvector'), NormalizedType.UNKNOWN)
        self.assertEqual(TypeRegistry.map_type(NormalizedType.UNKNOWN, 'postgresql', 'mysql',
                                               raw_type='tsvector'), 'tsvector')

    def test_parse_type_string(self):
        self.assertEqual(TypeRegistry.parse_type_string('VARCHAR(255)'), ('varchar', 255, None))
        self.assertEqual(TypeRegistry.parse_type_string('decimal(10, 2)'), ('decimal', 10, 2))
        self.assertEqual(TypeRegistry.parse_type_string('nvarchar(max)'), ('nvarchar', None, None))
        self.assertEqual(TypeRegistry.parse_type_string('timestamp(6) with time zone'),
                         ('timestamp with time zone', 6, None))

    def test_round_trip_class_preserved_unless_lossy(self):
        """normalize(map_type(T, A, B)) == T for every pair not flagged lossy"""
        checked = 0
        for source, target in itertools.product(ALL_DIALECTS, ALL_DIALECTS):
            for normalized in NormalizedType:
                if TypeRegistry.is_lossy_type(normalized, source, target):
                    continue
                mapped = TypeRegistry.map_type(normalized, source, target)
                with self.subTest(source=source, target=target, type=normalized):
                    self.assertEqual(TypeRegistry.normalize(mapped, dialect=target), normalized)
                checked += 1
        self.assertGreater(checked, 0)

    def test_documented_lossy_pairs(self):
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.JSON, 'mysql', 'sqlite'))
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.JSON, 'postgresql', 'sqlserver'))
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.UUID, 'postgresql', 'mysql'))
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.BOOLEAN, 'postgresql', 'sqlite'))
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.GEOMETRY, 'mysql', 'sqlite'))
        self.assertTrue(TypeRegistry.is_lossy_type(NormalizedType.UNKNOWN, 'mysql', 'postgresql'))
        self.assertFalse(TypeRegistry.is_lossy_type(NormalizedType.BOOLEAN, 'postgresql', 'mysql'))
        self.assertFalse(TypeRegistry.is_lossy_type(NormalizedType.DATETIME, 'mysql', 'sqlserver'))
        self.assertFalse(TypeRegistry.is_lossy_type(NormalizedType.STRING, 'sqlite', 'sqlserver'))


class TestIntegerWidths(unittest.TestCase):

    def test_width_kept_across_dialects(self):
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'postgresql', raw_type='bigint'),
                         'bigint')
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'postgresql', raw_type='mediumint'),
                         'integer')
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'postgresql', 'sqlite', raw_type='bigint'),
                         'integer')
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'postgresql', 'sqlserver', raw_type='int8'),
                         'bigint')

    def test_unsigned_widened_outside_mysql(self):
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'postgresql',
                                               raw_type='int', unsigned=True), 'bigint')
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'mariadb',
                                               raw_type='int', unsigned=True), 'int')

    def test_postgres_serial_for_autoincrement(self):
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'postgresql',
                                               raw_type='int', auto_increment=True), 'serial')
        self.assertEqual(TypeRegistry.map_type(NormalizedType.INTEGER, 'mysql', 'postgresql',
                                               raw_type='bigint', auto_increment=True), 'bigserial')


class TestColumnMapping(unittest.TestCase):

    def test_map_column_keeps_semantic_class(self):
        column = ColumnDef('flag', 'tinyint', length=1)
        mapped = TypeRegistry.map_column(column, 'mysql', 'sqlite')
        self.assertEqual(mapped.raw_type, 'integer')
        self.assertEqual(mapped.normalized_type, NormalizedType.BOOLEAN)

    def test_map_column_decimal_precision(self):
        column = ColumnDef('price', 'decimal', length=10, scale=2)
        mapped = TypeRegistry.map_column(column, 'mysql', 'postgresql')
        self.assertEqual((mapped.raw_type, mapped.length, mapped.scale), ('numeric', 10, 2))

    def test_map_column_same_family_passthrough(self):
        column = ColumnDef('body', 'nvarchar(max)')
        mapped = TypeRegistry.map_column(column, 'sqlserver', 'sqlserver')
        self.assertEqual(mapped.raw_type, 'nvarchar(max)')

    def test_enum_values_dropped_outside_mysql(self):
        column = ColumnDef('status', 'enum', enum_values=('on', 'off'))
        to_pg = TypeRegistry.map_column(column, 'mysql', 'postgresql')
        self.assertEqual((to_pg.raw_type, to_pg.length, to_pg.enum_values), ('varchar', 3, ()))
        to_maria = TypeRegistry.map_column(column, 'mysql', 'mariadb')
        self.assertEqual(to_maria.enum_values, ('on', 'off'))

    def test_is_lossy_reports_reason(self):
        lossy, reason = TypeRegistry.is_lossy(ColumnDef('amount', 'decimal', length=10, scale=2), 'mysql', 'sqlite')
        self.assertTrue(lossy)
        self.assertIn('Precision loss', reason)
        lossy, reason = TypeRegistry.is_lossy(ColumnDef('ts', 'timestamptz'), 'postgresql', 'sqlite')
        self.assertTrue(lossy)
        self.assertIn('Timezone loss', reason)
        self.assertEqual(TypeRegistry.is_lossy(ColumnDef('n', 'int'), 'mysql', 'postgresql'), (False, None))


if __name__ == '__main__':
    unittest.main()
