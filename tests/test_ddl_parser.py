#!/usr/bin/env python3
"""
DDL parser tests: scanner helpers, column attributes and constraints
"""

import pytest

from sqlshift.ddl_parser import (
    DDLParser,
    parse_all,
    parse_create_table,
    split_statements,
    split_top_level,
    strip_sql_comments,
)
from sqlshift.dialects import DialectTag
from sqlshift.errors import ParseError
from sqlshift.schema_ir import ConstraintKind, NormalizedType


class TestScanner:

    def test_split_respects_parentheses_and_quotes(self):
        body = "price decimal(10,2) NOT NULL DEFAULT 0.00, kind enum('a,b','c'), `odd, name` int"
        assert split_top_level(body) == [
            "price decimal(10,2) NOT NULL DEFAULT 0.00",
            "kind enum('a,b','c')",
            "`odd, name` int",
        ]

    def test_unbalanced_parentheses(self):
        with pytest.raises(ParseError):
            split_top_level("a int, b decimal(10,2")

    def test_strip_comments_keeps_strings(self):
        sql = "SELECT '--not a comment' /* block */ FROM t -- trailing\n;"
        assert strip_sql_comments(sql) == "SELECT '--not a comment'   FROM t \n;"

    def test_split_statements(self):
        script = "CREATE TABLE a (x int); INSERT INTO a VALUES ('1;2');\n-- done\n"
        assert split_statements(script) == ["CREATE TABLE a (x int)", "INSERT INTO a VALUES ('1;2')"]

    def test_sqlserver_go_separator(self):
        script = "CREATE TABLE a (x int)\nGO\nCREATE TABLE b (y int)\nGO\n"
        assert split_statements(script, DialectTag.SQLSERVER) == ["CREATE TABLE a (x int)",
                                                                  "CREATE TABLE b (y int)"]


class TestMySQLParsing:

    def test_admin_table(self, admin_ddl):
        table = parse_create_table(admin_ddl, 'mysql')
        assert table.name == 'admin'
        assert table.dialect is DialectTag.MYSQL
        assert table.column_names == ['admin_id', 'blocked', 'active']
        assert table.primary_key == ('admin_id',)

        admin_id = table.get_column('admin_id')
        assert (admin_id.raw_type, admin_id.length, admin_id.nullable) == ('varchar', 40, False)
        assert admin_id.is_primary_key

        blocked = table.get_column('blocked')
        assert blocked.normalized_type is NormalizedType.BOOLEAN
        assert blocked.default_value == "'0'"
        assert blocked.nullable

    def test_users_table(self, mysql_users_ddl):
        table = DDLParser('mysql').parse(mysql_users_ddl)
        assert table.column_names == ['id', 'email', 'name', 'price', 'status', 'is_admin', 'created_at']

        user_id = table.get_column('id')
        assert user_id.auto_increment
        assert user_id.length == 11

        price = table.get_column('price')
        assert (price.length, price.scale, price.length_spec) == (10, 2, '10,2')
        assert price.default_value == '0.00'

        status = table.get_column('status')
        assert status.normalized_type is NormalizedType.ENUM
        assert status.enum_values == ('active', 'inactive')

        created = table.get_column('created_at')
        assert created.default_value == 'CURRENT_TIMESTAMP'
        assert created.on_update == 'CURRENT_TIMESTAMP'

        assert len(table.constraints) == 1
        unique = table.constraints[0]
        assert (unique.kind, unique.name, unique.columns) == (ConstraintKind.UNIQUE, 'uk_email', ('email',))

    def test_unrelated_statements_ignored(self):
        sql = ("SET NAMES utf8mb4;\nDROP TABLE IF EXISTS `t`;\n"
               "CREATE TABLE `t` (`id` bigint unsigned NOT NULL COMMENT 'row id');\n"
               "INSERT INTO `t` VALUES (1);")
        table = parse_create_table(sql, 'mariadb')
        column = table.get_column('id')
        assert column.unsigned
        assert column.comment == 'row id'
        assert not column.nullable

    def test_backslash_escaped_quote_in_default(self):
        table = parse_create_table(r"CREATE TABLE t (s varchar(10) DEFAULT 'it\'s', n int)", 'mysql')
        assert table.column_names == ['s', 'n']


class TestPostgresParsing:

    def test_orders_table(self, postgres_orders_ddl):
        table = parse_create_table(postgres_orders_ddl, 'postgresql')
        assert table.name == 'orders'
        assert table.primary_key == ('order_id',)

        order_id = table.get_column('order_id')
        assert order_id.auto_increment
        assert order_id.default_value is None
        assert not order_id.nullable

        created = table.get_column('created_at')
        assert created.raw_type == 'timestamp with time zone'
        assert created.normalized_type is NormalizedType.DATETIME

        kinds = [c.kind for c in table.constraints]
        assert kinds == [ConstraintKind.FOREIGN_KEY, ConstraintKind.CHECK]
        fk, check = table.constraints
        assert (fk.columns, fk.ref_table, fk.ref_columns) == (('customer_id',), 'customers', ('id',))
        assert fk.actions == 'ON DELETE CASCADE'
        assert (check.name, check.expression) == ('chk_total', 'total >= 0')

    def test_nextval_default_means_autoincrement(self):
        table = parse_create_table(
            "CREATE TABLE t (id integer DEFAULT nextval('t_id_seq'::regclass) NOT NULL)", 'postgresql')
        column = table.get_column('id')
        assert column.auto_increment
        assert column.default_value is None

    def test_generated_identity(self):
        table = parse_create_table(
            "CREATE TABLE t (id bigint GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY, v text)", 'postgresql')
        assert table.get_column('id').auto_increment
        assert table.primary_key == ('id',)


class TestSQLServerAndSQLite:

    def test_sqlserver_identity_and_max(self):
        ddl = ("CREATE TABLE [dbo].[notes] ([id] int IDENTITY(1,1) NOT NULL, "
               "[body] nvarchar(max) NULL, [flag] bit DEFAULT ((0)), "
               "CONSTRAINT [PK_notes] PRIMARY KEY CLUSTERED ([id] ASC))")
        table = parse_create_table(ddl, 'sqlserver')
        assert table.name == 'notes'
        assert table.primary_key == ('id',)
        assert table.get_column('id').auto_increment
        body = table.get_column('body')
        assert (body.raw_type, body.full_type) == ('nvarchar(max)', 'nvarchar(max)')
        assert table.get_column('flag').default_value == '((0))'

    def test_sqlite_autoincrement(self):
        table = parse_create_table(
            'CREATE TABLE "log" (id INTEGER PRIMARY KEY AUTOINCREMENT, msg TEXT NOT NULL)', 'sqlite')
        assert table.primary_key == ('id',)
        assert table.get_column('id').auto_increment

    def test_key_is_a_column_name_outside_mysql(self):
        table = parse_create_table('CREATE TABLE kv (key varchar(20), value text)', 'sqlite')
        assert table.column_names == ['key', 'value']

    def test_ssms_script(self):
        script = (
            "USE [shop]\nGO\n"
            "/****** Object:  Table [dbo].[customers]    Script Date: 1/2/2024 10:00:00 AM ******/\n"
            "SET ANSI_NULLS ON\nGO\n"
            "CREATE TABLE [dbo].[customers](\n"
            "\t[id] [int] IDENTITY(1,1) NOT NULL,\n"
            "\t[name] [nvarchar](50) COLLATE SQL_Latin1_General_CP1_CI_AS NOT NULL,\n"
            "\t[balance] [decimal](12, 2) NULL,\n"
            "\t[level] [tinyint] NOT NULL,\n"
            "\t[notes] [nvarchar](max) NULL,\n"
            " CONSTRAINT [PK_customers] PRIMARY KEY CLUSTERED \n(\n\t[id] ASC\n)"
            "WITH (PAD_INDEX = OFF, IGNORE_DUP_KEY = OFF) ON [PRIMARY]\n"
            ") ON [PRIMARY] TEXTIMAGE_ON [PRIMARY]\nGO\n"
            "ALTER TABLE [dbo].[customers] ADD  DEFAULT ((0)) FOR [level]\nGO\n"
        )
        table = parse_create_table(script, 'sqlserver')
        assert table.name == 'customers'
        assert table.column_names == ['id', 'name', 'balance', 'level', 'notes']
        assert table.primary_key == ('id',)
        assert table.get_column('id').auto_increment
        name = table.get_column('name')
        assert (name.full_type, name.nullable) == ('nvarchar(50)', False)
        balance = table.get_column('balance')
        assert (balance.length, balance.scale) == (12, 2)
        assert table.get_column('notes').raw_type == 'nvarchar(max)'

    def test_sqlserver_tinyint_is_unsigned(self):
        table = parse_create_table("CREATE TABLE t (level tinyint NOT NULL, n smallint)", 'sqlserver')
        assert table.get_column('level').unsigned
        assert table.get_column('level').normalized_type is NormalizedType.INTEGER
        assert not table.get_column('n').unsigned
        assert not parse_create_table("CREATE TABLE t (level tinyint)", 'mysql').get_column('level').unsigned


class TestOtherTableClauses:

    def test_period_and_exclude_are_column_names(self):
        table = parse_create_table(
            "CREATE TABLE bills (id int, period varchar(7) NOT NULL, exclude int)", 'postgresql')
        assert table.column_names == ['id', 'period', 'exclude']
        assert not table.get_column('period').nullable

    def test_mysql_period_column(self):
        table = parse_create_table(
            "CREATE TABLE `bills` (`id` int NOT NULL, period char(7), PRIMARY KEY (`id`))", 'mysql')
        assert table.column_names == ['id', 'period']

    def test_exclusion_constraint_is_dropped(self):
        table = parse_create_table(
            "CREATE TABLE rooms (id int, during tsrange, EXCLUDE USING gist (during WITH &&))", 'postgresql')
        assert table.column_names == ['id', 'during']
        assert table.constraints == ()

    def test_system_time_period_is_dropped(self):
        table = parse_create_table(
            "CREATE TABLE emp (id int, valid_from datetime2 NOT NULL, valid_to datetime2 NOT NULL, "
            "PERIOD FOR SYSTEM_TIME (valid_from, valid_to))", 'sqlserver')
        assert table.column_names == ['id', 'valid_from', 'valid_to']

    @pytest.mark.parametrize("ddl, dialect", [
        ("CREATE TABLE t (a int, CONSTRAINT c FOOBAR (a))", 'mysql'),
        ("CREATE TABLE t (a int, CONSTRAINT c KEY (a))", 'postgresql'),
    ])
    def test_unrecognized_clause_fails(self, ddl, dialect):
        with pytest.raises(ParseError):
            parse_create_table(ddl, dialect)


class TestPrimaryKeys:

    def test_composite_primary_key(self):
        table = parse_create_table("CREATE TABLE t (a int, b int, PRIMARY KEY (a, b))", 'mysql')
        assert table.primary_key == ('a', 'b')
        assert all(c.is_primary_key for c in table.columns)
        assert all(not c.nullable for c in table.columns)
        assert table.has_composite_primary_key

    def test_multiple_primary_keys_rejected(self):
        with pytest.raises(ParseError):
            parse_create_table("CREATE TABLE t (a int PRIMARY KEY, b int PRIMARY KEY)", 'sqlite')
        with pytest.raises(ParseError):
            parse_create_table("CREATE TABLE t (a int, b int, PRIMARY KEY (a), PRIMARY KEY (b))", 'mysql')

    def test_unknown_primary_key_column(self):
        with pytest.raises(ParseError):
            parse_create_table("CREATE TABLE t (a int, PRIMARY KEY (missing))", 'postgresql')


class TestParseErrors:

    def test_no_create_table(self):
        with pytest.raises(ParseError) as exc_info:
            parse_create_table("SELECT 1;", 'mysql')
        assert exc_info.value.details['statement'] == "SELECT 1;"

    def test_column_without_type(self):
        with pytest.raises(ParseError):
            parse_create_table("CREATE TABLE t (id, name text)", 'sqlite')

    def test_duplicate_column(self):
        with pytest.raises(ParseError):
            parse_create_table("CREATE TABLE t (a int, A text)", 'postgresql')


class TestParseAll:

    def test_every_table_in_order(self, mysql_users_ddl, admin_ddl):
        tables = parse_all(mysql_users_ddl + "\n" + admin_ddl, 'mysql')
        assert [t.name for t in tables] == ['users', 'admin']

    def test_empty_script(self):
        assert parse_all("-- nothing here", 'sqlite') == []
