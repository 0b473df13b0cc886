#!/usr/bin/env python3
"""
SQLShift Test Configuration - PyTest Configuration and Fixtures

Shared DDL fixtures for the parser, emitter and converter tests.
"""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlshift.dialects import DialectTag
from sqlshift.schema_ir import ColumnDef, SchemaTable

ADMIN_DDL = (
    "CREATE TABLE IF NOT EXISTS `admin` (`admin_id` varchar(40) NOT NULL, "
    "`blocked` tinyint(1) DEFAULT '0', `active` tinyint(1) DEFAULT '1', "
    "PRIMARY KEY (`admin_id`)) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;"
)

MYSQL_USERS_DDL = """
-- users table
CREATE TABLE `users` (
  `id` int(11) NOT NULL AUTO_INCREMENT,
  `email` varchar(255) NOT NULL,
  `name` varchar(100) DEFAULT NULL,
  `price` decimal(10,2) NOT NULL DEFAULT 0.00,
  `status` enum('active','inactive') NOT NULL DEFAULT 'active',
  `is_admin` tinyint(1) NOT NULL DEFAULT '0',
  `created_at` timestamp NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
  PRIMARY KEY (`id`),
  UNIQUE KEY `uk_email` (`email`),
  KEY `idx_name` (`name`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""

POSTGRES_ORDERS_DDL = """
CREATE TABLE public.orders (
    order_id bigserial PRIMARY KEY,
    customer_id integer NOT NULL REFERENCES customers (id) ON DELETE CASCADE,
    total numeric(12,2) DEFAULT '0'::numeric,
    note text DEFAULT 'n/a'::character varying,
    paid boolean DEFAULT false,
    created_at timestamp with time zone DEFAULT now(),
    CONSTRAINT chk_total CHECK (total >= 0)
);
"""


@pytest.fixture
def admin_ddl():
    return ADMIN_DDL


@pytest.fixture
def mysql_users_ddl():
    return MYSQL_USERS_DDL


@pytest.fixture
def postgres_orders_ddl():
    return POSTGRES_ORDERS_DDL


@pytest.fixture
def items_table():
    """Hand-built MySQL table with an autoincrement key"""
    return SchemaTable(
        name='items',
        columns=(
            ColumnDef('id', 'int', auto_increment=True, nullable=False),
            ColumnDef('title', 'varchar', length=80, nullable=False),
            ColumnDef('active', 'tinyint', length=1, default_value="'1'"),
            ColumnDef('price', 'decimal', length=10, scale=2),
        ),
        primary_key=('id',),
        dialect=DialectTag.MYSQL,
    )
