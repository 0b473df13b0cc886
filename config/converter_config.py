#!/usr/bin/env python3
"""
Converter Configuration for SQLShift
Dialects, batch sizing and DDL emission switches, overridable from the environment
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from sqlshift.ddl_emitter import EmitOptions, QUOTE_MODES
from sqlshift.dialects import DialectTag, normalize_dialect
from sqlshift.errors import UnsupportedDialectError
from utils.helpers import read_json_file

ENV_PREFIX = 'SQLSHIFT_'
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
TRUE_VALUES = ('true', '1', 'yes', 'on')


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass
class ConverterConfig:
    """SQLShift configuration settings"""

    # Dialects
    source_dialect: str = "mysql"
    target_dialect: str = "postgresql"

    # Data dump
    batch_size: int = 100

    # DDL emission
    engine: str = "InnoDB"
    charset: str = "utf8mb4"
    create_if_not_exists: bool = False
    drop_if_exists: bool = False
    comment_out_drop: bool = True
    quote_identifiers: str = "auto"

    # Runtime settings
    log_level: str = "INFO"

    def __post_init__(self):
        """Apply environment overrides, then validate"""
        self.source_dialect = os.environ.get(ENV_PREFIX + 'SOURCE_DIALECT', self.source_dialect)
        self.target_dialect = os.environ.get(ENV_PREFIX + 'TARGET_DIALECT', self.target_dialect)
        self.engine = os.environ.get(ENV_PREFIX + 'ENGINE', self.engine)
        self.charset = os.environ.get(ENV_PREFIX + 'CHARSET', self.charset)
        self.quote_identifiers = os.environ.get(ENV_PREFIX + 'QUOTE_IDENTIFIERS', self.quote_identifiers)
        self.log_level = os.environ.get(ENV_PREFIX + 'LOG_LEVEL', self.log_level)

        batch_size = os.environ.get(ENV_PREFIX + 'BATCH_SIZE')
        if batch_size is not None:
            try:
                self.batch_size = int(batch_size)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}BATCH_SIZE must be an integer, got {batch_size!r}") from e

        self.create_if_not_exists = _env_flag('CREATE_IF_NOT_EXISTS', self.create_if_not_exists)
        self.drop_if_exists = _env_flag('DROP_IF_EXISTS', self.drop_if_exists)
        self.comment_out_drop = _env_flag('COMMENT_OUT_DROP', self.comment_out_drop)

        self.validate()

    def validate(self):
        """Raise ValueError for any setting outside its allowed values"""
        for name in ('source_dialect', 'target_dialect'):
            try:
                normalize_dialect(getattr(self, name))
            except UnsupportedDialectError as e:
                raise ValueError(f"{name}: {e.message}") from e
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.quote_identifiers not in QUOTE_MODES:
            raise ValueError(f"quote_identifiers must be one of {QUOTE_MODES}, got {self.quote_identifiers!r}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")

    @classmethod
    def from_file(cls, path: str) -> 'ConverterConfig':
        """Load settings from a JSON file; environment variables still take precedence.

        Raises:
            FileOperationError: If the file cannot be read or parsed
            ValueError: For unknown keys or invalid values
        """
        data = read_json_file(path)
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys in {path}: {', '.join(unknown)}")
        return cls(**data)

    @property
    def source(self) -> DialectTag:
        return normalize_dialect(self.source_dialect)

    @property
    def target(self) -> DialectTag:
        return normalize_dialect(self.target_dialect)

    def to_emit_options(self) -> EmitOptions:
        """Build the emitter options described by this configuration"""
        return EmitOptions(
            create_if_not_exists=self.create_if_not_exists,
            drop_if_exists=self.drop_if_exists,
            comment_out_drop=self.comment_out_drop,
            engine=self.engine,
            charset=self.charset,
            quote_identifiers=self.quote_identifiers,
        )

    def configure_logging(self, level: Optional[str] = None):
        """Install a basic root handler for host applications that have none"""
        logging.basicConfig(level=getattr(logging, (level or self.log_level).upper()), format=LOG_FORMAT)

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration as a plain dict (side-effect free)"""
        return {
            'source_dialect': self.source.value,
            'target_dialect': self.target.value,
            'batch_size': self.batch_size,
            'engine': self.engine,
            'charset': self.charset,
            'create_if_not_exists': self.create_if_not_exists,
            'drop_if_exists': self.drop_if_exists,
            'comment_out_drop': self.comment_out_drop,
            'quote_identifiers': self.quote_identifiers,
            'log_level': self.log_level,
        }
