"""SQLShift configuration"""

from config.converter_config import ConverterConfig

__all__ = ['ConverterConfig']
