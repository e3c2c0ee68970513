"""
ldcshop Core
============

Core utilities and shared functionality for ldcshop modules.
"""

from .config import Config, get_config_value
from .database import Database, SchemaCapabilities, db
from .logging_service import LoggingService, db_log, logger

__all__ = ['Config', 'get_config_value', 'Database', 'SchemaCapabilities', 'db',
           'LoggingService', 'db_log', 'logger']
