"""
Utilities - Connection error translation and keyring password storage
"""

from .connection_error_handler import ConnectionErrorInfo, parse_connection_error
from .password_store import PasswordStore

__all__ = ["ConnectionErrorInfo", "parse_connection_error", "PasswordStore"]
