"""
Configuration - Connection profiles
"""

from .connections import get_connection_profile, load_connection_profiles

__all__ = ["load_connection_profiles", "get_connection_profile"]
