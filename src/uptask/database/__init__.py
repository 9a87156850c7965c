"""
Database module for UpTask backend
"""

from .connection import create_schema, get_async_engine, get_async_session, init_database

__all__ = ["create_schema", "get_async_engine", "get_async_session", "init_database"]
