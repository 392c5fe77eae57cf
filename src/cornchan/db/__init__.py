"""Backing store configuration and utilities."""

from .store import KeyValueStore, create_redis, escape_glob, open_store

__all__ = ["KeyValueStore", "create_redis", "escape_glob", "open_store"]
