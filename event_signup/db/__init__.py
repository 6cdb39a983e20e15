"""Relational store access: engine/session management and ORM models."""

from event_signup.db.database import Base, Database, get_db_session

__all__ = ["Base", "Database", "get_db_session"]
