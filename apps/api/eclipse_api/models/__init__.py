"""Persistence models package."""

from .user import UserRecord

__all__ = ["UserRecord"]
