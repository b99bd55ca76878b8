"""Database models package for the reminder service."""

from .base import Base
from .customer import Customer
from .reminder import Reminder

__all__ = [
    "Base",
    "Customer",
    "Reminder",
]
