"""SQLAlchemy models for the Taxdesk application."""

from src.models.base import Base
from src.models.contact import ContactMessage
from src.models.visitor import VISIT_COUNTER_ID, VisitCounter, Visitor

__all__ = [
    "Base",
    "ContactMessage",
    "Visitor",
    "VisitCounter",
    "VISIT_COUNTER_ID",
]
