"""Contact form SQLAlchemy models."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class ContactMessage(Base, TimestampMixin):
    """A message left through the public contact form."""

    __tablename__ = "contact_messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255))
    communication: Mapped[str | None] = mapped_column(String(50))
    """Preferred way to be contacted back (phone, email, ...)."""
    comment: Mapped[str | None] = mapped_column(Text)
