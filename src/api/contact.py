"""Contact form API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_db, verify_admin_api_key
from src.core.logging import get_logger
from src.models.contact import ContactMessage

logger = get_logger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])

THANK_YOU_MESSAGE = "Thank you for your message"


class ContactCreateRequest(BaseModel):
    """Payload posted by the contact form."""

    name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    communication: str | None = Field(default=None, max_length=50)
    comment: str | None = Field(default=None, max_length=5000)


class ContactCreateResponse(BaseModel):
    id: int
    message: str


class ContactMessageResponse(BaseModel):
    """Stored contact message."""

    id: int
    name: str
    phone: str | None
    email: str | None
    communication: str | None
    comment: str | None
    created_at: datetime


class ContactListResponse(BaseModel):
    """Paginated contact message list."""

    items: list[ContactMessageResponse]
    total: int
    limit: int
    offset: int


def _clean(value: str | None) -> str | None:
    """Strip whitespace; blank strings are stored as NULL."""
    if value is None:
        return None
    return value.strip() or None


@router.post(
    "",
    response_model=ContactCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_contact_message(
    payload: ContactCreateRequest,
    db: AsyncSession = Depends(get_db),
) -> ContactCreateResponse:
    """Store a contact form submission."""
    message = ContactMessage(
        name=payload.name.strip(),
        phone=_clean(payload.phone),
        email=_clean(payload.email),
        communication=_clean(payload.communication),
        comment=_clean(payload.comment),
    )
    db.add(message)
    await db.flush()
    logger.info("contact_message_saved", contact_message_id=message.id)
    return ContactCreateResponse(id=message.id, message=THANK_YOU_MESSAGE)


@router.get(
    "",
    response_model=ContactListResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def list_contact_messages(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> ContactListResponse:
    """List contact messages in submission order (admin only)."""
    total_result = await db.execute(select(func.count(ContactMessage.id)))
    total = int(total_result.scalar() or 0)

    messages_result = await db.execute(
        select(ContactMessage).order_by(ContactMessage.id).limit(limit).offset(offset)
    )
    messages = messages_result.scalars().all()

    return ContactListResponse(
        items=[
            ContactMessageResponse(
                id=message.id,
                name=message.name,
                phone=message.phone,
                email=message.email,
                communication=message.communication,
                comment=message.comment,
                created_at=message.created_at,
            )
            for message in messages
        ],
        total=total,
        limit=limit,
        offset=offset,
    )
