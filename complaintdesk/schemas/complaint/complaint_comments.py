"""
Staff notes and the owner/staff message thread.
"""

from typing import Optional

from pydantic import Field

from complaintdesk.schemas.common.base import BaseCreateSchema, BaseResponseSchema

__all__ = [
    "NoteCreate",
    "MessageCreate",
    "MessageResponse",
]


class NoteCreate(BaseCreateSchema):
    note: str = Field(..., max_length=5000)


class MessageCreate(BaseCreateSchema):
    message: str = Field(..., max_length=5000)


class MessageResponse(BaseResponseSchema):
    complaint_id: str
    sender_id: str
    sender_name: Optional[str] = None
    message: str
    is_admin: bool

    @classmethod
    def from_model(cls, message) -> "MessageResponse":
        return cls(
            id=message.id,
            created_at=message.created_at,
            complaint_id=message.complaint_id,
            sender_id=message.sender_id,
            sender_name=message.sender.name if message.sender else None,
            message=message.message,
            is_admin=message.is_admin,
        )
