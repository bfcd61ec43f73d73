# ticketdesk/ticket/schemas.py
from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_DESCRIPTION = "Describe ticket here"


class TicketColumn(str, Enum):
    ID = "id"
    USER = "user"
    TITLE = "title"
    DESCRIPTION = "description"
    CREATED = "created"


SUMMARY_COLUMNS = (TicketColumn.ID, TicketColumn.TITLE)


class Ticket(BaseModel):
    id: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = DEFAULT_DESCRIPTION
    created: str

    model_config = {"from_attributes": True}

    # rows written outside the app may carry NULL here
    @field_validator("description", mode="before")
    @classmethod
    def _placeholder_for_missing(cls, value):
        return DEFAULT_DESCRIPTION if value is None else value


class TicketSummary(BaseModel):
    id: str | None = None
    user: str | None = None
    title: str | None = None
    description: str | None = None
    created: str | None = None


class TicketCreated(BaseModel):
    id: str
    url: str
