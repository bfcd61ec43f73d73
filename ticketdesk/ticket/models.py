# ticketdesk/ticket/models.py
from sqlalchemy import Column, Text
from ticketdesk.core.database import Base


class TicketRow(Base):
    __tablename__ = "tickets"

    id = Column(Text, primary_key=True)
    title = Column(Text)
    description = Column(Text)
    created = Column("createdAt", Text)
    user = Column("createdBy", Text)
