# ticketdesk/core/errors.py


class TicketDeskError(Exception):
    """Base class for failures the request layer maps to a response."""


class TicketNotFound(TicketDeskError):
    def __init__(self, ticket_id: str):
        super().__init__(f"ticket {ticket_id!r} not found")
        self.ticket_id = ticket_id


class ConstraintViolation(TicketDeskError):
    """A write was rejected by a uniqueness or integrity constraint."""


class BackendError(TicketDeskError):
    """The database failed while executing an operation."""


class StoreConnectionError(BackendError):
    """The database could not be reached; the request may be retried."""


__all__ = [
    "TicketDeskError",
    "TicketNotFound",
    "ConstraintViolation",
    "BackendError",
    "StoreConnectionError",
]
