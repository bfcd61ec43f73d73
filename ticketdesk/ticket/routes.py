# ticketdesk/ticket/routes.py
from fastapi import APIRouter, BackgroundTasks, Depends, Form, HTTPException, Query

from ticketdesk.core.config import Settings
from ticketdesk.core.errors import ConstraintViolation
from ticketdesk.core.logging import get_logger
from ticketdesk.ticket.dependencies import get_app_settings, get_id_generator, get_notifier, get_store
from ticketdesk.ticket.ids import IdGenerator, format_timestamp, utcnow
from ticketdesk.ticket.notify import WebhookNotifier
from ticketdesk.ticket.schemas import Ticket, TicketColumn, TicketCreated, TicketSummary
from ticketdesk.ticket.store import TicketStore

router = APIRouter(tags=["Tickets"])
logger = get_logger(__name__)


@router.post("/ticket", response_model=TicketCreated)
def create(
    background_tasks: BackgroundTasks,
    user_id: str = Form(..., min_length=1),
    text: str = Form(..., min_length=1),
    response_url: str = Form(..., min_length=1),
    store: TicketStore = Depends(get_store),
    ids: IdGenerator = Depends(get_id_generator),
    notifier: WebhookNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
):
    created_at = utcnow()
    # a content-derived id would only collide again
    attempts = 1 if ids.deterministic else settings.ID_CREATE_ATTEMPTS

    for attempt in range(1, attempts + 1):
        ticket = Ticket(
            id=ids.generate(user_id, text, created_at),
            user=user_id,
            title=text,
            description=settings.DEFAULT_DESCRIPTION,
            created=format_timestamp(created_at),
        )
        try:
            store.create(ticket)
            break
        except ConstraintViolation:
            if attempt == attempts:
                raise
            logger.warning("ticket id %s already taken, regenerating", ticket.id)

    # runs after the response is sent
    background_tasks.add_task(notifier.dispatch, response_url, ticket)
    return TicketCreated(id=ticket.id, url=notifier.ticket_url(ticket.id))


@router.get("/tickets", response_model=list[TicketSummary], response_model_exclude_unset=True)
def list_all(
    column: list[TicketColumn] | None = Query(default=None, description="Columns to return, default id and title"),
    store: TicketStore = Depends(get_store),
):
    return store.list_all(column)


@router.get("/ticket/{ticket_id}", response_model=Ticket)
def get(ticket_id: str, store: TicketStore = Depends(get_store)):
    ticket = store.get_by_id(ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.post("/ticket/{ticket_id}", response_model=Ticket)
def update(
    ticket_id: str,
    title: str = Form(..., min_length=1),
    description: str = Form(...),
    store: TicketStore = Depends(get_store),
):
    store.update(ticket_id, title, description)
    updated = store.get_by_id(ticket_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return updated
