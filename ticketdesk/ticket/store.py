# ticketdesk/ticket/store.py
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ticketdesk.core.errors import BackendError, ConstraintViolation, StoreConnectionError, TicketNotFound
from ticketdesk.core.logging import get_logger
from ticketdesk.ticket.models import TicketRow
from ticketdesk.ticket.schemas import SUMMARY_COLUMNS, Ticket, TicketColumn, TicketSummary

logger = get_logger(__name__)

# projection names -> mapped attributes; nothing else ever reaches a SELECT list
_COLUMNS = {
    TicketColumn.ID: TicketRow.id,
    TicketColumn.USER: TicketRow.user,
    TicketColumn.TITLE: TicketRow.title,
    TicketColumn.DESCRIPTION: TicketRow.description,
    TicketColumn.CREATED: TicketRow.created,
}


class TicketStore:
    """CRUD over the tickets table.

    Each call opens its own session and closes it before returning, so the
    store keeps no state between requests beyond the session factory.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, op: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except IntegrityError as exc:
            logger.warning("%s rejected by constraint: %s", op, exc.orig)
            raise ConstraintViolation(str(exc.orig)) from exc
        except (OperationalError, InterfaceError) as exc:
            logger.error("%s could not reach the database: %s", op, exc.orig)
            raise StoreConnectionError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            logger.exception("%s failed", op)
            raise BackendError(str(exc)) from exc
        finally:
            db.close()

    def create(self, ticket: Ticket) -> int:
        with self._session("create") as db:
            db.add(
                TicketRow(
                    id=ticket.id,
                    title=ticket.title,
                    description=ticket.description,
                    created=ticket.created,
                    user=ticket.user,
                )
            )
            db.commit()
        logger.info("created ticket %s for %s", ticket.id, ticket.user)
        # a single-row insert that flushed without an IntegrityError wrote exactly one row
        return 1

    def get_by_id(self, ticket_id: str) -> Ticket | None:
        stmt = select(TicketRow.title, TicketRow.description, TicketRow.user, TicketRow.created).where(
            TicketRow.id == ticket_id
        )
        with self._session("get_by_id") as db:
            row = db.execute(stmt).first()
        if row is None:
            return None
        title, description, user, created = row
        # the key is not read back, it is the one we were asked for
        return Ticket(id=ticket_id, title=title, description=description, user=user, created=created)

    def update(self, ticket_id: str, title: str, description: str) -> int:
        stmt = update(TicketRow).where(TicketRow.id == ticket_id).values(title=title, description=description)
        with self._session("update") as db:
            rowcount = db.execute(stmt).rowcount
            db.commit()
        if rowcount == 0:
            raise TicketNotFound(ticket_id)
        return rowcount

    def list_all(self, columns: Sequence[TicketColumn] | None = None) -> list[TicketSummary]:
        wanted = list(dict.fromkeys(TicketColumn(c) for c in columns)) if columns else list(SUMMARY_COLUMNS)
        stmt = select(*[_COLUMNS[c] for c in wanted]).order_by(TicketRow.created, TicketRow.id)
        with self._session("list_all") as db:
            rows = db.execute(stmt).all()
        return [TicketSummary(**{c.value: value for c, value in zip(wanted, row)}) for row in rows]
