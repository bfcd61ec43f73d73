# ticketdesk/ticket/dependencies.py
from fastapi import Request

from ticketdesk.core.config import Settings
from ticketdesk.ticket.ids import IdGenerator
from ticketdesk.ticket.notify import WebhookNotifier
from ticketdesk.ticket.store import TicketStore


def get_store(request: Request) -> TicketStore:
    return request.app.state.store


def get_id_generator(request: Request) -> IdGenerator:
    return request.app.state.id_generator


def get_notifier(request: Request) -> WebhookNotifier:
    return request.app.state.notifier


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
