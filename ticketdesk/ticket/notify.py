# ticketdesk/ticket/notify.py
from typing import Any, Callable

import httpx
import tenacity
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ticketdesk.core.logging import get_logger
from ticketdesk.ticket.schemas import Ticket

logger = get_logger(__name__)

_DELIVERY_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class WebhookNotifier:
    """Posts the "ticket created" message back to the slash command's response URL.

    Delivery is best effort: failures are logged and never raised, since the
    response to the original request has already been sent.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        max_attempts: int = 1,
        backoff: float = 0.5,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = tenacity.nap.sleep,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self.backoff = backoff
        self._transport = transport
        self._sleep = sleep

    def ticket_url(self, ticket_id: str) -> str:
        return f"{self.base_url}ticket/{ticket_id}"

    def build_payload(self, ticket: Ticket) -> dict[str, Any]:
        return {
            "response_type": "in_channel",
            "text": f'Ticket "{ticket.title}" created by <@{ticket.user}>.',
            "attachments": [{"text": self.ticket_url(ticket.id)}],
        }

    def _retrying(self, ticket: Ticket) -> Retrying:
        def log_failure(state: RetryCallState) -> None:
            logger.warning(
                "webhook for ticket %s failed (attempt %d/%d): %s",
                ticket.id,
                state.attempt_number,
                self.max_attempts,
                state.outcome.exception(),
            )

        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff),
            retry=retry_if_exception_type(_DELIVERY_ERRORS),
            before_sleep=log_failure,
            sleep=self._sleep,
        )

    @staticmethod
    def _post(client: httpx.Client, callback_url: str, payload: dict[str, Any]) -> None:
        response = client.post(callback_url, json=payload)
        response.raise_for_status()

    def dispatch(self, callback_url: str, ticket: Ticket) -> bool:
        payload = self.build_payload(ticket)
        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            try:
                self._retrying(ticket)(self._post, client, callback_url, payload)
            except RetryError as exc:
                logger.error(
                    "giving up on webhook for ticket %s after %d attempt(s): %s",
                    ticket.id,
                    self.max_attempts,
                    exc.last_attempt.exception(),
                )
                return False
        logger.info("notified %s about ticket %s", callback_url, ticket.id)
        return True
