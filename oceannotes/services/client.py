"""HTTP client for the remote notes service."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Final

import httpx

from oceannotes.config import DEFAULT_TIMEOUT
from oceannotes.exc import Cancelled, RequestError, UnreachableError
from oceannotes.models.note import Note, NotePatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Health:
    """Health record reported by ``GET /health``."""

    #: The reported status, ``"ok"`` when healthy.
    status: str

    @property
    def ok(self) -> bool:
        """Whether the service reports itself healthy."""
        return self.status == "ok"


class CancelToken:
    """
    Cooperative cancellation token for a single request.

    Cancelling is idempotent.  Code awaiting :meth:`wait` wakes up as soon as
    :meth:`cancel` is called.
    """

    def __init__(self) -> None:
        #: Set once the token is cancelled.
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Cancel the token."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether :meth:`cancel` has been called."""
        return self._event.is_set()

    async def wait(self) -> None:
        """Wait until the token is cancelled."""
        await self._event.wait()


class NotesClient:
    """
    Asynchronous client for the notes REST API.

    The client performs no retries; every failure is translated into one of
    the exceptions in :mod:`oceannotes.exc` and raised to the caller.

    Args:
        base_url: Service base URL without trailing slash

    Keyword Args:
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport, mostly for tests

    """

    #: Path of the health endpoint.
    HEALTH_PATH: Final[str] = "/health"
    #: Path of the notes collection.
    NOTES_PATH: Final[str] = "/api/notes"

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        #: The service base URL.
        self.base_url = base_url.rstrip("/")
        #: The underlying HTTP client.
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    def _note_path(self, note_id: int) -> str:
        return f"{self.NOTES_PATH}/{note_id}"

    async def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        token: CancelToken | None = None,
    ) -> httpx.Response:
        """
        Send a request, translating httpx failures.

        If ``token`` is given the request races against it: when the token
        is cancelled first, the request is abandoned and :class:`Cancelled`
        is raised.

        Args:
            method: HTTP method
            path: Path relative to :attr:`base_url`

        Keyword Args:
            json: Optional JSON body
            token: Optional cancellation token

        Raises:
            Cancelled: ``token`` was cancelled before the response arrived
            UnreachableError: The service could not be reached, or the
                exchange failed below the HTTP status level

        Returns:
            The response, whatever its status

        """
        if token is not None and token.cancelled:
            raise Cancelled(f"{method} {path}")
        logger.debug(f"{method} {self.base_url}{path}")
        try:
            request = self._http.build_request(method, path, json=json)
            if token is None:
                response = await self._http.send(request)
            else:
                response = await self._send_cancellable(request, token)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning(f"{method} {self.base_url}{path} failed: {e}")
            raise UnreachableError(self.base_url, e) from e
        logger.debug(f"{method} {self.base_url}{path} -> {response.status_code}")
        return response

    async def _send_cancellable(
        self, request: httpx.Request, token: CancelToken
    ) -> httpx.Response:
        send_task = asyncio.ensure_future(self._http.send(request))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()
        if send_task.cancelled() or token.cancelled:
            if send_task.done() and not send_task.cancelled():
                # Consume the result so a late transport error is not reported
                # as never retrieved.
                send_task.exception()
            raise Cancelled(f"{request.method} {request.url.path}")
        return send_task.result()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """
        Extract a human-readable message from an error response.

        Args:
            response: Non-2xx response

        Returns:
            The body's ``detail`` or ``message`` field, or
            ``"<status> <reason phrase>"``

        """
        fallback = f"{response.status_code} {response.reason_phrase}".strip()
        try:
            data = response.json()
        except ValueError:
            return fallback
        if not isinstance(data, dict):
            return fallback
        for key in ("detail", "message"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
        return fallback

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        raise RequestError(response.status_code, self._error_message(response))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            msg = f"{response.status_code} Invalid JSON in response body"
            raise RequestError(response.status_code, msg) from e

    def _decode_note(self, response: httpx.Response) -> Note:
        try:
            return Note.from_json(self._decode(response))
        except (ValueError, TypeError) as e:
            raise RequestError(response.status_code, str(e)) from e

    async def check_health(self) -> Health:
        """
        Check service health.

        Raises:
            UnreachableError: The service could not be reached or did not
                answer with a 2xx status

        Returns:
            The reported health record

        """
        response = await self._send("GET", self.HEALTH_PATH)
        if not response.is_success:
            raise UnreachableError(
                self.base_url, f"health check failed: {response.status_code}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise UnreachableError(self.base_url, e) from e
        status = data.get("status") if isinstance(data, dict) else None
        return Health(status=str(status or "unknown"))

    async def list_all(self, token: CancelToken | None = None) -> list[Note]:
        """
        List every note, in server order.

        Keyword Args:
            token: Cancellation token; cancelling it abandons the request

        Raises:
            Cancelled: ``token`` was cancelled before the response arrived
            RequestError: The service answered with a non-2xx status
            UnreachableError: The service could not be reached

        Returns:
            The notes

        """
        response = await self._send("GET", self.NOTES_PATH, token=token)
        self._raise_for_status(response)
        data = self._decode(response)
        if not isinstance(data, list):
            msg = f"Expected a list of notes, got {type(data).__name__}"
            raise RequestError(response.status_code, msg)
        try:
            return [Note.from_json(item) for item in data]
        except (ValueError, TypeError) as e:
            raise RequestError(response.status_code, str(e)) from e

    async def get(self, note_id: int) -> Note:
        """
        Fetch a single note.

        Args:
            note_id: ID of the note

        Returns:
            The note

        """
        response = await self._send("GET", self._note_path(note_id))
        self._raise_for_status(response)
        return self._decode_note(response)

    async def create(self, title: str, content: str = "") -> Note:
        """
        Create a note.

        Args:
            title: Note title
            content: Note body

        Raises:
            RequestError: The service answered with a non-2xx status
            UnreachableError: The service could not be reached

        Returns:
            The created note, with its server-assigned ID

        """
        response = await self._send(
            "POST", self.NOTES_PATH, json={"title": title, "content": content}
        )
        self._raise_for_status(response)
        return self._decode_note(response)

    async def update(self, note_id: int, patch: NotePatch) -> Note:
        """
        Update a note.

        Args:
            note_id: ID of the note
            patch: Fields to change

        Returns:
            The updated note as stored by the service

        """
        response = await self._send(
            "PUT", self._note_path(note_id), json=patch.as_payload()
        )
        self._raise_for_status(response)
        return self._decode_note(response)

    async def remove(self, note_id: int) -> bool:
        """
        Delete a note.

        Any 2xx status, including ``204 No Content``, counts as success.

        Args:
            note_id: ID of the note

        Returns:
            True

        """
        response = await self._send("DELETE", self._note_path(note_id))
        self._raise_for_status(response)
        return True
