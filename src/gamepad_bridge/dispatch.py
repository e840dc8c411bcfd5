"""Dispatch facade.

The single entry point the protocol layer calls per tool invocation:
validate a raw batch, record it as the last known state, and hand it to
the outbound transport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from .errors import InvalidRequest
from .models import EventBatch
from .validation import DEFAULT_POLICY, ValidationPolicy, validate_batch

logger = logging.getLogger(__name__)


@runtime_checkable
class EventSink(Protocol):
    """Destination for validated batches (the connection manager)."""

    def send(self, batch: EventBatch) -> bool:
        """Deliver best-effort; return False if the batch was dropped."""
        ...


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a successful submission."""

    events_received: int
    forwarded: bool = False

    @property
    def message(self) -> str:
        if self.events_received == 0:
            return "No events submitted"
        if self.forwarded:
            return "Events validated and sent successfully"
        return "Events validated; input simulation server not connected, events not forwarded"

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "eventsReceived": self.events_received,
            "message": self.message,
        }


class DispatchFacade:
    """Validates submissions and forwards them to the sink.

    Owns the last validated batch. Only ``submit`` writes it.
    """

    def __init__(self, sink: EventSink, policy: ValidationPolicy = DEFAULT_POLICY):
        self._sink = sink
        self._policy = policy
        self._last_batch = EventBatch()

    @property
    def last_batch(self) -> EventBatch:
        """Most recent validated batch (empty until the first submission)."""
        return self._last_batch

    @property
    def policy(self) -> ValidationPolicy:
        return self._policy

    def submit(self, raw_events: Any) -> SubmissionResult:
        """Validate and forward a batch.

        Args:
            raw_events: List of raw ``{type, code, value}`` objects

        Returns:
            SubmissionResult with the number of events accepted

        Raises:
            InvalidRequest: Missing, non-list, or (by policy) empty batch
            ValidationError: The first invalid event; nothing is stored or sent
        """
        if raw_events is None or not isinstance(raw_events, (list, tuple)):
            raise InvalidRequest("Invalid event message format: missing or invalid events array")

        if not raw_events:
            if self._policy.allow_empty_batch:
                logger.debug("Empty batch accepted as a no-op")
                return SubmissionResult(events_received=0)
            raise InvalidRequest("Invalid event message format: events array must not be empty")

        batch = validate_batch(raw_events, self._policy)
        logger.debug(f"Received events: {batch.to_json()}")

        self._last_batch = batch
        forwarded = self._sink.send(batch)
        return SubmissionResult(events_received=len(batch), forwarded=forwarded)

    def submit_arguments(self, arguments: Mapping[str, Any] | None) -> SubmissionResult:
        """Submit from tool-call arguments of the form ``{"events": [...]}``."""
        if not isinstance(arguments, Mapping) or "events" not in arguments:
            raise InvalidRequest("Invalid event message format: missing or invalid events array")
        return self.submit(arguments["events"])
