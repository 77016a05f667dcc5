"""Per-call orchestration of a batch export."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from .types import ExportResultCode, SpanRecord

if TYPE_CHECKING:
    from ..senders.base import WavefrontSender
    from .translator import SpanTranslator

logger = logging.getLogger(__name__)


class SpanState(Enum):
    """Progress of one span through an export session."""

    PENDING = "pending"
    TRANSLATING = "translating"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class SpanOutcome:
    """What happened to one span of the batch."""

    name: str
    state: SpanState = SpanState.PENDING
    error: Exception | None = None


class ExportSession:
    """
    Exports one batch of spans, one span at a time, in input order.

    - A malformed identifier aborts the whole batch (``InvalidIdentifier`` is
      raised from ``run``).
    - A transport fault (any ``OSError``) is logged and turns the batch
      result into ``FAILED_RETRYABLE``; the remaining spans are still sent.
    - Any other fault is logged and the span is dropped without changing the
      batch result.

    Spans that were sent before a failure are not undone.
    """

    def __init__(self, translator: "SpanTranslator", sender: "WavefrontSender") -> None:
        self._translator = translator
        self._sender = sender
        self.outcomes: list[SpanOutcome] = []
        self.result: ExportResultCode | None = None

    def run(self, spans: Sequence[SpanRecord]) -> ExportResultCode:
        self.outcomes = [SpanOutcome(name=span.name) for span in spans]
        result = ExportResultCode.SUCCESS

        for span, outcome in zip(spans, self.outcomes):
            logger.debug(f"Exporting span {span.name} via {self._sender.client_id}")

            outcome.state = SpanState.TRANSLATING
            record = self._translator.translate(span)

            outcome.state = SpanState.SENDING
            try:
                self._sender.send_span(record)
            except OSError as e:
                logger.warning("Error while sending span", exc_info=e)
                outcome.state = SpanState.FAILED
                outcome.error = e
                result = ExportResultCode.FAILED_RETRYABLE
                continue
            except Exception as e:
                logger.warning("Error while sending span", exc_info=e)
                outcome.state = SpanState.FAILED
                outcome.error = e
                continue

            outcome.state = SpanState.SENT

        self.result = result
        return result

    @property
    def sent_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.state is SpanState.SENT)

    @property
    def failed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.state is SpanState.FAILED)
