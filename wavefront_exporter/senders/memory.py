"""In-memory sender for testing and development."""

from __future__ import annotations

from typing import TYPE_CHECKING, override

from .base import WavefrontSender

if TYPE_CHECKING:
    from ..core.types import DeliveryRecord


class InMemorySender(WavefrontSender):
    """
    Stores delivery records in memory - useful for testing and development.

    Provides helper methods to query records by span name or tag.
    """

    def __init__(self) -> None:
        self._records: list[DeliveryRecord] = []
        self.flush_count = 0
        self.closed = False

    def __repr__(self) -> str:
        return f"InMemorySender(records={len(self._records)})"

    @property
    @override
    def name(self) -> str:
        return "in-memory"

    @property
    @override
    def client_id(self) -> str:
        return "in-memory"

    @override
    def send_span(self, record: "DeliveryRecord") -> None:
        if self.closed:
            raise ConnectionError("In-memory sender is closed")
        self._records.append(record)

    def get_all_records(self) -> list["DeliveryRecord"]:
        """Get all stored records."""
        return list(self._records)

    def get_records_by_name(self, name: str) -> list["DeliveryRecord"]:
        """Get records with an exact span name."""
        return [record for record in self._records if record.name == name]

    def get_records_with_tag(self, key: str, value: str | None = None) -> list["DeliveryRecord"]:
        """Get records carrying a tag key, optionally with a specific value."""
        return [
            record
            for record in self._records
            if any(k == key and (value is None or v == value) for k, v in record.tags)
        ]

    def clear(self) -> None:
        """Clear all stored records."""
        self._records.clear()

    @override
    def flush(self) -> None:
        self.flush_count += 1

    @override
    def close(self) -> None:
        self.closed = True
