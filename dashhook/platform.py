"""
Read-only view of the triggering incident record.

The pipeline only talks to ``IncidentRecord``; ``SnapshotRecord`` implements it
over an ``IncidentSnapshot`` posted by the platform, and tests substitute
their own in-memory fakes.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from dashhook.models import FieldValue, IncidentSnapshot


class RelationQueryError(RuntimeError):
    """A related-record lookup failed; the invocation must not send anything."""


@runtime_checkable
class IncidentRecord(Protocol):
    sys_id: str
    operation: str                       # insert / update

    def get_field(self, name: str) -> Optional[str]:
        """Raw stored value (sys_id for reference fields)."""
        ...

    def get_display_value(self, name: str) -> Optional[str]:
        """Human-readable value (choice label, referenced record name)."""
        ...

    def changes(self, name: str) -> bool:
        """True when this operation modified the field."""
        ...

    def journal_entry(self, name: str) -> Optional[str]:
        """Most recent rendered journal entry for a journal field, if any."""
        ...

    async def query_related(self, table: str, filters: dict[str, str]) -> list[dict[str, Optional[str]]]:
        """Rows of ``table`` whose columns equal every item of ``filters``."""
        ...


class SnapshotRecord:
    def __init__(self, snapshot: IncidentSnapshot) -> None:
        self._snapshot = snapshot
        self.sys_id = snapshot.sys_id
        self.operation = snapshot.operation

    def _field(self, fields: Optional[dict[str, FieldValue]], name: str) -> Optional[FieldValue]:
        if not fields:
            return None
        return fields.get(name)

    def get_field(self, name: str) -> Optional[str]:
        fv = self._field(self._snapshot.current, name)
        return fv.value if fv else None

    def get_display_value(self, name: str) -> Optional[str]:
        fv = self._field(self._snapshot.current, name)
        if fv is None:
            return None
        return fv.display_value if fv.display_value is not None else fv.value

    def changes(self, name: str) -> bool:
        now = self.get_field(name) or ""
        if self._snapshot.previous is None:
            return bool(now)
        before = self._field(self._snapshot.previous, name)
        return now != ((before.value if before else None) or "")

    def journal_entry(self, name: str) -> Optional[str]:
        entries = [e for e in self._snapshot.journal if e.element == name]
        if not entries:
            return None
        return max(entries, key=lambda e: e.created_on).value

    async def query_related(self, table: str, filters: dict[str, str]) -> list[dict[str, Optional[str]]]:
        try:
            rows = self._snapshot.relations[table]
        except KeyError:
            return []
        try:
            return [row for row in rows if all(row[k] == v for k, v in filters.items())]
        except KeyError as exc:
            raise RelationQueryError(f"{table} rows have no column {exc.args[0]!r}") from exc
