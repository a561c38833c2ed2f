"""Pending edits layered over persisted records.

The progress and followup tables let staff edit many cells before saving.
``EditOverlay`` keeps the two layers apart: ``committed`` holds what the
database last returned, ``drafts`` holds unsaved field values. Reads prefer
the draft. Nothing in here touches the database; the save services read
``pending_edits()`` and call ``commit()`` with what they wrote back.
"""

from typing import Any, Iterable, Mapping


def _key(entry_id) -> str:
    # Ids arrive as UUIDs from the ORM and as strings from JSON bodies
    return str(entry_id)


class EditOverlay:
    def __init__(self, committed: Iterable[Mapping] = ()):
        self._committed: dict[str, dict] = {}
        self._drafts: dict[str, dict] = {}
        self._load(committed)

    def _load(self, records: Iterable[Mapping]) -> None:
        for record in records:
            if record.get("id") is None:
                continue
            self._committed[_key(record["id"])] = dict(record)

    def __contains__(self, entry_id) -> bool:
        return _key(entry_id) in self._committed

    @property
    def committed(self) -> list[dict]:
        return list(self._committed.values())

    @property
    def drafts(self) -> dict[str, dict]:
        return {k: dict(v) for k, v in self._drafts.items()}

    def stage(self, entry_id, field: str, value: Any) -> bool:
        """Record a draft value. Returns False if the entry is unknown."""
        key = _key(entry_id)
        if key not in self._committed:
            return False
        self._drafts.setdefault(key, {})[field] = value
        return True

    def stage_many(self, edits: Iterable[Mapping]) -> None:
        """Stage ``{id, field: value, ...}`` dicts, as sent by a client."""
        for edit in edits:
            entry_id = edit.get("id")
            if entry_id is None:
                continue
            for field, value in edit.items():
                if field != "id":
                    self.stage(entry_id, field, value)

    def toggle(self, entry_id, field: str) -> bool:
        key = _key(entry_id)
        if key not in self._committed:
            return False
        return self.stage(entry_id, field, not self.get_current_value(entry_id, field))

    def get_current_value(self, entry_id, field: str, default: Any = None) -> Any:
        key = _key(entry_id)
        draft = self._drafts.get(key, {})
        if field in draft:
            return draft[field]
        return self._committed.get(key, {}).get(field, default)

    def apply(self, entry: Mapping) -> dict:
        """Return a copy of ``entry`` with any draft values merged in."""
        merged = dict(entry)
        if entry.get("id") is not None:
            merged.update(self._drafts.get(_key(entry["id"]), {}))
        return merged

    def has_pending(self) -> bool:
        return any(self._drafts.values())

    def pending_edits(self) -> list[dict]:
        """Drafts as ``{id, field: value}`` dicts, in staging order.

        The id is taken from the committed record, so a UUID stays a UUID.
        """
        return [
            {"id": self._committed[key]["id"], **fields}
            for key, fields in self._drafts.items()
            if fields
        ]

    def discard(self, entry_id=None) -> None:
        """Drop drafts for one entry, or for all entries when no id is given."""
        if entry_id is None:
            self._drafts.clear()
        else:
            self._drafts.pop(_key(entry_id), None)

    def clear_overlay(self) -> None:
        self.discard()

    def commit(self, persisted: Iterable[Mapping]) -> None:
        """Replace committed values with what was written and clear all drafts."""
        for record in persisted:
            if record.get("id") is None:
                continue
            key = _key(record["id"])
            self._committed[key] = {**self._committed.get(key, {}), **dict(record)}
        self._drafts.clear()
