"""
Design (repository.py)
- Purpose: Encapsulate one record kind's mutable state behind a tiny API, so the UI,
           batch editor and storage never touch the id map directly.
- Inputs: Pipe or Station objects, ids, predicates.
- Outputs: Records, ids, ordered (id, record) lists.
- Side effects: Updates the internal dict and id counter; emits audit lines on create/delete.
- Thread-safety: None needed; the app has exactly one caller (the UI main thread).
"""

from typing import Callable, Dict, Generic, List, Optional, Protocol, Set, Tuple, TypeVar

from .audit import AuditSink, NullAudit


class Record(Protocol):
    id: int
    name: str


T = TypeVar("T", bound=Record)


class Repo(Generic[T]):
    """
    Design (Repo)
    - State:
        kind: label used in audit lines ("Pipe", "Station")
        _records: {id -> record}
        _next_id: next id to hand out; only grows, except in replace_all()
        _audit: sink receiving one line per create/delete
    - Unknown ids never raise: get() returns None, delete()/exists() return False.
    """

    def __init__(self, kind: str, audit: Optional[AuditSink] = None) -> None:
        self.kind = kind
        self._audit: AuditSink = audit if audit is not None else NullAudit()
        self._records: Dict[int, T] = {}
        self._next_id = 1

    # -------- CRUD --------

    def create(self, record: T) -> int:
        """
        Purpose: Store a new record under the next id.
        Inputs: record (its id field is overwritten)
        Outputs: The assigned id.
        Side effects: Advances the id counter; audit line.
        """
        new_id = self._next_id
        record.id = new_id
        self._records[new_id] = record
        self._next_id += 1
        self._audit.record(f"Created {self.kind}: ID={new_id}, name='{record.name}'")
        return new_id

    def delete(self, record_id: int) -> bool:
        if record_id not in self._records:
            return False
        del self._records[record_id]
        self._audit.record(f"Deleted {self.kind}: ID={record_id}")
        return True

    def get(self, record_id: int) -> T | None:
        return self._records.get(record_id)

    def exists(self, record_id: int) -> bool:
        return record_id in self._records

    def count(self) -> int:
        return len(self._records)

    def list(self) -> List[Tuple[int, T]]:
        """All (id, record) pairs ordered by ascending id."""
        return sorted(self._records.items())

    def ids(self) -> Set[int]:
        return set(self._records)

    @property
    def next_id(self) -> int:
        return self._next_id

    # -------- Bulk reload --------

    def replace_all(self, records: Dict[int, T]) -> None:
        """
        Purpose: Replace the whole collection (used by reload).
        Inputs: records {id -> record}; each record's id field is synced to its key.
        Side effects: Drops every current record; next id becomes max(id) + 1, or 1 if empty.
        """
        fresh: Dict[int, T] = {}
        for record_id, record in records.items():
            record.id = record_id
            fresh[record_id] = record
        self._records = fresh
        self._next_id = max(fresh) + 1 if fresh else 1

    # -------- Queries --------

    def query(self, predicate: Callable[[T], bool]) -> Set[int]:
        """Ids of every record for which predicate(record) holds, scanned live each call."""
        return {record_id for record_id, record in self._records.items() if predicate(record)}
