"""
Design (batch.py)
- Purpose: Store-level mutations by id: single edits (repair toggle, workshop start/stop)
           and the batch repair toggle. Each successful mutation writes one audit line.
- Inputs: Repo, ids, an AuditSink.
- Outputs: Booleans (False = id not found or bound reached) or counts.
- Side effects: Mutates records in place; audit lines.
- Thread-safety: Single caller.
"""

from typing import Iterable, Set, Tuple

from .audit import AuditSink
from .models import Pipe, Station
from .repository import Repo


def toggle_repair(repo: Repo[Pipe], pipe_id: int, audit: AuditSink) -> bool:
    """Flip one pipe's repair flag. False if the id is unknown."""
    pipe = repo.get(pipe_id)
    if pipe is None:
        return False
    pipe.toggle_repair()
    audit.record(f"Pipe ID={pipe_id} repair status changed to: {pipe.status_label}")
    return True


def start_workshop(repo: Repo[Station], station_id: int, audit: AuditSink) -> bool:
    """Start one workshop. False if the id is unknown or every workshop already runs."""
    station = repo.get(station_id)
    if station is None or not station.start_workshop():
        return False
    audit.record(
        f"Station ID={station_id} workshop started. Now "
        f"{station.working_workshops}/{station.total_workshops} working"
    )
    return True


def stop_workshop(repo: Repo[Station], station_id: int, audit: AuditSink) -> bool:
    """Stop one workshop. False if the id is unknown or none is running."""
    station = repo.get(station_id)
    if station is None or not station.stop_workshop():
        return False
    audit.record(
        f"Station ID={station_id} workshop stopped. Now "
        f"{station.working_workshops}/{station.total_workshops} working"
    )
    return True


def batch_toggle_repair(repo: Repo[Pipe], pipe_ids: Iterable[int], audit: AuditSink) -> int:
    """
    Purpose: Toggle the repair flag on every listed pipe that exists.
    Inputs: pipe_ids (typically a query result); unknown ids are skipped.
    Outputs: Number of pipes toggled.
    Side effects: One audit line per pipe plus a summary line.
    """
    changed = 0
    for pipe_id in sorted(set(pipe_ids)):
        if toggle_repair(repo, pipe_id, audit):
            changed += 1
    audit.record(f"Batch edit: {changed} pipes changed")
    return changed


def select_from(found: Set[int], chosen: Iterable[int]) -> Tuple[Set[int], Set[int]]:
    """Split hand-picked ids into (accepted, rejected) against a prior search result."""
    accepted: Set[int] = set()
    rejected: Set[int] = set()
    for pipe_id in chosen:
        (accepted if pipe_id in found else rejected).add(pipe_id)
    return accepted, rejected
