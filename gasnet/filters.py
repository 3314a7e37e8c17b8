"""
Design (filters.py)
- Purpose: Per-kind predicate factories used with Repo.query().
- Inputs: Filter values already validated by the caller (str, bool, float).
- Outputs: Pure functions record -> bool.
- Side effects: None.
- Thread-safety: Stateless; safe.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Set, TypeVar

from .models import Pipe, Station
from .repository import Repo

R = TypeVar("R")
Predicate = Callable[[R], bool]


def name_contains(text: str) -> Callable[[Pipe | Station], bool]:
    """Case-sensitive substring match on name. An empty filter matches every record."""
    def predicate(record: Pipe | Station) -> bool:
        return not text or text in record.name
    return predicate


def repair_status(under_repair: bool) -> Callable[[Pipe], bool]:
    def predicate(pipe: Pipe) -> bool:
        return pipe.under_repair == under_repair
    return predicate


def min_unused_percentage(threshold: float) -> Callable[[Station], bool]:
    """Inclusive lower bound on Station.unused_percentage."""
    def predicate(station: Station) -> bool:
        return station.unused_percentage >= threshold
    return predicate


def combine(*predicates: Predicate) -> Predicate:
    """Logical AND of the given predicates (matches everything when none are given)."""
    def predicate(record) -> bool:
        return all(p(record) for p in predicates)
    return predicate


def find_pipes(repo: Repo[Pipe], name: str = "", under_repair: Optional[bool] = None) -> Set[int]:
    """
    Purpose: Build a batch-edit selection: name filter, optionally intersected with a repair filter.
    Inputs: name ("" = no name filter), under_repair (None = no repair filter).
    Outputs: Set of matching pipe ids.
    """
    found = repo.query(name_contains(name))
    if under_repair is not None:
        found &= repo.query(repair_status(under_repair))
    return found


def find_stations(repo: Repo[Station], name: str = "", min_unused: Optional[float] = None) -> Set[int]:
    """Station counterpart of find_pipes(); min_unused None disables the threshold filter."""
    predicates = [name_contains(name)]
    if min_unused is not None:
        predicates.append(min_unused_percentage(min_unused))
    return repo.query(combine(*predicates))


@dataclass(frozen=True)
class PipeSearch:
    """Search criteria captured when the user runs a search; run() re-evaluates them on live data."""
    name: str = ""
    under_repair: Optional[bool] = None

    def run(self, repo: Repo[Pipe]) -> Set[int]:
        return find_pipes(repo, self.name, self.under_repair)


@dataclass(frozen=True)
class StationSearch:
    name: str = ""
    min_unused: Optional[float] = None

    def run(self, repo: Repo[Station]) -> Set[int]:
        return find_stations(repo, self.name, self.min_unused)
