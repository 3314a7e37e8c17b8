"""Shared fixtures: repos wired to an in-memory audit sink."""

import pytest

from gasnet.models import Pipe, Station
from gasnet.repository import Repo


class RecordingAudit:
    """Audit sink keeping every message in a list."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def record(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture
def pipes(audit: RecordingAudit) -> Repo[Pipe]:
    return Repo("Pipe", audit)


@pytest.fixture
def stations(audit: RecordingAudit) -> Repo[Station]:
    return Repo("Station", audit)


@pytest.fixture
def populated_pipes(pipes: Repo[Pipe]) -> Repo[Pipe]:
    pipes.create(Pipe("Trunk-A", 12.5, 700, False))
    pipes.create(Pipe("Trunk-B", 3.0, 500, True))
    pipes.create(Pipe("Branch-A1", 0.75, 219, False))
    pipes.create(Pipe("trunk-c", 40.0, 1420, True))
    return pipes


@pytest.fixture
def populated_stations(stations: Repo[Station]) -> Repo[Station]:
    stations.create(Station("North", 4, 4, "Head"))
    stations.create(Station("South", 4, 1, "Booster"))
    stations.create(Station("East", 5, 0, "Intermediate"))
    return stations
