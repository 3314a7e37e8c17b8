"""
Design (storage.py)
- Purpose: Save and load a snapshot of both repos to/from one line-oriented text file.
- Format:
    Pipes:<count>
    <id> <name> <length_km> <diameter_mm> <under_repair 0|1>      (one value per line)
    Stations:<count>
    <id> <name> <total> <working> <classification>                (one value per line)
- Inputs: Path, repos (save) or path only (load).
- Outputs: Snapshot on load; None on save.
- Side effects: Reads/writes the file. Failures raise StorageError subclasses, never swallowed.
- Load is strict about shape (headers, counts, field types) but does not range-check values.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Tuple, TypeVar

from .audit import AuditSink, NullAudit
from .config import APP_DIR_NAME, DATA_FILENAME
from .models import Pipe, Station
from .repository import Repo

PIPES_HEADER = "Pipes:"
STATIONS_HEADER = "Stations:"

V = TypeVar("V")


class StorageError(Exception):
    """Base class for persistence failures."""


class StorageIOError(StorageError):
    """The file could not be opened, read or written."""


class UnwritableRecordError(StorageError):
    """A record holds a value the line format cannot represent (a line break in a text field)."""


class MalformedDataError(StorageError):
    """The file does not match the expected layout; line_no is 1-based."""

    def __init__(self, line_no: int, reason: str) -> None:
        super().__init__(f"line {line_no}: {reason}")
        self.line_no = line_no
        self.reason = reason


@dataclass
class Snapshot:
    pipes: Dict[int, Pipe] = field(default_factory=dict)
    stations: Dict[int, Station] = field(default_factory=dict)


def get_data_dir() -> Path:
    """
    Resolve the folder holding the data file and audit log. Prefer the app data dir on
    Windows so it survives reinstalls. Fallback to the dir next to the executable.
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata) / APP_DIR_NAME
            try:
                base.mkdir(parents=True, exist_ok=True)
                return base
            except OSError:
                pass
    # Fallback: next to executable (or project root when running as script)
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys.executable).parent
    return Path(__file__).resolve().parent.parent


def get_data_path() -> Path:
    return get_data_dir() / DATA_FILENAME


# -------- Save --------

def _pipe_lines(pipe_id: int, pipe: Pipe) -> List[str]:
    return [
        str(pipe_id),
        pipe.name,
        repr(float(pipe.length_km)),
        str(pipe.diameter_mm),
        "1" if pipe.under_repair else "0",
    ]


def _station_lines(station_id: int, station: Station) -> List[str]:
    return [
        str(station_id),
        station.name,
        str(station.total_workshops),
        str(station.working_workshops),
        station.classification,
    ]


def _check_single_line(kind: str, record_id: int, field_name: str, value: str) -> None:
    if "\n" in value or "\r" in value:
        raise UnwritableRecordError(f"{kind} ID={record_id}: {field_name} contains a line break")


def dump_snapshot(pipes: Iterable[Tuple[int, Pipe]], stations: Iterable[Tuple[int, Station]]) -> str:
    """
    Render (id, record) pairs into the file text. Records are written in the given order.
    Raises UnwritableRecordError, before producing any text, if a name or classification
    contains a line break.
    """
    pipes = list(pipes)
    stations = list(stations)
    for pipe_id, pipe in pipes:
        _check_single_line("Pipe", pipe_id, "name", pipe.name)
    for station_id, station in stations:
        _check_single_line("Station", station_id, "name", station.name)
        _check_single_line("Station", station_id, "classification", station.classification)

    lines = [f"{PIPES_HEADER}{len(pipes)}"]
    for pipe_id, pipe in pipes:
        lines.extend(_pipe_lines(pipe_id, pipe))
    lines.append(f"{STATIONS_HEADER}{len(stations)}")
    for station_id, station in stations:
        lines.extend(_station_lines(station_id, station))
    return "\n".join(lines) + "\n"


def save_snapshot(pipes: Repo[Pipe], stations: Repo[Station], path: Path, audit: AuditSink | None = None) -> None:
    """
    Purpose: Write both repos to path (ascending id order).
    Side effects: Creates parent dirs; overwrites the file; audit line on success.
    Raises: UnwritableRecordError (file left untouched) if a text field holds a line break;
            StorageIOError if the file cannot be written.
    """
    path = Path(path)
    text = dump_snapshot(pipes.list(), stations.list())
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise StorageIOError(f"cannot write {path}: {e}") from e
    (audit or NullAudit()).record(f"Data saved to file: {path}")


# -------- Load --------

class _LineReader:
    """Hands out lines one at a time, remembering the 1-based line number."""

    def __init__(self, lines: List[str]) -> None:
        self._lines = lines
        self.line_no = 0

    def next(self, what: str) -> str:
        if self.line_no >= len(self._lines):
            raise MalformedDataError(self.line_no + 1, f"expected {what}, reached end of file")
        line = self._lines[self.line_no]
        self.line_no += 1
        return line

    def parse(self, what: str, convert: Callable[[str], V]) -> V:
        text = self.next(what)
        try:
            return convert(text.strip())
        except ValueError:
            raise MalformedDataError(self.line_no, f"invalid {what}: {text!r}") from None

    def rest(self) -> List[str]:
        return self._lines[self.line_no:]


def _parse_flag(text: str) -> bool:
    if text not in ("0", "1"):
        raise ValueError(text)
    return text == "1"


def _parse_count(text: str) -> int:
    count = int(text)
    if count < 0:
        raise ValueError(text)
    return count


def _read_count(reader: _LineReader, header: str) -> int:
    line = reader.next(f"'{header}<count>' header")
    if not line.startswith(header):
        raise MalformedDataError(reader.line_no, f"expected '{header}<count>' header, got {line!r}")
    try:
        return _parse_count(line[len(header):].strip())
    except ValueError:
        raise MalformedDataError(reader.line_no, f"invalid record count in {line!r}") from None


def _read_id(reader: _LineReader, seen: Dict[int, object], kind: str) -> int:
    record_id = reader.parse(f"{kind} id", int)
    if record_id < 1:
        raise MalformedDataError(reader.line_no, f"{kind} id must be a positive integer, got {record_id}")
    if record_id in seen:
        raise MalformedDataError(reader.line_no, f"duplicate {kind} id {record_id}")
    return record_id


def parse_snapshot(text: str) -> Snapshot:
    """
    Purpose: Parse file text into a Snapshot.
    Raises: MalformedDataError on a bad header, a count larger than the remaining lines,
            an unparsable field, a duplicate id, or non-blank lines after the last station.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    reader = _LineReader(lines)
    snapshot = Snapshot()

    for _ in range(_read_count(reader, PIPES_HEADER)):
        pipe_id = _read_id(reader, snapshot.pipes, "pipe")
        snapshot.pipes[pipe_id] = Pipe(
            id=pipe_id,
            name=reader.next("pipe name"),
            length_km=reader.parse("pipe length", float),
            diameter_mm=reader.parse("pipe diameter", int),
            under_repair=reader.parse("repair flag", _parse_flag),
        )

    for _ in range(_read_count(reader, STATIONS_HEADER)):
        station_id = _read_id(reader, snapshot.stations, "station")
        snapshot.stations[station_id] = Station(
            id=station_id,
            name=reader.next("station name"),
            total_workshops=reader.parse("total workshops", int),
            working_workshops=reader.parse("working workshops", int),
            classification=reader.next("classification"),
        )

    for offset, line in enumerate(reader.rest(), start=reader.line_no + 1):
        if line.strip():
            raise MalformedDataError(offset, "unexpected content after the last station")
    return snapshot


def load_snapshot(path: Path) -> Snapshot:
    """
    Load a Snapshot from path. Raises StorageIOError if the file cannot be read and
    MalformedDataError if its content is not a valid snapshot.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageIOError(f"cannot read {path}: {e}") from e
    return parse_snapshot(text)


def load_into(path: Path, pipes: Repo[Pipe], stations: Repo[Station], audit: AuditSink | None = None) -> Snapshot:
    """
    Purpose: Reload both repos from path.
    Side effects: Repos are replaced only after the whole file parsed; on any StorageError
                  they are left untouched. Audit line on success.
    """
    snapshot = load_snapshot(path)
    pipes.replace_all(snapshot.pipes)
    stations.replace_all(snapshot.stations)
    (audit or NullAudit()).record(
        f"Data loaded from file: {path} ({len(snapshot.pipes)} pipes, {len(snapshot.stations)} stations)"
    )
    return snapshot
