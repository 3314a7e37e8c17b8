"""Tests for the file-backed audit log."""

import re

from gasnet.audit import AuditLog

STAMP = r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] "


def test_lines_are_stamped_and_appended(tmp_path):
    path = tmp_path / "logs" / "log.txt"
    with AuditLog(path) as audit:
        audit.record("Program started")
    with AuditLog(path) as audit:
        audit.record("Created Pipe: ID=1, name='A'")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert re.fullmatch(STAMP + "Program started", lines[0])
    assert re.fullmatch(STAMP + "Created Pipe: ID=1, name='A'", lines[1])


def test_listeners_receive_stamped_lines(tmp_path):
    seen = []
    audit = AuditLog(tmp_path / "log.txt")
    audit.add_listener(seen.append)
    audit.record("before open")
    audit.open()
    audit.record("Deleted Station: ID=3")
    audit.close()
    assert [re.sub(STAMP, "", line) for line in seen] == ["before open", "Deleted Station: ID=3"]
    assert (tmp_path / "log.txt").read_text(encoding="utf-8").count("\n") == 1


def test_close_is_idempotent(tmp_path):
    audit = AuditLog(tmp_path / "log.txt").open()
    audit.close()
    audit.close()


def test_removed_listener_stops_receiving_lines(tmp_path):
    seen = []
    with AuditLog(tmp_path / "log.txt") as audit:
        audit.add_listener(seen.append)
        audit.record("Created Pipe: ID=1, name='A'")
        audit.remove_listener(seen.append)
        audit.record("Program finished")
        audit.remove_listener(seen.append)
    assert [re.sub(STAMP, "", line) for line in seen] == ["Created Pipe: ID=1, name='A'"]
    assert "Program finished" in (tmp_path / "log.txt").read_text(encoding="utf-8")
