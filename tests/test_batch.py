"""Tests for single and batch mutations by id."""

from gasnet import batch


def test_batch_toggle_changes_only_selected_pipes(populated_pipes, audit):
    before = {pipe_id: pipe.under_repair for pipe_id, pipe in populated_pipes.list()}
    changed = batch.batch_toggle_repair(populated_pipes, {1, 2}, audit)
    assert changed == 2
    after = {pipe_id: pipe.under_repair for pipe_id, pipe in populated_pipes.list()}
    assert after[1] is not before[1]
    assert after[2] is not before[2]
    assert after[3] is before[3]
    assert after[4] is before[4]


def test_batch_toggle_skips_missing_ids(populated_pipes, audit):
    assert batch.batch_toggle_repair(populated_pipes, [3, 99], audit) == 1
    assert populated_pipes.get(3).under_repair is True


def test_batch_toggle_audits_each_pipe_and_summary(populated_pipes, audit):
    audit.messages.clear()
    batch.batch_toggle_repair(populated_pipes, [2, 1], audit)
    assert audit.messages == [
        "Pipe ID=1 repair status changed to: under repair",
        "Pipe ID=2 repair status changed to: in service",
        "Batch edit: 2 pipes changed",
    ]


def test_toggle_repair_unknown_id(pipes, audit):
    assert batch.toggle_repair(pipes, 5, audit) is False
    assert audit.messages == []


def test_workshop_changes_by_id(populated_stations, audit):
    audit.messages.clear()
    assert batch.start_workshop(populated_stations, 2, audit) is True
    assert populated_stations.get(2).working_workshops == 2
    assert batch.stop_workshop(populated_stations, 2, audit) is True
    assert audit.messages == [
        "Station ID=2 workshop started. Now 2/4 working",
        "Station ID=2 workshop stopped. Now 1/4 working",
    ]


def test_workshop_bounds_are_not_audited(populated_stations, audit):
    audit.messages.clear()
    assert batch.start_workshop(populated_stations, 1, audit) is False
    assert batch.stop_workshop(populated_stations, 3, audit) is False
    assert batch.start_workshop(populated_stations, 42, audit) is False
    assert audit.messages == []
    assert populated_stations.get(1).working_workshops == 4
    assert populated_stations.get(3).working_workshops == 0


def test_select_from_splits_ids():
    accepted, rejected = batch.select_from({1, 2, 4}, [4, 3, 1, 7])
    assert accepted == {1, 4}
    assert rejected == {3, 7}
