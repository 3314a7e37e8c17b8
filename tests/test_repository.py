"""Tests for the generic Repo entity store."""

from gasnet.models import Pipe, Station
from gasnet.repository import Repo


def test_ids_are_never_reused_after_delete(pipes):
    assert pipes.create(Pipe("Trunk-A", 12.5, 700, False)) == 1
    assert pipes.create(Pipe("Trunk-B", 1.0, 500, False)) == 2
    assert pipes.delete(1) is True
    assert pipes.create(Pipe("Trunk-C", 2.0, 500, False)) == 3
    assert pipes.ids() == {2, 3}


def test_create_stamps_record_and_exceeds_existing_ids(pipes):
    for n in range(5):
        existing = pipes.ids()
        new_id = pipes.create(Pipe(f"P{n}", 1.0, 100))
        assert all(new_id > i for i in existing)
        assert pipes.get(new_id).id == new_id


def test_unknown_ids_do_not_raise(pipes):
    assert pipes.get(42) is None
    assert pipes.delete(42) is False
    assert pipes.exists(42) is False


def test_delete_last_record_does_not_rewind_counter(pipes):
    pipes.create(Pipe("A", 1.0, 100))
    pipes.create(Pipe("B", 1.0, 100))
    pipes.delete(2)
    assert pipes.create(Pipe("C", 1.0, 100)) == 3


def test_list_is_ordered_by_id(pipes):
    records = {7: Pipe("x", 1.0, 1), 2: Pipe("y", 1.0, 1), 11: Pipe("z", 1.0, 1)}
    pipes.replace_all(records)
    assert [record_id for record_id, _ in pipes.list()] == [2, 7, 11]
    assert pipes.count() == 3


def test_replace_all_recomputes_next_id(pipes):
    for name in ("A", "B", "C", "D", "E"):
        pipes.create(Pipe(name, 1.0, 100))
    pipes.replace_all({2: Pipe("B", 1.0, 100), 3: Pipe("C", 1.0, 100)})
    assert pipes.next_id == 4
    assert pipes.get(1) is None
    assert pipes.create(Pipe("F", 1.0, 100)) == 4


def test_replace_all_with_nothing_resets_counter(pipes):
    pipes.create(Pipe("A", 1.0, 100))
    pipes.replace_all({})
    assert pipes.count() == 0
    assert pipes.next_id == 1


def test_replace_all_syncs_record_ids(stations):
    station = Station("S", 2, 1, id=0)
    stations.replace_all({9: station})
    assert stations.get(9).id == 9


def test_query_scans_live_state(populated_pipes):
    in_repair = lambda p: p.under_repair  # noqa: E731
    assert populated_pipes.query(in_repair) == {2, 4}
    populated_pipes.get(1).toggle_repair()
    assert populated_pipes.query(in_repair) == {1, 2, 4}


def test_create_and_delete_are_audited(pipes, audit):
    pipes.create(Pipe("Trunk-A", 12.5, 700))
    pipes.delete(1)
    pipes.delete(1)
    assert audit.messages == ["Created Pipe: ID=1, name='Trunk-A'", "Deleted Pipe: ID=1"]


def test_stores_have_independent_id_spaces(pipes, stations):
    assert pipes.create(Pipe("P", 1.0, 1)) == 1
    assert stations.create(Station("S", 1)) == 1


def test_default_audit_sink_is_silent():
    repo: Repo[Pipe] = Repo("Pipe")
    assert repo.create(Pipe("P", 1.0, 1)) == 1
