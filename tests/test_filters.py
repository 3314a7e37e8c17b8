"""Tests for predicate factories and the combined searches."""

import pytest

from gasnet import filters


def test_empty_name_filter_matches_everything(populated_pipes, populated_stations):
    assert populated_pipes.query(filters.name_contains("")) == populated_pipes.ids()
    assert populated_stations.query(filters.name_contains("")) == populated_stations.ids()


def test_non_matching_name_filter_matches_nothing(populated_pipes):
    assert populated_pipes.query(filters.name_contains("Compressor")) == set()


def test_name_filter_is_case_sensitive_substring(populated_pipes):
    assert populated_pipes.query(filters.name_contains("Trunk")) == {1, 2}
    assert populated_pipes.query(filters.name_contains("trunk")) == {4}
    assert populated_pipes.query(filters.name_contains("-A")) == {1, 3}


def test_repair_status_filter(populated_pipes):
    assert populated_pipes.query(filters.repair_status(True)) == {2, 4}
    assert populated_pipes.query(filters.repair_status(False)) == {1, 3}


@pytest.mark.parametrize(
    "threshold,expected",
    [(0, {1, 2, 3}), (75, {2, 3}), (75.0001, {3}), (100, {3}), (100.000001, set())],
)
def test_unused_percentage_threshold_is_inclusive(populated_stations, threshold, expected):
    assert populated_stations.query(filters.min_unused_percentage(threshold)) == expected


def test_combine_is_logical_and(populated_pipes):
    predicate = filters.combine(filters.name_contains("Trunk"), filters.repair_status(False))
    assert populated_pipes.query(predicate) == {1}


def test_combine_without_predicates_matches_all(populated_pipes):
    assert populated_pipes.query(filters.combine()) == populated_pipes.ids()


def test_combine_equals_intersection_of_queries(populated_pipes):
    by_name = populated_pipes.query(filters.name_contains("A"))
    by_repair = populated_pipes.query(filters.repair_status(False))
    combined = populated_pipes.query(
        filters.combine(filters.name_contains("A"), filters.repair_status(False))
    )
    assert combined == by_name & by_repair


def test_find_pipes(populated_pipes):
    assert filters.find_pipes(populated_pipes) == {1, 2, 3, 4}
    assert filters.find_pipes(populated_pipes, name="Trunk") == {1, 2}
    assert filters.find_pipes(populated_pipes, under_repair=True) == {2, 4}
    assert filters.find_pipes(populated_pipes, name="Trunk", under_repair=True) == {2}


def test_find_stations(populated_stations):
    assert filters.find_stations(populated_stations) == {1, 2, 3}
    assert filters.find_stations(populated_stations, name="th") == {1, 2}
    assert filters.find_stations(populated_stations, name="th", min_unused=50) == {2}


def test_pipe_search_keeps_its_own_criteria(populated_pipes):
    search = filters.PipeSearch(name="Trunk", under_repair=True)
    assert search.run(populated_pipes) == {2}
    populated_pipes.get(1).toggle_repair()
    assert search.run(populated_pipes) == {1, 2}
    assert filters.PipeSearch().run(populated_pipes) == populated_pipes.ids()


def test_station_search_keeps_its_own_criteria(populated_stations):
    search = filters.StationSearch(min_unused=75)
    assert search.run(populated_stations) == {2, 3}
    populated_stations.get(2).start_workshop()
    assert search.run(populated_stations) == {3}
    assert filters.StationSearch().run(populated_stations) == {1, 2, 3}
