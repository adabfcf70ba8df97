import numpy as np
import networkx as nx
import pytest

from dynamicnets.temporal_interactions import (TemporalInteractionIndex,
                                               InfectedTimeTable,
                                               NEVER_INFECTED)


def crossing_index():
    index = TemporalInteractionIndex(4, symmetric=True)
    index.add_record(0, 1, 10.0, 12.0)
    index.add_record(0, 1, 30.0, 31.0)
    index.add_record(2, 3, 5.0, 5.0)
    return index

def location_index():
    index = TemporalInteractionIndex(3, symmetric=False)
    index.add_record(0, 1, 5.0, 3.0)
    index.add_record(0, 1, 8.0, 7.5)
    index.add_record(0, 1, 12.0, 2.0)
    return index


def test_size():
    index = crossing_index()
    assert index.size == 4
    assert len(index) == 4

def test_symmetric_records_are_stored_both_ways():
    index = crossing_index()
    np.testing.assert_array_equal(index.records(0, 1), [[10.0, 12.0], [30.0, 31.0]])
    np.testing.assert_array_equal(index.records(1, 0), index.records(0, 1))
    assert index.get_record_count() == 6

def test_asymmetric_records_are_stored_one_way():
    index = location_index()
    assert index.get_record_count(0, 1) == 3
    assert index.get_record_count(1, 0) == 0

def test_records_preserve_insertion_order():
    index = TemporalInteractionIndex(2, symmetric=False)
    index.add_record(0, 1, 9.0, 9.0)
    index.add_record(0, 1, 1.0, 1.0)
    np.testing.assert_array_equal(index.records(0, 1)[:, 0], [9.0, 1.0])
    assert not index.is_sorted(0, 1)
    with pytest.raises(ValueError):
        index.check_sorted()

def test_records_after_query_include_new_records():
    index = TemporalInteractionIndex(2)
    index.add_record(0, 1, 1.0, 1.0)
    assert not index.check_interaction(0, 1, 2.0, 3.0)
    index.add_record(0, 1, 2.5, 2.5)
    assert index.check_interaction(0, 1, 2.0, 3.0)

def test_out_of_range_nodes_raise():
    index = crossing_index()
    with pytest.raises(IndexError):
        index.add_record(0, 4, 1.0, 1.0)
    with pytest.raises(IndexError):
        index.add_record(-1, 0, 1.0, 1.0)
    with pytest.raises(IndexError):
        index.check_interaction(4, 0, 0.0, 1.0)
    with pytest.raises(IndexError):
        index.time_since_last_contact(0, 7, 1.0)

def test_check_interaction_from_time_in_window():
    index = crossing_index()
    assert index.check_interaction(0, 1, 10.0, 11.0)
    assert index.check_interaction(1, 0, 10.0, 11.0)

def test_check_interaction_to_time_in_window():
    index = crossing_index()
    assert index.check_interaction(0, 1, 11.0, 13.0)

def test_check_interaction_window_is_half_open():
    index = crossing_index()
    assert not index.check_interaction(2, 3, 0.0, 5.0)
    assert index.check_interaction(2, 3, 5.0, 10.0)

def test_check_interaction_scans_past_earlier_records():
    index = crossing_index()
    assert index.check_interaction(0, 1, 30.0, 30.5)

def test_check_interaction_disjoint_window_and_empty_cell():
    index = crossing_index()
    assert not index.check_interaction(0, 1, 13.0, 30.0)
    assert not index.check_interaction(0, 2, 0.0, 100.0)
    assert isinstance(index.check_interaction(0, 1, 10.0, 11.0), bool)

def test_time_since_last_contact_before_first_record():
    index = location_index()
    assert index.time_since_last_contact(0, 1, 4.99) is None
    assert index.time_since_last_contact(0, 1, -100.0) is None

def test_time_since_last_contact_at_record_times():
    index = location_index()
    assert index.time_since_last_contact(0, 1, 5.0) == 2.0
    assert index.time_since_last_contact(0, 1, 8.0) == 0.5
    assert index.time_since_last_contact(0, 1, 12.0) == 10.0

def test_time_since_last_contact_requires_exact_time():
    index = location_index()
    assert index.time_since_last_contact(0, 1, 6.0) is None
    assert index.time_since_last_contact(0, 1, 100.0) is None

def test_time_since_last_contact_empty_cell():
    index = location_index()
    assert index.time_since_last_contact(1, 0, 5.0) is None

def test_pairs_and_adjacency_matrix():
    index = crossing_index()
    assert index.pairs() == [(0, 1), (1, 0), (2, 3), (3, 2)]

    adjacency = index.adjacency_matrix()
    assert adjacency.shape == (4, 4)
    assert adjacency[0, 1] == 2
    assert adjacency[3, 2] == 1
    assert adjacency[0, 2] == 0

def test_aggregate_contact_network():
    graph = crossing_index().aggregate_contact_network()
    assert isinstance(graph, nx.Graph) and not graph.is_directed()
    assert graph.number_of_nodes() == 4
    assert graph[0][1]['weight'] == 2

    digraph = location_index().aggregate_contact_network()
    assert digraph.is_directed()
    assert digraph.has_edge(0, 1) and not digraph.has_edge(1, 0)

def test_infected_time_table():
    table = InfectedTimeTable(3)
    assert len(table) == 3
    assert table.get_infected_time(1) == NEVER_INFECTED
    assert not table.is_infected(1)

    table.set_infected_time(1, 20.0)
    assert table.get_infected_time(1) == 20.0
    assert table.is_infected(1)
    np.testing.assert_array_equal(table.as_array(), [NEVER_INFECTED, 20.0, NEVER_INFECTED])

    table.reset()
    assert not table.is_infected(1)

def test_infected_time_table_bounds():
    table = InfectedTimeTable(3)
    with pytest.raises(IndexError):
        table.get_infected_time(3)
    with pytest.raises(IndexError):
        table.set_infected_time(-1, 0.0)
