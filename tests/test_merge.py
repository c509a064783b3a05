import pytest

from domain_pagerank.errors import ConfigError, MergeCollisionError
from domain_pagerank.graph import Graph
from domain_pagerank.stage2_partition import build_partition, partition_edges
from domain_pagerank.stage4_schedule import run_partitions
from domain_pagerank.stage5_merge import merge_partitions, normalize_ranks
from tests.helpers import A_X, B_X, C_Y, D_Y


@pytest.fixture
def converged_partitions(multi_domain_edges, config):
    partitions = partition_edges(multi_domain_edges)
    run_partitions(partitions, config, progress=False)
    return partitions


def test_only_owned_pages_are_kept(converged_partitions):
    merged = merge_partitions(converged_partitions)
    assert merged.nodes == [A_X, B_X, C_Y, D_Y]
    assert merged.out_degree == {A_X: 2, B_X: 1, C_Y: 2, D_Y: 1}


def test_cross_domain_reverse_edges_are_rebuilt(converged_partitions):
    merged = merge_partitions(converged_partitions)
    assert merged.incoming[A_X] == [B_X, C_Y]
    assert merged.incoming[C_Y] == [A_X, D_Y]
    assert merged.incoming[B_X] == [A_X]
    assert merged.incoming[D_Y] == [C_Y]


def test_merged_incoming_sources_have_out_degree(converged_partitions):
    merged = merge_partitions(converged_partitions)
    for sources in merged.incoming.values():
        for src in sources:
            assert merged.out_degree[src] >= 1


def test_ranks_are_seeded_from_partitions(converged_partitions):
    x = converged_partitions[1]
    y = converged_partitions[2]
    merged = merge_partitions(converged_partitions)

    assert sum(merged.rank_curr.values()) == pytest.approx(1.0)
    raw = {A_X: x.rank_curr[A_X], B_X: x.rank_curr[B_X],
           C_Y: y.rank_curr[C_Y], D_Y: y.rank_curr[D_Y]}
    total = sum(raw.values())
    for url, value in raw.items():
        assert merged.rank_curr[url] == pytest.approx(value / total)


def _duplicate_x_partitions(ranks_first, ranks_second):
    edges = [(A_X, B_X), (B_X, A_X)]
    first = build_partition(edges, "x")
    second = build_partition(edges, "x")
    first.rank_curr = dict(ranks_first)
    second.rank_curr = dict(ranks_second)
    return [first, second]


def test_first_partition_wins_collisions():
    partitions = _duplicate_x_partitions({A_X: 0.7, B_X: 0.3}, {A_X: 0.2, B_X: 0.8})
    merged = merge_partitions(partitions, policy="first")
    assert merged.rank_curr == pytest.approx({A_X: 0.7, B_X: 0.3})
    # edges come from the winning partition only, never twice
    assert merged.incoming == {B_X: [A_X], A_X: [B_X]}


def test_error_policy_rejects_collisions():
    partitions = _duplicate_x_partitions({A_X: 0.7, B_X: 0.3}, {A_X: 0.2, B_X: 0.8})
    with pytest.raises(MergeCollisionError) as excinfo:
        merge_partitions(partitions, policy="error")
    assert excinfo.value.url == A_X
    assert excinfo.value.domains == ("x", "x")


def test_mean_policy_averages_seed_ranks():
    partitions = _duplicate_x_partitions({A_X: 0.7, B_X: 0.3}, {A_X: 0.2, B_X: 0.8})
    merged = merge_partitions(partitions, policy="mean")
    assert merged.rank_curr == pytest.approx({A_X: 0.45, B_X: 0.55})


def test_unknown_policy():
    with pytest.raises(ConfigError):
        merge_partitions([], policy="last")


def test_merge_of_nothing_is_empty():
    merged = merge_partitions([Graph(domain_key="")])
    assert merged.nodes == []
    assert merged.rank_curr == {}


def test_normalize_fills_missing_seeds():
    graph = Graph(nodes=["a", "b"], rank_curr={"a": 0.5})
    normalize_ranks(graph)
    assert graph.rank_curr == pytest.approx({"a": 0.5, "b": 0.5})
