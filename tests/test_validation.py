import math

import pytest

from domain_pagerank.pipeline import run_distributed, run_sequential
from domain_pagerank.stage6_validation import compare_rankings, networkx_pagerank, validate


def test_identical_rankings_agree_perfectly():
    ranks = {"a": 0.5, "b": 0.3, "c": 0.2}
    metrics = compare_rankings(ranks, dict(ranks), k=2)
    assert metrics["pages"] == 3
    assert metrics["mae"] == 0.0
    assert metrics["spearman"] == pytest.approx(1.0)
    assert metrics["kendall"] == pytest.approx(1.0)
    assert metrics["precision_at_k"] == 1.0


def test_compare_uses_common_pages_only():
    metrics = compare_rankings({"a": 0.6, "b": 0.4}, {"a": 0.5, "c": 0.5})
    assert metrics["pages"] == 1
    assert metrics["mae"] == pytest.approx(0.1)
    assert math.isnan(metrics["spearman"])


def test_compare_with_nothing_in_common():
    metrics = compare_rankings({"a": 1.0}, {"b": 1.0})
    assert metrics["pages"] == 0
    assert metrics["max_error_page"] is None


def test_networkx_agrees_without_dangling_pages(multi_domain_edges, config):
    sequential = run_sequential(multi_domain_edges, config)
    reference = networkx_pagerank(multi_domain_edges, damping=config.damping)
    for url, score in reference.items():
        assert sequential.ranks[url] == pytest.approx(score, abs=1e-3)


def test_validate_reports_and_plots(multi_domain_edges, config, tmp_path):
    distributed = run_distributed(multi_domain_edges, config, progress=False)
    sequential = run_sequential(multi_domain_edges, config)

    report = validate(distributed.ranks, sequential.ranks, edges=multi_domain_edges,
                      damping=config.damping, k=2, plot_dir=str(tmp_path))

    assert report["sequential"]["pages"] == 4
    assert report["sequential"]["mae"] < 1e-3
    assert report["networkx"]["pages"] == 4
    assert (tmp_path / "validation_rank_correlation.png").exists()


def test_validate_without_plot(config):
    report = validate({"a": 1.0}, {"a": 1.0}, plot_dir=None)
    assert report["networkx"] is None
    assert report["sequential"]["mae"] == 0.0
