import pytest

import main
from domain_pagerank.errors import ConfigError, NonConvergenceError
from domain_pagerank.config import PageRankConfig
from domain_pagerank.pipeline import run_distributed, run_sequential, top_per_domain
from domain_pagerank.stage1_read import iter_edges
from domain_pagerank.utils import format_top
from tests.helpers import A_X, B_X, C_Y, D_Y, CLOSED_FORM_A, CLOSED_FORM_B


def test_literal_scenario(literal_lines, config):
    edges = list(iter_edges(literal_lines))
    result = run_distributed(edges, config, progress=False)

    assert [p.domain_key for p in result.partitions] == ["", "x"]
    assert len(result.partitions[1].nodes) == 2
    assert result.ranks == pytest.approx({
        "http://a.x.calpoly.edu": 0.5,
        "http://b.x.calpoly.edu": 0.5,
    }, abs=1e-4)
    assert result.converged


def test_partitioned_run_matches_whole_graph(multi_domain_edges, config):
    distributed = run_distributed(multi_domain_edges, config, progress=False)
    sequential = run_sequential(multi_domain_edges, config)

    assert set(distributed.ranks) == set(sequential.ranks)
    for url, score in sequential.ranks.items():
        assert distributed.ranks[url] == pytest.approx(score, abs=1e-3)

    expected = {A_X: CLOSED_FORM_A, B_X: CLOSED_FORM_B, C_Y: CLOSED_FORM_A, D_Y: CLOSED_FORM_B}
    assert distributed.ranks == pytest.approx(expected, abs=1e-3)


def test_partitioned_run_double_precision(multi_domain_edges):
    config = PageRankConfig(precision="float64", epsilon=1e-10)
    distributed = run_distributed(multi_domain_edges, config, progress=False)
    assert distributed.ranks[A_X] == pytest.approx(CLOSED_FORM_A, abs=1e-6)
    assert distributed.ranks[D_Y] == pytest.approx(CLOSED_FORM_B, abs=1e-6)


def test_refinement_sums_to_one(multi_domain_edges, config):
    result = run_distributed(multi_domain_edges, config, progress=False)
    assert sum(result.ranks.values()) == pytest.approx(1.0, abs=1e-4)
    assert result.refinement.converged
    assert set(result.timings) == {"partition", "local", "merge", "refine", "concurrent"}


def test_garbage_lines_never_become_nodes(literal_lines, config):
    lines = ["garbage line with no arrow"] + literal_lines + ["-> nowhere;", "still -> more -> junk"]
    result = run_distributed(list(iter_edges(lines)), config, progress=False)
    assert len(result.ranks) == 2
    assert all(url.startswith("http://") for url in result.ranks)


def test_empty_edge_list(config):
    result = run_distributed([], config, progress=False)
    assert result.ranks == {}
    assert [r.status for r in result.results] == ["empty"]


def test_strict_mode_raises_on_non_convergence(tail_edges):
    config = PageRankConfig(max_iterations=1, strict=True)
    with pytest.raises(NonConvergenceError):
        run_distributed(tail_edges, config, progress=False)


def test_lenient_mode_reports_non_convergence(tail_edges):
    result = run_distributed(tail_edges, PageRankConfig(max_iterations=1), progress=False)
    assert not result.converged
    assert sum(result.ranks.values()) == pytest.approx(1.0, abs=1e-4)


def test_top_per_domain(multi_domain_edges, config):
    result = run_distributed(multi_domain_edges, config, progress=False)
    best = top_per_domain(result.ranks)
    assert list(best) == ["x", "y"]
    assert best["x"][0][0] == A_X
    assert best["y"][0][0] == C_Y


def test_format_top_is_exact():
    ranks = {"http://b": 0.25, "http://a": 0.25, "http://c": 0.5}
    assert format_top(ranks, 2) == "(http://c, 0.500000)(http://a, 0.250000)"
    assert format_top(ranks, 10).count("(") == 3
    assert format_top({}, 5) == ""


def test_invalid_config():
    with pytest.raises(ConfigError):
        PageRankConfig(damping=1.0)
    with pytest.raises(ValueError):
        PageRankConfig(precision="float16")
    with pytest.raises(ConfigError):
        PageRankConfig(task_timeout=0)


def test_cli_prints_top_pages(tmp_path, literal_lines, capsys):
    path = tmp_path / "auth.gv"
    path.write_text("digraph {\n" + "\n".join(literal_lines) + "\ngarbage\n}\n")

    code = main.main(["--input", str(path), "--top", "2", "--no-progress", "--per-domain"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.rstrip().splitlines()[-1] == (
        "(http://a.x.calpoly.edu, 0.500000)(http://b.x.calpoly.edu, 0.500000)"
    )
    assert "x:\t(http://a.x.calpoly.edu, 0.500000)" in out


def test_cli_unreadable_input_exits_nonzero(tmp_path, capsys):
    missing = str(tmp_path / "missing.gv")
    code = main.main(["--input", missing, "--no-progress"])
    out = capsys.readouterr().out
    assert code == 1
    assert "[ERR]" in out
    assert missing in out
