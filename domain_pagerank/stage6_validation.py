# stage6_validation.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 6 — Validate the partitioned (distributed) PageRank against the
#   single-pass whole-graph run, and both against NetworkX, using standard
#   ranking metrics (MAE, Spearman's rho, Kendall's tau, Precision@K).
#
# References:
#   [1] Spearman, C. (1904).
#       "The Proof and Measurement of Association between Two Things."
#       American Journal of Psychology, 15(1), 72-101.
#
#   [2] Kendall, M. (1938).
#       "A New Measure of Rank Correlation."
#       Biometrika, 30(1/2), 81-93.
#
# NetworkX License (3-clause BSD):
#   Copyright (c) 2004-2025, NetworkX Developers
#   Aric Hagberg <hagberg@lanl.gov>
#   Dan Schult <dschult@colgate.edu>
#   Pieter Swart <swart@lanl.gov>
#   All rights reserved.
#   Redistribution and use in source and binary forms, with or without
#   modification, are permitted provided that the above copyright notice,
#   this list of conditions, and the following disclaimer are retained.
#   See full license: https://github.com/networkx/networkx/blob/main/LICENSE.txt
#
#   This file invokes nx.DiGraph() and nx.pagerank() at runtime as a
#   reference implementation.  NetworkX redistributes the rank of dangling
#   pages, which the crawler analysis does not, so scores only agree
#   exactly on graphs where every page has an outgoing link.
#
# Comparison set:
#   The merge step keeps only pages owned by some partition, so pages that
#   appear solely as link targets from another domain are absent from the
#   distributed result.  Metrics are computed over the pages both runs
#   ranked.

import os

import numpy as np
from scipy.stats import kendalltau, rankdata, spearmanr
import matplotlib
matplotlib.use('Agg')  # non-interactive backend for saving to file
import matplotlib.pyplot as plt
import networkx as nx

from domain_pagerank.utils import (
    print_stage, print_step, print_success, print_summary_box,
    print_side_by_side_boxes, top_k, Timer,
)

DOCS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'docs')


def networkx_pagerank(edges, damping=0.9):
    """Reference PageRank from NetworkX over the whole edge list."""
    G = nx.DiGraph()
    G.add_edges_from(edges)
    return nx.pagerank(G, alpha=damping)


def compare_rankings(left, right, k=5):
    """
    Compare two url -> score maps over their common pages.

    Returns:
        dict: pages, mae, max_error, max_error_page, spearman, kendall,
            precision_at_k
    """
    pages = sorted(set(left) & set(right))
    metrics = {"pages": len(pages), "mae": 0.0, "max_error": 0.0,
               "max_error_page": None, "spearman": float('nan'),
               "kendall": float('nan'), "precision_at_k": 0.0}
    if not pages:
        return metrics

    left_scores = np.array([left[p] for p in pages], dtype=np.float64)
    right_scores = np.array([right[p] for p in pages], dtype=np.float64)

    # Score level
    abs_errors = np.abs(left_scores - right_scores)
    metrics["mae"] = float(abs_errors.mean())
    metrics["max_error"] = float(abs_errors.max())
    metrics["max_error_page"] = pages[int(abs_errors.argmax())]

    # Rank level: undefined for fewer than two pages or constant scores
    if len(pages) > 1 and np.ptp(left_scores) > 0 and np.ptp(right_scores) > 0:
        metrics["spearman"] = float(spearmanr(left_scores, right_scores)[0])
        metrics["kendall"] = float(kendalltau(left_scores, right_scores)[0])

    # Top-K set overlap
    common = set(pages)
    left_top = {p for p, _ in top_k({p: s for p, s in left.items() if p in common}, k)}
    right_top = {p for p, _ in top_k({p: s for p, s in right.items() if p in common}, k)}
    metrics["precision_at_k"] = len(left_top & right_top) / max(1, min(k, len(pages)))

    return metrics


def _plot_validation(left_scores, right_scores, rho, tau, out_dir):
    """
    Rank-vs-rank and score-vs-score scatter plots, saved to `out_dir`.

    Points on the diagonal mean the distributed run agrees with the
    sequential one.
    """
    left_ranks = rankdata(-left_scores, method='ordinal')
    right_ranks = rankdata(-right_scores, method='ordinal')

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    # --- Left: Rank vs Rank (Spearman) ---
    ax1.scatter(right_ranks, left_ranks, s=4, alpha=0.4, c='steelblue')
    rank_max = max(left_ranks.max(), right_ranks.max())
    ax1.plot([1, rank_max], [1, rank_max], 'r--', linewidth=1, label='Perfect agreement')
    ax1.set_xlabel('Sequential Rank')
    ax1.set_ylabel('Distributed Rank')
    ax1.set_title(f'Rank vs Rank  (Spearman ρ = {rho:.6f})')
    ax1.legend(loc='upper left')
    ax1.set_aspect('equal')

    # --- Right: Score vs Score (Kendall) ---
    ax2.scatter(right_scores, left_scores, s=4, alpha=0.4, c='darkorange')
    score_min = min(right_scores.min(), left_scores.min())
    score_max = max(right_scores.max(), left_scores.max())
    ax2.plot([score_min, score_max], [score_min, score_max], 'r--', linewidth=1, label='y = x')
    ax2.set_xlabel('Sequential PageRank Score')
    ax2.set_ylabel('Distributed PageRank Score')
    ax2.set_title(f'Score vs Score  (Kendall τ = {tau:.6f})')
    ax2.legend(loc='upper left')

    fig.suptitle('Distributed vs Sequential PageRank', fontsize=14, fontweight='bold')
    fig.tight_layout()

    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, 'validation_rank_correlation.png')
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    return path


def validate(distributed, sequential, edges=None, damping=0.9, k=5, plot_dir=DOCS_DIR):
    """
    Report agreement between the distributed and sequential PageRank runs.

    Args:
        distributed (dict): url -> score from partition/merge/refine
        sequential (dict): url -> score from the whole-graph run
        edges (list|None): if given, NetworkX PageRank is computed too
        damping (float): damping factor passed to NetworkX
        k (int): top-K size for display and Precision@K
        plot_dir (str|None): where to save scatter plots (None = no plot)

    Returns:
        dict: {"sequential": metrics, "networkx": metrics or None}
    """
    print_stage("Verify", "Comparing distributed with sequential PageRank")

    with Timer("Validation"):
        metrics = compare_rankings(distributed, sequential, k)
        print_summary_box("Distributed vs Sequential", {
            "Common pages": metrics["pages"],
            "MAE (score)": f"{metrics['mae']:.2e}",
            "Max error": f"{metrics['max_error']:.2e}",
            "Spearman rho [1]": f"{metrics['spearman']:.6f}",
            "Kendall tau  [2]": f"{metrics['kendall']:.6f}",
            f"Precision@{k}": f"{metrics['precision_at_k']:.2f}",
        })

        print_side_by_side_boxes(
            f"Distributed Top {k}",
            {f"#{i+1} {p[-30:]}": f"{s:.6f}" for i, (p, s) in enumerate(top_k(distributed, k))},
            f"Sequential Top {k}",
            {f"#{i+1} {p[-30:]}": f"{s:.6f}" for i, (p, s) in enumerate(top_k(sequential, k))},
        )

        nx_metrics = None
        if edges is not None:
            print_step("Computing NetworkX PageRank...")
            nx_metrics = compare_rankings(sequential, networkx_pagerank(edges, damping), k)
            print_summary_box("Sequential vs NetworkX", {
                "Common pages": nx_metrics["pages"],
                "MAE (score)": f"{nx_metrics['mae']:.2e}",
                "Spearman rho [1]": f"{nx_metrics['spearman']:.6f}",
                f"Precision@{k}": f"{nx_metrics['precision_at_k']:.2f}",
            })

        if plot_dir is not None and metrics["pages"] > 1:
            pages = sorted(set(distributed) & set(sequential))
            path = _plot_validation(
                np.array([distributed[p] for p in pages]),
                np.array([sequential[p] for p in pages]),
                metrics["spearman"], metrics["kendall"], plot_dir,
            )
            print_success(f"Scatter plots saved to {path}")

    return {"sequential": metrics, "networkx": nx_metrics}
