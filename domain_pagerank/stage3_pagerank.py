# stage3_pagerank.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 3 — PageRank via power iteration on a sparse matrix, for one Graph
#   (a domain partition or the merged global graph).
#
# References:
#   [1] Page, L., Brin, S., Motwani, R., & Winograd, T. (1999).
#       "The PageRank Citation Ranking: Bringing Order to the Web."
#       http://ilpubs.stanford.edu:8090/422/1/1999-66.pdf
#
#   [2] Langville, A. & Meyer, C. (2004).
#       "A Survey of Eigenvector Methods of Web Information Retrieval."
#       http://citeseer.ist.psu.edu/713792.html
#
# Implementation approach adapted from NetworkX 3.6.1 `_pagerank_scipy`:
#   https://github.com/networkx/networkx/blob/main/networkx/algorithms/link_analysis/pagerank_alg.py
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
# Key ideas borrowed from NetworkX:
#   1. Represent the reverse adjacency as a scipy sparse matrix (CSR format)
#      instead of walking Python dicts on every iteration.
#   2. Pre-divide each edge weight by the source's out-degree, so that
#      M[j][i] = k/C(i) when page i links to page j k times.
#   3. Use one matrix-vector product (M @ x) to compute every page's
#      prestige term at once.
#   4. L1-normalize the rank vector after each iteration to prevent
#      floating-point drift from accumulating across iterations.
#
# Differences from NetworkX (kept from the reference crawler analysis):
#   - Dangling pages are NOT redistributed; the mass they would pass on is
#     recovered by the normalization step instead.
#   - Arithmetic defaults to single precision (float32).
#   - Iteration stops on an absolute L1 threshold, with an explicit
#     iteration cap and optional deadline.

import time
from dataclasses import dataclass

import numpy as np
import scipy.sparse as sp

from domain_pagerank.config import PageRankConfig
from domain_pagerank.errors import NonConvergenceError
from domain_pagerank.utils import print_warning

CONVERGED = "converged"
NOT_CONVERGED = "not_converged"
TIMED_OUT = "timed_out"
EMPTY = "empty"


@dataclass
class IterationResult:
    """
    Outcome of one power-iteration run.

    Attributes:
        domain_key (str): partition the run belongs to
        ranks (dict): url -> final (best-effort) rank
        iterations (int): number of update steps performed
        distance (float): L1 distance of the last step
        status (str): "converged", "not_converged", "timed_out" or "empty"
        elapsed (float): wall time in seconds
    """
    domain_key: str
    ranks: dict
    iterations: int
    distance: float
    status: str
    elapsed: float = 0.0

    @property
    def converged(self):
        return self.status in (CONVERGED, EMPTY)

    def raise_for_status(self):
        """Raise NonConvergenceError unless the run converged (or was empty)."""
        if not self.converged:
            raise NonConvergenceError(self)
        return self


def initialize_ranks(graph, dtype=np.float32):
    """Uniform prior: every node starts with rank 1/N."""
    uniform = dtype(1.0) / dtype(len(graph.nodes))
    graph.rank_curr = {url: float(uniform) for url in graph.nodes}


def build_transition_matrix(graph, index, dtype=np.float32):
    """
    Compile graph.incoming into an N x N CSR matrix.

    M[j][i] = 1/C(i) for every recorded edge i -> j; repeated edges sum.
    Incoming entries for pages outside `index` are ignored.
    """
    n = len(index)
    rows, cols, data = [], [], []
    for dest, sources in graph.incoming.items():
        dest_idx = index.get(dest)
        if dest_idx is None:
            continue
        for src in sources:
            rows.append(dest_idx)
            cols.append(index[src])
            data.append(1.0 / graph.out_degree[src])

    return sp.csr_matrix(
        (np.array(data, dtype=dtype), (rows, cols)), shape=(n, n), dtype=dtype
    )


def compute_pagerank(graph, config=None, initialize=True, deadline=None):
    """
    Run power iteration on `graph` until the L1 change drops below epsilon.

    Implements the formula from [1]:
        PR(A) = (1-d)/N + d * (PR(T1)/C(T1) + ... + PR(Tn)/C(Tn))

    followed by normalization so that sum(PR) == 1.

    Args:
        graph (Graph): graph to rank; rank_prev/rank_curr are overwritten
        config (PageRankConfig): damping, epsilon, iteration cap, precision
        initialize (bool): start from the uniform prior.  If False, start from
            the existing graph.rank_curr (missing pages get 1/N); used for
            the global refinement pass after merging.
        deadline (float|None): time.monotonic() value after which the run
            stops with status "timed_out"

    Returns:
        IterationResult
    """
    config = config or PageRankConfig()
    start = time.perf_counter()
    n = len(graph.nodes)

    # Empty partition: nothing to rank, and 1/N is undefined.
    if n == 0:
        graph.rank_prev = {}
        graph.rank_curr = {}
        return IterationResult(graph.domain_key, {}, 0, 0.0, EMPTY,
                               time.perf_counter() - start)

    dtype = config.numpy_dtype
    if initialize:
        initialize_ranks(graph, dtype)

    index = {url: i for i, url in enumerate(graph.nodes)}
    M = build_transition_matrix(graph, index, dtype)

    # Uniform random-click term (1-d)/N, fixed for the whole run
    uniform = dtype(1.0) / dtype(n)
    damping = dtype(config.damping)
    epsilon = dtype(config.epsilon)
    random_click = (dtype(1.0) - damping) * uniform

    x = np.array([graph.rank_curr.get(url, uniform) for url in graph.nodes], dtype=dtype)
    x_prev = x
    distance = dtype(np.inf)
    iterations = 0
    status = NOT_CONVERGED

    while iterations < config.max_iterations:
        x_prev = x
        x = random_click + damping * (M @ x_prev)
        x = (x / x.sum()).astype(dtype, copy=False)

        distance = np.abs(x_prev - x).sum(dtype=dtype)
        iterations += 1

        if distance < epsilon:
            status = CONVERGED
            break
        if deadline is not None and time.monotonic() >= deadline:
            status = TIMED_OUT
            break

    graph.rank_prev = dict(zip(graph.nodes, x_prev.tolist()))
    graph.rank_curr = dict(zip(graph.nodes, x.tolist()))

    result = IterationResult(
        domain_key=graph.domain_key,
        ranks=dict(graph.rank_curr),
        iterations=iterations,
        distance=float(distance),
        status=status,
        elapsed=time.perf_counter() - start,
    )

    if status == NOT_CONVERGED:
        print_warning(f"Partition {graph.domain_key!r}: no convergence after "
                      f"{iterations} iterations (L1={result.distance:.3e})")
    elif status == TIMED_OUT:
        print_warning(f"Partition {graph.domain_key!r}: timed out after "
                      f"{iterations} iterations (L1={result.distance:.3e})")

    return result
