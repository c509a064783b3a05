# stage5_merge.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 5 — Combine locally converged partitions into one global Graph.
#
#   Ownership filter:
#     A partition only exports the pages it owns (owner_of(url) equals its
#     domain_key).  Pages that leaked in as bare destinations of another
#     domain's links are dropped; their owning partition exports them.
#
#   Reverse edges:
#     Every edge was recorded by the partition owning its source, so each
#     partition exports the reverse edges of the sources it won.  This is how
#     a page in domain "y" gets back its incoming links from domain "x",
#     links no single partition ever iterated over, which is why the merged
#     graph needs a global refinement pass.
#
#   Collisions (a page exported by two partitions, e.g. duplicate domain
#   keys) are resolved by policy:
#     "first": the first partition processed wins; later copies are dropped
#     "error": raise MergeCollisionError
#     "mean":  topology from the first partition, seed rank = mean of copies

import numpy as np

from domain_pagerank.errors import ConfigError, MergeCollisionError
from domain_pagerank.graph import Graph
from domain_pagerank.stage2_partition import ROOT_DOMAIN, owner_of
from domain_pagerank.utils import print_stage, print_step, print_summary_box, Timer


def normalize_ranks(graph):
    """
    Seed missing pages with 1/N, then scale rank_curr to sum to 1.
    """
    n = len(graph.nodes)
    if n == 0:
        graph.rank_curr = {}
        return
    uniform = 1.0 / n
    values = np.array([graph.rank_curr.get(url, uniform) for url in graph.nodes], dtype=np.float64)
    total = values.sum()
    if total > 0:
        values /= total
    else:
        values[:] = uniform
    graph.rank_curr = dict(zip(graph.nodes, values.tolist()))


def merge_partitions(partitions, root_label="calpoly", policy="first"):
    """
    Merge converged partitions into a single global Graph.

    Args:
        partitions (list[Graph]): converged partitions, in processing order
        root_label (str): hostname label used for domain ownership
        policy (str): "first", "error" or "mean" (see module header)

    Returns:
        Graph: merged graph with rank_curr seeded from the partitions and
            normalized to sum to 1

    Raises:
        MergeCollisionError: policy is "error" and a page is claimed twice
    """
    if policy not in ("first", "error", "mean"):
        raise ConfigError(f"unknown merge policy {policy!r}")

    print_stage("Merge", "Combining partitions into global graph")

    with Timer("Total Stage 5"):
        merged = Graph(domain_key=ROOT_DOMAIN)
        winner = {}          # url -> index of the partition that exported it
        samples = {}         # url -> seed ranks seen (for "mean")
        leaked = 0
        collisions = 0

        # --- Step 1: nodes, out_degree, rank_curr (ownership filtered) ---
        print_step("Copying owned pages...")
        for idx, graph in enumerate(partitions):
            for url in graph.nodes:
                if owner_of(url, root_label) != graph.domain_key:
                    leaked += 1
                    continue
                if url in winner:
                    collisions += 1
                    if policy == "error":
                        raise MergeCollisionError(url, partitions[winner[url]].domain_key,
                                                  graph.domain_key)
                    if policy == "mean" and url in graph.rank_curr:
                        samples.setdefault(url, []).append(graph.rank_curr[url])
                    continue

                winner[url] = idx
                merged.add_node(url)
                if url in graph.out_degree:
                    merged.out_degree[url] = graph.out_degree[url]
                if url in graph.rank_curr:
                    merged.rank_curr[url] = graph.rank_curr[url]
                    samples[url] = [graph.rank_curr[url]]

        if policy == "mean":
            for url, values in samples.items():
                merged.rank_curr[url] = float(np.mean(values))

        # --- Step 2: reverse edges, attributed to the source's winner ---
        print_step("Rebuilding reverse adjacency...")
        cross_domain = 0
        for idx, graph in enumerate(partitions):
            for dest, sources in graph.incoming.items():
                if dest not in merged:
                    continue
                for src in sources:
                    if winner.get(src) != idx:
                        continue
                    merged.incoming.setdefault(dest, []).append(src)
                    if owner_of(dest, root_label) != graph.domain_key:
                        cross_domain += 1

        # --- Step 3: seed ranks for the refinement pass ---
        normalize_ranks(merged)

        print_summary_box("Stage 5 Summary", {
            "Partitions merged": len(partitions),
            "Global nodes": len(merged),
            "Global edges": sum(len(v) for v in merged.incoming.values()),
            "Cross-domain edges": cross_domain,
            "Leaked nodes dropped": leaked,
            f"Collisions ({policy})": collisions,
        })

    return merged
