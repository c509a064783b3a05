# pipeline.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Orchestration of the partitioned run:
#
#     edges → partition by domain (stage 2)
#           → local PageRank per partition, in parallel (stage 4 → stage 3)
#           → merge into a global graph (stage 5)
#           → global refinement pass seeded with the local ranks (stage 3)
#
#   plus the single-pass whole-graph run used as the reference.

from dataclasses import dataclass, field

from domain_pagerank.config import PageRankConfig
from domain_pagerank.stage2_partition import build_global_graph, owner_of, partition_edges
from domain_pagerank.stage3_pagerank import compute_pagerank
from domain_pagerank.stage4_schedule import run_partitions
from domain_pagerank.stage5_merge import merge_partitions
from domain_pagerank.utils import print_stage, print_step, print_success, top_k, Timer


@dataclass
class PipelineResult:
    """Everything produced by a partitioned run."""
    ranks: dict
    graph: object
    partitions: list
    results: list
    refinement: object
    timings: dict = field(default_factory=dict)

    @property
    def converged(self):
        return self.refinement.converged and all(r.converged for r in self.results)


def _check(result, config):
    if config.strict:
        result.raise_for_status()
    return result


def run_distributed(edges, config=None, progress=True):
    """
    Partitioned PageRank: partition, solve in parallel, merge, refine.

    Args:
        edges (list[tuple[str, str]]): edge list
        config (PageRankConfig): run settings
        progress (bool): show the scheduler's progress bar

    Returns:
        PipelineResult

    Raises:
        PartitionFailedError: a partition task raised
        NonConvergenceError: config.strict and some run did not converge
        MergeCollisionError: merge policy "error" and a page was claimed twice
    """
    config = config or PageRankConfig()
    timings = {}

    with Timer("Partitioning", quiet=True) as t:
        partitions = partition_edges(edges, config.root_label)
    timings["partition"] = t.elapsed

    with Timer("Local PageRank", quiet=True) as t:
        results = run_partitions(partitions, config, progress=progress)
    timings["local"] = t.elapsed
    for result in results:
        _check(result, config)

    with Timer("Merge", quiet=True) as t:
        graph = merge_partitions(partitions, config.root_label, config.merge_policy)
    timings["merge"] = t.elapsed

    print_stage("Refine", "Global PageRank seeded with local ranks")
    with Timer("Total Refinement") as t:
        refinement = _check(compute_pagerank(graph, config, initialize=False), config)
    timings["refine"] = t.elapsed
    print_step(f"Refinement: {refinement.status} after {refinement.iterations} iterations")

    # Copying between partitions and the global graph is not counted.
    timings["concurrent"] = timings["local"] + timings["refine"]
    print_success(f"Concurrent time = {timings['concurrent']:.4f}s")

    return PipelineResult(
        ranks=dict(refinement.ranks),
        graph=graph,
        partitions=partitions,
        results=results,
        refinement=refinement,
        timings=timings,
    )


def run_sequential(edges, config=None):
    """
    Whole-graph PageRank in one pass, no partitioning.

    Returns:
        IterationResult
    """
    config = config or PageRankConfig()
    print_stage("Sequential", "Whole-graph PageRank")

    with Timer("Sequential PageRank"):
        graph = build_global_graph(edges)
        result = _check(compute_pagerank(graph, config), config)
    print_step(f"Sequential: {result.status} after {result.iterations} iterations")
    return result


def top_per_domain(ranks, root_label="calpoly", k=1):
    """
    Group pages by owning domain and keep the `k` best of each.

    Returns:
        dict: domain_key -> list of (url, score), domains in sorted order
    """
    grouped = {}
    for url, score in ranks.items():
        grouped.setdefault(owner_of(url, root_label), {})[url] = score
    return {domain: top_k(grouped[domain], k) for domain in sorted(grouped)}
