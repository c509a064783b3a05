# stage4_schedule.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 4 — Run local PageRank on every partition concurrently.
#
#   Fan-out / fan-in:
#     - one task per partition is submitted to a concurrent.futures pool
#       ("thread" by default, "process" for CPU-bound graphs);
#     - the stage blocks until every future is done (as_completed over all
#       of them), ticking a tqdm bar as tasks finish;
#     - results are returned in partition order, whatever the completion
#       order was.
#
#   Each task owns its Graph outright, so no locks are needed.  In process
#   mode the worker mutates a pickled copy, so ranks are copied back into
#   the parent's Graph after the join.
#
#   A per-task timeout turns into a deadline that starts when the task
#   starts running (queue time does not count) and surfaces as a
#   "timed_out" result.  Any exception in a task fails the whole stage.

import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed

from tqdm import tqdm

from domain_pagerank.errors import PartitionFailedError
from domain_pagerank.stage3_pagerank import CONVERGED, EMPTY, NOT_CONVERGED, TIMED_OUT, compute_pagerank
from domain_pagerank.utils import print_stage, print_step, print_success, print_summary_box, Timer


def _run_partition(graph, config):
    """Worker body: run local PageRank on one partition."""
    deadline = None
    if config.task_timeout is not None:
        deadline = time.monotonic() + config.task_timeout
    result = compute_pagerank(graph, config, initialize=True, deadline=deadline)
    return result, graph.rank_prev


def _make_executor(config, n_tasks):
    workers = max(1, min(config.workers, n_tasks))
    if config.executor == "process":
        return ProcessPoolExecutor(max_workers=workers), workers
    return ThreadPoolExecutor(max_workers=workers), workers


def run_partitions(partitions, config, progress=True):
    """
    Run compute_pagerank on each partition in parallel and join on all of them.

    Args:
        partitions (list[Graph]): independently built partitions
        config (PageRankConfig): engine and scheduling settings
        progress (bool): show a tqdm progress bar

    Returns:
        list[IterationResult]: one per partition, in input order

    Raises:
        PartitionFailedError: a task raised; no partial results are returned
    """
    print_stage("Schedule", "Running local PageRank per partition")

    results = [None] * len(partitions)
    rank_prevs = [None] * len(partitions)
    if not partitions:
        return results

    with Timer("Total Stage 4"):
        executor, workers = _make_executor(config, len(partitions))
        print_step(f"Launching {len(partitions)} tasks on {workers} "
                   f"{config.executor} workers...")

        with executor as pool:
            futures = {
                pool.submit(_run_partition, graph, config): idx
                for idx, graph in enumerate(partitions)
            }

            with tqdm(
                total=len(futures),
                desc="  Partitions",
                unit="task",
                bar_format="  {l_bar}{bar:30}{r_bar}",
                ncols=90,
                disable=not progress,
            ) as pbar:
                for future in as_completed(futures):
                    idx = futures[future]
                    try:
                        result, rank_prev = future.result()
                    except Exception as exc:
                        for pending in futures:
                            pending.cancel()
                        raise PartitionFailedError(partitions[idx].domain_key, exc) from exc
                    results[idx] = result
                    rank_prevs[idx] = rank_prev
                    pbar.update(1)

        # Barrier passed: every task is done.  Adopt ranks from worker copies.
        for graph, result, rank_prev in zip(partitions, results, rank_prevs):
            graph.rank_prev = rank_prev
            graph.rank_curr = dict(result.ranks)

        converged = sum(1 for r in results if r.converged)
        print_success(f"{converged}/{len(results)} partitions converged")
        print_summary_box("Stage 4 Summary", {
            "Converged": sum(1 for r in results if r.status == CONVERGED),
            "Empty": sum(1 for r in results if r.status == EMPTY),
            "Not converged": sum(1 for r in results if r.status == NOT_CONVERGED),
            "Timed out": sum(1 for r in results if r.status == TIMED_OUT),
            "Max iterations": max(r.iterations for r in results),
        })

    return results
