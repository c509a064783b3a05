# main.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Entry point for the partitioned PageRank pipeline. Reads a crawler edge
#   list (local file, gs:// object or URL), splits it by domain, runs
#   PageRank on each domain in parallel, merges the partitions and refines
#   the result globally.  Optionally compares against the whole-graph run.
#
# References:
#   [1] Page, L., Brin, S., Motwani, R., & Winograd, T. (1999).
#       "The PageRank Citation Ranking: Bringing Order to the Web."
#       http://dbpubs.stanford.edu:8090/pub/showDoc.Fulltext?lang=en&doc=1999-66&format=pdf

import argparse
import sys

import domain_pagerank.pipeline
import domain_pagerank.stage1_read
import domain_pagerank.stage6_validation
import domain_pagerank.utils as utils
from domain_pagerank.config import PageRankConfig
from domain_pagerank.errors import PageRankError


def build_parser():
    parser = argparse.ArgumentParser(description="Domain-partitioned PageRank")
    parser.add_argument('--input', default='./dot_files/auth.gv',
                        help="Edge list: local path, gs://bucket/object or http(s) URL")
    parser.add_argument('--top', type=int, default=20, help="Number of top pages to print")
    parser.add_argument('--damping', type=float, default=0.9)
    parser.add_argument('--epsilon', type=float, default=1e-4)
    parser.add_argument('--max-iterations', type=int, default=1000)
    parser.add_argument('--precision', default='float32', choices=['float32', 'float64'])
    parser.add_argument('--root-label', default='calpoly',
                        help="Hostname label whose left neighbour names the domain")
    parser.add_argument('--merge-policy', default='first', choices=['first', 'error', 'mean'])
    parser.add_argument('--executor', default='thread', choices=['thread', 'process'])
    parser.add_argument('--workers', type=int, default=None)
    parser.add_argument('--task-timeout', type=float, default=None,
                        help="Per-partition deadline in seconds")
    parser.add_argument('--strict', action='store_true',
                        help="Fail if any PageRank run does not converge")
    parser.add_argument('--per-domain', action='store_true',
                        help="Also print the top page of every domain")
    parser.add_argument('--validate', action='store_true',
                        help="Compare with the whole-graph run and NetworkX")
    parser.add_argument('--no-progress', action='store_true')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    utils.print_project_banner()

    try:
        config = PageRankConfig(
            damping=args.damping,
            epsilon=args.epsilon,
            max_iterations=args.max_iterations,
            precision=args.precision,
            root_label=args.root_label,
            merge_policy=args.merge_policy,
            executor=args.executor,
            max_workers=args.workers,
            task_timeout=args.task_timeout,
            strict=args.strict,
        )

        # Stage 1
        edges = domain_pagerank.stage1_read.read_edges(args.input)

        # Stages 2-5 + refinement
        result = domain_pagerank.pipeline.run_distributed(
            edges, config, progress=not args.no_progress
        )

        # Stage 6
        if args.validate:
            sequential = domain_pagerank.pipeline.run_sequential(edges, config)
            domain_pagerank.stage6_validation.validate(
                result.ranks, sequential.ranks, edges=edges, damping=config.damping
            )
    except PageRankError as exc:
        utils.print_error(f"{args.input}: {exc}")
        return 1

    if args.per_domain:
        utils.print_stage("Domains", "Top page per domain")
        for domain, best in domain_pagerank.pipeline.top_per_domain(
                result.ranks, config.root_label).items():
            print(f"{domain or '(root)'}:\t{utils.format_top(dict(best), 1)}")

    print(utils.format_top(result.ranks, args.top))
    return 0


if __name__ == "__main__":
    sys.exit(main())
