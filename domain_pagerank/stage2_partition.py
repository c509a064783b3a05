# stage2_partition.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 2 — Split the edge list into one Graph per domain and report
#   per-partition statistics.
#
#   The domain of a URL is the hostname label immediately left of the root
#   label:  http://a.ceng.calpoly.edu/x  →  "ceng".  URLs without the root
#   label (or with it as the first label, e.g. http://calpoly.edu/) belong
#   to the root bucket "".
#
#   An edge belongs to the partition of its SOURCE.  Destinations are pulled
#   into the partition as plain nodes, so a partition can contain pages of
#   other domains that it links to; those never get an out_degree entry
#   there and are discarded again at merge time.

import numpy as np

from domain_pagerank.graph import Graph
from domain_pagerank.utils import print_stage, print_step, print_summary_box, Timer

ROOT_DOMAIN = ""
SCHEMES = ("http://", "https://")


def _hostname(url):
    for scheme in SCHEMES:
        if url.startswith(scheme):
            url = url[len(scheme):]
            break
    return url.split('/', 1)[0]


def extract_domain(url, root_label="calpoly"):
    """
    Return the domain key of `url`, or None if it has no domain association.

    >>> extract_domain("http://a.x.calpoly.edu")
    'x'
    >>> extract_domain("https://calpoly.edu/") is None
    True
    """
    labels = _hostname(url).split('.')
    for idx, label in enumerate(labels):
        if label == root_label and idx > 0:
            return labels[idx - 1]
    return None


def owner_of(url, root_label="calpoly"):
    """Partition key that owns `url`: its domain, or the root bucket."""
    domain = extract_domain(url, root_label)
    return ROOT_DOMAIN if domain is None else domain


def discover_domains(edges, root_label="calpoly"):
    """
    Collect the domain keys of every edge source.

    The root bucket "" is always present, even when no edge maps to it.
    """
    domains = {ROOT_DOMAIN}
    for src, _ in edges:
        domain = extract_domain(src, root_label)
        if domain is not None:
            domains.add(domain)
    return domains


def build_partition(edges, domain_key, root_label="calpoly"):
    """
    Build the Graph for one domain with a full scan of `edges`.

    An edge (src, dest) is kept iff src is owned by `domain_key`.

    Returns:
        Graph: may have no nodes if no edge qualifies
    """
    graph = Graph(domain_key=domain_key)
    for src, dest in edges:
        if owner_of(src, root_label) == domain_key:
            graph.add_edge(src, dest)
    return graph


def build_global_graph(edges):
    """Build a single Graph containing every edge (no partitioning)."""
    graph = Graph(domain_key=ROOT_DOMAIN)
    for src, dest in edges:
        graph.add_edge(src, dest)
    return graph


def compute_partition_stats(partitions):
    """
    Compute node/edge count statistics across partitions.

    Args:
        partitions (list[Graph]): partitions to summarize

    Returns:
        dict: display-ready statistics
    """
    node_counts = np.array([len(g) for g in partitions])
    edge_counts = np.array([g.edge_count() for g in partitions])
    empty = int(np.sum(node_counts == 0))

    return {
        "Partitions": len(partitions),
        "Empty partitions": empty,
        "Nodes (min/max)": f"{node_counts.min()} / {node_counts.max()}",
        "Nodes (mean)": f"{node_counts.mean():.2f}",
        "Nodes (median)": f"{np.median(node_counts):.2f}",
        "Edges (min/max)": f"{edge_counts.min()} / {edge_counts.max()}",
        "Edges (80th)": f"{np.percentile(edge_counts, 80):.2f}",
    }


def partition_edges(edges, root_label="calpoly"):
    """
    Discover domains and build one partition per domain.

    Partitions are returned in sorted domain order ("" first) so that
    downstream merging is deterministic.

    Args:
        edges (list[tuple[str, str]]): edge list (scanned once per domain)
        root_label (str): hostname label that anchors domain extraction

    Returns:
        list[Graph]
    """
    print_stage("Partition", "Splitting graph by domain")

    with Timer("Total Stage 2"):
        print_step("Discovering domains...")
        domains = sorted(discover_domains(edges, root_label))

        print_step(f"Building {len(domains)} partitions...")
        partitions = [build_partition(edges, domain, root_label) for domain in domains]

        print_summary_box("Partition Statistics", compute_partition_stats(partitions))

    return partitions
