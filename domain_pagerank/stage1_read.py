# stage1_read.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Stage 1 — Read the crawler's Graphviz-style output and parse it into
#   (src, dest) edges.
#
#   The crawler writes one edge per line:
#       digraph {
#       http://a.x.calpoly.edu -> http://b.x.calpoly.edu;
#       }
#   Any line that is not exactly "<src> -> <dest>" is skipped without
#   comment (lenient parsing: headers, braces, blank lines, garbage).
#
#   Source auto-detection:
#     - "gs://bucket/object"  → Google Cloud Storage (authenticated client,
#                               anonymous fallback).
#     - "http://" / "https://" → fetched with requests.
#     - anything else          → local file path.
#
# References:
#   [1] Downloading objects from GCS
#       https://cloud.google.com/storage/docs/downloading-objects#download-object-python

import requests
from google.api_core import exceptions as gcs_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import storage

from domain_pagerank.errors import EdgeSourceError
from domain_pagerank.utils import print_stage, print_step, print_success, print_summary_box, Timer

EDGE_SEPARATOR = "->"
TERMINATOR = ";"


def parse_edge_line(line):
    """
    Parse one line into a (src, dest) tuple, or None if it is not an edge.

    Pure parsing logic, no I/O.
    """
    if line.count(EDGE_SEPARATOR) != 1:
        return None
    src, dest = line.split(EDGE_SEPARATOR)
    src = src.strip()
    dest = dest.strip()
    if dest.endswith(TERMINATOR):
        dest = dest[:-len(TERMINATOR)].rstrip()
    if not src or not dest:
        return None
    return src, dest


def iter_edges(lines):
    """Yield (src, dest) for every qualifying line, in input order."""
    for line in lines:
        edge = parse_edge_line(line)
        if edge is not None:
            yield edge


# ===================================================================
# Source readers: each returns the raw text of the edge file
# ===================================================================

def _read_local(path):
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()
    except OSError as exc:
        raise EdgeSourceError(path, exc.strerror or str(exc)) from exc


def _read_gcs(uri):
    """Download gs://bucket/object as text."""
    bucket_name, _, blob_name = uri[len("gs://"):].partition('/')
    if not bucket_name or not blob_name:
        raise EdgeSourceError(uri, "expected gs://<bucket>/<object>")

    try:
        client = storage.Client()
        print_success("Authenticated client")
    except (auth_exceptions.DefaultCredentialsError, OSError):
        # No ADC credentials or no project could be determined
        client = storage.Client.create_anonymous_client()
        print_success("Anonymous client (public endpoint)")

    try:
        return client.bucket(bucket_name).blob(blob_name).download_as_text()
    except gcs_exceptions.GoogleAPIError as exc:
        raise EdgeSourceError(uri, str(exc)) from exc


def _read_http(url, timeout=60):
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise EdgeSourceError(url, str(exc)) from exc
    return resp.text


def read_text(source):
    """Return the raw text of `source`, auto-detecting where it lives."""
    if source.startswith("gs://"):
        print_step(f"Detected GCS object: {source}")
        return _read_gcs(source)
    if source.startswith(("http://", "https://")):
        print_step(f"Detected URL: {source}")
        return _read_http(source)
    print_step(f"Detected local file: {source}")
    return _read_local(source)


# ===================================================================
# Unified entry point
# ===================================================================

def read_edges(source):
    """
    Read and parse an edge file.

    The edges are materialized into a list because the partitioner scans
    the stream more than once (domain discovery, then one pass per domain).

    Args:
        source (str): local path, gs:// URI or http(s):// URL

    Returns:
        list[tuple[str, str]]: (src, dest) edges in file order

    Raises:
        EdgeSourceError: the source could not be read
    """
    print_stage("Read", "Parse edge list")

    with Timer("Total Stage 1"):
        text = read_text(source)
        lines = text.splitlines()
        edges = list(iter_edges(lines))

        print_summary_box("Stage 1 Summary", {
            "Source": source,
            "Lines read": len(lines),
            "Edges parsed": len(edges),
            "Distinct sources": len({src for src, _ in edges}),
        })

    return edges
