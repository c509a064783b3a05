# errors.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Exception types raised by the pipeline.  Lines that fail to parse as
#   edges are not errors (they are skipped), and an empty partition is a
#   result status, so neither has an exception class here.


class PageRankError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(PageRankError, ValueError):
    """A configuration value is out of range or unknown."""


class EdgeSourceError(PageRankError, OSError):
    """The edge source could not be read.  Fatal, never retried."""

    def __init__(self, source, reason):
        super().__init__(f"cannot read edge source {source!r}: {reason}")
        self.source = source
        self.reason = reason


class NonConvergenceError(PageRankError):
    """Power iteration stopped before the L1 distance dropped below epsilon."""

    def __init__(self, result):
        super().__init__(
            f"partition {result.domain_key!r} {result.status} after "
            f"{result.iterations} iterations (L1 distance {result.distance:.3e})"
        )
        self.result = result


class PartitionFailedError(PageRankError):
    """A scheduled partition task raised; the whole run is abandoned."""

    def __init__(self, domain_key, cause):
        super().__init__(f"partition {domain_key!r} failed: {cause!r}")
        self.domain_key = domain_key


class MergeCollisionError(PageRankError):
    """The same owned node was exported by more than one partition."""

    def __init__(self, url, first_domain, second_domain):
        super().__init__(
            f"node {url!r} claimed by partitions {first_domain!r} and {second_domain!r}"
        )
        self.url = url
        self.domains = (first_domain, second_domain)
