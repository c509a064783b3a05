# graph.py
#
# Project: Domain-Partitioned PageRank
# Author:  Haozhe Jia <jimmyjia@bu.edu>
# Course:  CS528 Cloud Computing, Boston University, Spring 2026
#
# Description:
#   Link-graph container used by every stage.  A Graph stores reverse
#   adjacency (who links to a page) rather than forward adjacency, because
#   the rank update for a page only ever reads its incoming neighbours:
#
#       PR(A) = (1-d)/N + d * (PR(T1)/C(T1) + ... + PR(Tn)/C(Tn))
#
#   where T1..Tn are the pages linking to A and C(Ti) is the out-degree
#   of Ti.  [ref: Page et al. (1999)]

from dataclasses import dataclass, field

from domain_pagerank.utils import top_k


@dataclass
class Graph:
    """
    A (sub)graph of the web-link graph.

    Attributes:
        domain_key (str): partition this graph belongs to ("" = root bucket)
        nodes (list[str]): distinct URLs in first-seen order
        incoming (dict): url -> list of source urls linking to it
        out_degree (dict): url -> number of recorded outgoing edges
        rank_prev (dict): url -> rank at the previous iteration
        rank_curr (dict): url -> rank at the current iteration
    """
    domain_key: str = ""
    nodes: list = field(default_factory=list)
    incoming: dict = field(default_factory=dict)
    out_degree: dict = field(default_factory=dict)
    rank_prev: dict = field(default_factory=dict)
    rank_curr: dict = field(default_factory=dict)

    def __post_init__(self):
        self._seen = set(self.nodes)

    def __len__(self):
        return len(self.nodes)

    def __contains__(self, url):
        return url in self._seen

    def add_node(self, url):
        """Append `url` to `nodes` on first sight.  Returns True if it was new."""
        if url in self._seen:
            return False
        self._seen.add(url)
        self.nodes.append(url)
        return True

    def add_edge(self, src, dest):
        """
        Record the directed edge src -> dest.

        The source always gets an out_degree entry before it is appended to
        incoming[dest], so every incoming source has out_degree >= 1.
        """
        self.add_node(src)
        self.add_node(dest)
        self.out_degree[src] = self.out_degree.get(src, 0) + 1
        self.incoming.setdefault(dest, []).append(src)

    def edge_count(self):
        return sum(self.out_degree.values())

    def top(self, k):
        """Return the `k` highest-ranked (url, score) pairs from rank_curr."""
        return top_k(self.rank_curr, k)
