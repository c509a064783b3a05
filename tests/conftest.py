import pytest

from domain_pagerank.config import PageRankConfig
from tests.helpers import A_X, B_X, C_Y, D_Y


@pytest.fixture
def config():
    return PageRankConfig()


@pytest.fixture
def literal_lines():
    return [
        "http://a.x.calpoly.edu -> http://b.x.calpoly.edu;",
        "http://b.x.calpoly.edu -> http://a.x.calpoly.edu;",
    ]


@pytest.fixture
def multi_domain_edges():
    """Two domains, each a 2-cycle, joined by a -> c and c -> a."""
    return [
        (A_X, B_X),
        (B_X, A_X),
        (A_X, C_Y),
        (C_Y, D_Y),
        (D_Y, C_Y),
        (C_Y, A_X),
    ]


@pytest.fixture
def tail_edges():
    """z has no incoming links and feeds a 2-cycle a <-> b."""
    return [
        ("http://z.t.calpoly.edu", "http://a.t.calpoly.edu"),
        ("http://a.t.calpoly.edu", "http://b.t.calpoly.edu"),
        ("http://b.t.calpoly.edu", "http://a.t.calpoly.edu"),
    ]
