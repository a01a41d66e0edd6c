from __future__ import annotations
import logging
import math
from itertools import combinations
from typing import Dict, Generic, Iterator, List, Optional, Sequence, Tuple

import networkx as nx

from .datatypes import RankConfig, Sentence, V

logger = logging.getLogger(__name__)

class WeightedGraph(Generic[V]):
    """
    Directed weighted graph indexed by target.

    For every target the graph keeps the sources pointing at it, one entry
    per add_edge call (repeats included), because a rank pass sums incoming
    contributions and each repeat carries its own share of the source score.
    Out-degree counts every add_edge call made with a vertex as source,
    repeats included. Weights are stored per ordered pair, last write wins.
    """

    def __init__(self, config: Optional[RankConfig] = None):
        self.config = config or RankConfig()
        self.incoming: Dict[V, List[V]] = {}
        self.out_degree: Dict[V, float] = {}
        self.weights: Dict[Tuple[V, V], float] = {}
        self.scores: Dict[V, float] = {}

    def add_vertex(self, vertex: V) -> None:
        self.scores.setdefault(vertex, self.config.initial_score)

    def add_edge(self, source: V, target: V, weight: float = 1.0) -> None:
        if source == target:
            return
        self.add_vertex(source)
        self.add_vertex(target)
        self.incoming.setdefault(target, []).append(source)
        self.out_degree[source] = self.out_degree.get(source, 0.0) + 1.0
        self.weights[(source, target)] = weight

    @property
    def vertices(self) -> List[V]:
        return list(self.scores)

    @property
    def edge_count(self) -> int:
        return len(self.weights)

    def sources(self, target: V) -> List[V]:
        return list(self.incoming.get(target, ()))

    def weight(self, source: V, target: V) -> float:
        return self.weights.get((source, target), 0.0)

    def edges(self) -> Iterator[Tuple[V, V, float]]:
        for (source, target), w in self.weights.items():
            yield source, target, w

    def __len__(self) -> int:
        return len(self.scores)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self.scores

def build_keyword_graph(tokens: Sequence[str], config: Optional[RankConfig] = None,
                        window: int = 3) -> WeightedGraph[str]:
    """
    Co-occurrence graph: every token points at each token within `window`
    positions on either side. The reverse edge comes from scanning the other
    token's position, so no explicit symmetrization is done here.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    graph: WeightedGraph[str] = WeightedGraph(config)
    n = len(tokens)
    for i, node in enumerate(tokens):
        lo, hi = max(0, i - window), min(n, i + window + 1)
        for word in tokens[lo:hi]:
            graph.add_edge(node, word)
    logger.debug("keyword graph: %d tokens -> %d vertices, %d edges (window=%d)",
                 n, len(graph), graph.edge_count, window)
    return graph

def sentence_similarity(a: Sentence, b: Sentence) -> float:
    # |a's words found in b| / (ln|a| + ln|b|)
    # a sentence with fewer than two words contributes nothing
    if len(a.words) < 2 or len(b.words) < 2:
        return 0.0
    others = set(b.words)
    overlap = sum(1 for w in a.words if w in others)
    denom = math.log(len(a.words)) + math.log(len(b.words))
    sim = overlap / denom
    return sim if math.isfinite(sim) else 0.0

def build_sentence_graph(sentences: Sequence[Sentence],
                         config: Optional[RankConfig] = None) -> WeightedGraph[Sentence]:
    graph: WeightedGraph[Sentence] = WeightedGraph(config)
    for a, b in combinations(sentences, 2):
        w = sentence_similarity(a, b)
        graph.add_edge(a, b, w)
        graph.add_edge(b, a, w)
    logger.debug("sentence graph: %d sentences -> %d vertices, %d edges",
                 len(sentences), len(graph), graph.edge_count)
    return graph

def to_networkx(graph: WeightedGraph, label=None) -> nx.DiGraph:
    """Export to a networkx DiGraph (for drawing); `label` maps a vertex to a node key."""
    label = label or (lambda v: v)
    G = nx.DiGraph()
    for v in graph.vertices:
        G.add_node(label(v), out_degree=graph.out_degree.get(v, 0.0))
    for source, target, w in graph.edges():
        G.add_edge(label(source), label(target), weight=w)
    return G
