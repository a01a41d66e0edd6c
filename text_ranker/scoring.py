from __future__ import annotations
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Generic, List, Optional, Sequence

import numpy as np

from .datatypes import RankConfig, V
from .graphing import WeightedGraph

logger = logging.getLogger(__name__)

class RankSolver(Generic[V]):
    """
    PageRank-style fixed point over a WeightedGraph.

    PR(v) = (1-d)/N + d × Σ_u PR(u) / out(u) × w(u, v)

    Every pass reads only the previous snapshot (synchronous update).
    With `max_workers` > 1 the vertices of a pass are split into chunks that
    are scored into private dicts on a thread pool and merged in vertex
    order before the next pass starts.

    After solve(), `iterations` holds the number of completed passes and
    `converged` tells whether the loop stopped before max_iterations.
    """

    def __init__(self, graph: WeightedGraph[V], config: Optional[RankConfig] = None,
                 max_workers: Optional[int] = None):
        self.graph = graph
        self.config = config or graph.config
        self.max_workers = max_workers
        self.iterations = 0
        self.converged = False

    def solve(self) -> Dict[V, float]:
        """
        Run passes until convergence or max_iterations.

        Returns:
            Mapping vertex -> score; empty when the graph has no vertices.
        """
        cfg = self.config
        self.iterations = 0
        self.converged = False
        if len(self.graph) == 0:
            return {}

        current = {v: cfg.initial_score for v in self.graph.vertices}
        while self.iterations < cfg.max_iterations:
            step = self._iteration(current)
            if step is None:
                logger.debug("pass %d produced invalid scores, keeping previous snapshot",
                             self.iterations + 1)
                return current
            self.iterations += 1

            if step == current:
                self.converged = True
                break
            if self.iterations >= cfg.min_iterations and self._has_converged(step, current):
                self.converged = True
                current = step
                break
            current = step

        if self.converged:
            logger.debug("converged after %d passes (%d vertices)", self.iterations, len(current))
        else:
            logger.debug("stopped at max_iterations=%d without converging", cfg.max_iterations)
        return current

    def _iteration(self, current: Dict[V, float]) -> Optional[Dict[V, float]]:
        n = len(current)
        if n == 0:
            return None
        vertices = self.graph.vertices
        workers = self.max_workers or 1
        if workers > 1 and len(vertices) > workers:
            size = math.ceil(len(vertices) / workers)
            chunks = [vertices[i:i + size] for i in range(0, len(vertices), size)]
            with ThreadPoolExecutor(max_workers=workers) as executor:
                parts = list(executor.map(lambda chunk: self._score_chunk(chunk, current, n), chunks))
        else:
            parts = [self._score_chunk(vertices, current, n)]

        step: Dict[V, float] = {}
        for part in parts:
            step.update(part)
        if not step or not all(math.isfinite(s) for s in step.values()):
            return None
        return step

    def _score_chunk(self, vertices: Sequence[V], current: Dict[V, float], n: int) -> Dict[V, float]:
        d = self.config.damping_factor
        out: Dict[V, float] = {}
        for v in vertices:
            out[v] = (1.0 - d) / n + d * self._incoming_sum(v, current)
        return out

    def _incoming_sum(self, v: V, current: Dict[V, float]) -> float:
        total = 0.0
        for u in self.graph.incoming.get(v, ()):
            degree = self.graph.out_degree.get(u, 0.0)
            if not (degree > 0 and math.isfinite(degree)):
                continue
            contribution = current.get(u, 0.0) / degree * self.graph.weight(u, v)
            if not math.isfinite(contribution):
                continue
            total += contribution
        return total

    def _has_converged(self, step: Dict[V, float], previous: Dict[V, float]) -> bool:
        diffs: List[float] = []
        for key, before in previous.items():
            after = step.get(key)
            if after is None or not (math.isfinite(after) and math.isfinite(before)):
                continue
            diffs.append(after - before)
        if not diffs:
            return False
        with np.errstate(over="ignore"):
            rmse = float(np.sqrt(np.mean(np.square(diffs))))
        # an overflowing square means the snapshots are far apart
        return math.isfinite(rmse) and rmse < self.config.convergence_threshold

def rank(graph: WeightedGraph[V], config: Optional[RankConfig] = None,
         max_workers: Optional[int] = None) -> Dict[V, float]:
    return RankSolver(graph, config, max_workers=max_workers).solve()
