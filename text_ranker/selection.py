from __future__ import annotations
import math
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

from .datatypes import Sentence

def rank_order(scores: Dict[Hashable, float], source: Iterable[Hashable]) -> List[Tuple[Hashable, float]]:
    """
    Order a score map best first.

    Ties keep the order in which items first appear in `source`; scored
    items missing from `source` sort after those, in score-map order.
    """
    position: Dict[Hashable, int] = {}
    for item in source:
        position.setdefault(item, len(position))
    tail = len(position)
    keyed = []
    for i, (item, score) in enumerate(scores.items()):
        keyed.append((-score, position.get(item, tail + i), item, score))
    keyed.sort(key=lambda x: (x[0], x[1]))
    return [(item, score) for _, _, item, score in keyed]

def select(ranked: Sequence, count: Optional[int] = None, compression: Optional[float] = None) -> list:
    """
    Truncate a ranked list.

    count: keep the first `count` items (none when count <= 0).
    compression: fraction to drop, in [0, 1]; anything outside that range
        yields an empty list. Keeps floor((1 - compression) * len) items.
    With neither argument the whole list is returned.
    """
    if count is not None and compression is not None:
        raise ValueError("count and compression are mutually exclusive")
    if count is not None:
        return list(ranked[:count]) if count > 0 else []
    if compression is not None:
        if not 0.0 <= compression <= 1.0:
            return []
        keep = math.floor((1.0 - compression) * len(ranked))
        return list(ranked[:keep])
    return list(ranked)

def in_document_order(selected: Iterable[Sentence], sentences: Sequence[Sentence]) -> List[Sentence]:
    # summaries come back in rank order; this restores reading order
    position = {}
    for i, s in enumerate(sentences):
        position.setdefault(s, i)
    return sorted(selected, key=lambda s: position.get(s, len(position)))
