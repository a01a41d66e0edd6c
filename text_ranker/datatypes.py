from __future__ import annotations
from dataclasses import dataclass, field
from typing import Hashable, List, Tuple, TypeVar

V = TypeVar("V", bound=Hashable)

@dataclass(frozen=True)
class Sentence:
    # identity is the original text; words only feed the similarity weight
    text: str
    words: Tuple[str, ...] = field(default=(), compare=False)

@dataclass
class Document:
    raw_text: str
    sentences: List[Sentence]

@dataclass(frozen=True)
class RankConfig:
    initial_score: float = 0.15
    damping_factor: float = 0.85
    convergence_threshold: float = 0.01
    max_iterations: int = 100
    min_iterations: int = 10

    def __post_init__(self):
        if not 0.0 < self.initial_score < 1.0:
            raise ValueError(f"initial_score must be in (0, 1), got {self.initial_score}")
        if not 0.0 < self.damping_factor < 1.0:
            raise ValueError(f"damping_factor must be in (0, 1), got {self.damping_factor}")
        if not self.convergence_threshold > 0.0:
            raise ValueError(f"convergence_threshold must be positive, got {self.convergence_threshold}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.min_iterations < 0:
            raise ValueError(f"min_iterations must be non-negative, got {self.min_iterations}")
