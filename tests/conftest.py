"""Pytest fixtures for text_ranker tests."""

import pytest

from text_ranker import RankConfig, Sentence


@pytest.fixture
def solar_text() -> str:
    """A ten-sentence document with a few recurring terms."""
    return (
        "Solar panels convert sunlight into electricity for homes. "
        "Many homes now install solar panels on the roof. "
        "The electricity from solar panels can be stored in batteries. "
        "Batteries let homes use solar electricity at night. "
        "Wind turbines are another source of renewable electricity. "
        "Cheap batteries have made solar power popular with homeowners. "
        "Governments offer subsidies for renewable power installations. "
        "My neighbour prefers gardening over technology. "
        "Grid operators must balance solar and wind power carefully. "
        "Renewable electricity is growing faster than coal power."
    )


@pytest.fixture
def overlap_sentences() -> list:
    """A and B share all content words, C shares none."""
    a = Sentence(text="Cats chase mice daily.", words=("cat", "chase", "mice", "daily"))
    b = Sentence(text="Mice chase cats daily.", words=("mice", "chase", "cat", "daily"))
    c = Sentence(text="Engines burn fuel quickly.", words=("engine", "burn", "fuel", "quick"))
    return [a, b, c]


@pytest.fixture
def fast_config() -> RankConfig:
    """Tight convergence so scores are close to the fixed point."""
    return RankConfig(convergence_threshold=1e-9, max_iterations=1000, min_iterations=0)
