from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple
from .datatypes import RankConfig, Sentence
from .preprocessing import PreprocessConfig, keyword_tokens, preprocess_text
from .graphing import build_keyword_graph, build_sentence_graph
from .scoring import RankSolver
from .selection import rank_order, select

logger = logging.getLogger(__name__)

def rank_keywords(tokens: Sequence[str], config: Optional[RankConfig] = None, window: int = 3,
                  max_workers: Optional[int] = None) -> List[Tuple[str, float]]:
    graph = build_keyword_graph(tokens, config, window=window)
    scores = RankSolver(graph, config, max_workers=max_workers).solve()
    return rank_order(scores, tokens)

def rank_sentences(sentences: Sequence[Sentence], config: Optional[RankConfig] = None,
                   max_workers: Optional[int] = None) -> List[Tuple[str, float]]:
    graph = build_sentence_graph(sentences, config)
    scores = RankSolver(graph, config, max_workers=max_workers).solve()
    return [(s.text, score) for s, score in rank_order(scores, sentences)]

def keywords(text: str, count: Optional[int] = None, compression: Optional[float] = None,
             cfg: Optional[PreprocessConfig] = None, config: Optional[RankConfig] = None,
             window: int = 3) -> List[str]:
    """Keywords of `text`, most relevant first."""
    tokens = keyword_tokens(text, cfg)
    ranked = rank_keywords(tokens, config, window=window)
    logger.debug("ranked %d keywords from %d tokens", len(ranked), len(tokens))
    return [word for word, _ in select(ranked, count=count, compression=compression)]

def summarize(text: str, count: Optional[int] = None, compression: Optional[float] = None,
              cfg: Optional[PreprocessConfig] = None, config: Optional[RankConfig] = None) -> List[str]:
    """
    Sentences of `text` ordered by relevance (not by position in the text).

    Pipeline glue: split and normalize sentences, build the overlap graph,
    rank, then truncate by count or compression.
    """
    doc = preprocess_text(text, cfg=cfg)
    ranked = rank_sentences(doc.sentences, config)
    logger.debug("ranked %d of %d sentences", len(ranked), len(doc.sentences))
    return [sentence for sentence, _ in select(ranked, count=count, compression=compression)]
