from .datatypes import Sentence, Document, RankConfig
from .preprocessing import PreprocessConfig, preprocess_text, keyword_tokens, content_words, split_sentences
from .graphing import WeightedGraph, build_keyword_graph, build_sentence_graph, sentence_similarity, to_networkx
from .scoring import RankSolver, rank
from .selection import rank_order, select, in_document_order
from .summarize import rank_keywords, rank_sentences, keywords, summarize
