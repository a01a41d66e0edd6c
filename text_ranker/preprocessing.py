from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional
from .datatypes import Document, Sentence

_WORD_RE = re.compile(r"""[A-Za-z0-9_]+(?:'[A-Za-z0-9_]+)?""")  # simple token rule
_LETTERS_RE = re.compile(r"[^\W\d_]+")  # runs of letters only

STOPWORDS = frozenset({
    # minimal English stopword set (extend as needed)
    'the','a','an','and','or','but','if','then','else','for','to','of','in','on','at','by','with','as',
    'is','are','was','were','be','been','being','this','that','these','those','it','its','from','into',
    'we','you','they','he','she','i','me','my','your','our','their','his','her','them','us','do','does',
    'did','not','no','so','than','too','very','can','could','should','would','will','shall',
    'about','above','after','again','against','all','also','am','any','because','before','below',
    'between','both','down','during','each','few','further','had','has','have','having','here','how',
    'just','more','most','much','must','nor','now','off','once','only','other','out','over','own',
    'same','some','such','there','through','under','until','up','what','when','where','which',
    'while','who','whom','why','yet','itself','himself','herself','themselves','yourself','ours',
    'theirs','may','might','many','one','get','got','like','since','though','although','either',
    'per','via','upon','within','without','whether','ever','even','still','already','almost',
})

def _simple_stem(token: str) -> str:
    # Very light stemmer for English as a placeholder; avoid external deps
    t = token.lower()
    if len(t) > 4 and t.endswith("ies"):
        return t[:-3] + "y"     # stories -> story
    if len(t) > 3 and t.endswith("ing"):
        return t[:-3]           # playing -> play
    if len(t) > 2 and t.endswith("ed"):
        return t[:-2]           # worked -> work
    if len(t) > 3 and t.endswith("es"):
        return t[:-2]           # boxes -> box
    if len(t) > 3 and t.endswith("s") and not t.endswith("ss"):
        return t[:-1]           # books -> book
    return t

@dataclass
class PreprocessConfig:
    lowercase: bool = True
    remove_stopwords: bool = True
    stemming: bool = True
    min_keyword_length: int = 3
    # injected collaborators; the ranking engine never reads these directly
    stopwords: FrozenSet[str] = field(default=STOPWORDS)
    stemmer: Callable[[str], str] = field(default=_simple_stem)

def split_sentences(text: str) -> List[str]:
    # Split on . ! ? while keeping order; naive but serviceable
    parts = re.split(r"(?<=[.!?])\s+", text.strip())
    parts = [p.strip() for p in parts if p.strip()]
    return parts

def keyword_tokens(text: str, cfg: Optional[PreprocessConfig] = None) -> List[str]:
    """Lowercased letter runs, length- and stopword-filtered. Not stemmed."""
    cfg = cfg or PreprocessConfig()
    toks = _LETTERS_RE.findall(text.lower())
    toks = [t for t in toks if len(t) >= cfg.min_keyword_length]
    if cfg.remove_stopwords:
        toks = [t for t in toks if t not in cfg.stopwords]
    return toks

def content_words(text: str, cfg: Optional[PreprocessConfig] = None) -> List[str]:
    cfg = cfg or PreprocessConfig()
    if cfg.lowercase:
        text = text.lower()
    toks = [m.group(0) for m in _WORD_RE.finditer(text)]
    if cfg.remove_stopwords:
        toks = [t for t in toks if t.lower() not in cfg.stopwords]
    if cfg.stemming:
        toks = [cfg.stemmer(t) for t in toks]
    return toks

def preprocess_text(text: str, cfg: Optional[PreprocessConfig] = None) -> Document:
    cfg = cfg or PreprocessConfig()
    sentences = [Sentence(text=s, words=tuple(content_words(s, cfg))) for s in split_sentences(text)]
    return Document(raw_text=text, sentences=sentences)
