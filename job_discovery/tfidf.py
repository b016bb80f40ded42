"""Term statistics over a reference corpus and TF-IDF query scoring."""
from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, Sequence

_SPLIT_RE = re.compile(r"[\W_]+")


def tokenize(text: str) -> list[str]:
    """Lower-case and split on non-alphanumeric runs. No minimum token length."""
    return [t for t in _SPLIT_RE.split((text or "").lower()) if t]


class TfidfScorer:
    """TF-IDF scorer with an IDF table computed once at construction.

    ``idf(t) = ln(N / (df(t) + 1))``. The +1 keeps the value finite; a token
    present in (nearly) every document therefore gets a zero or negative idf,
    which lowers rather than raises a document's score. Tokens never seen in
    the corpus have idf 0.
    """

    def __init__(self, corpus: Iterable[str] = ()) -> None:
        docs = list(corpus)
        self.corpus_size = len(docs)
        doc_freq: Counter[str] = Counter()
        for doc in docs:
            doc_freq.update(set(tokenize(doc)))
        self._idf: dict[str, float] = {
            term: math.log(self.corpus_size / (df + 1)) for term, df in doc_freq.items()
        }

    def idf(self, term: str) -> float:
        return self._idf.get(term, 0.0)

    @property
    def vocabulary(self) -> frozenset[str]:
        return frozenset(self._idf)

    def score(self, query: str, document: str) -> float:
        doc_terms = tokenize(document)
        if not doc_terms:
            return 0.0
        counts = Counter(doc_terms)
        total = len(doc_terms)
        return sum(counts[t] / total * self.idf(t) for t in tokenize(query))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors; 0.0 if either is all zeros."""
    dot = sum(x * y for x, y in zip(a, b))
    mag_a = math.sqrt(sum(x * x for x in a))
    mag_b = math.sqrt(sum(y * y for y in b))
    if mag_a == 0 or mag_b == 0:
        return 0.0
    return dot / (mag_a * mag_b)
