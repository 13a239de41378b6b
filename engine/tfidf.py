"""
Lexical TF-IDF model over a fixed corpus snapshot.

Weights:
    tf(t, d)  = count(t, d) / len(d)
    idf(t)    = ln(N / df(t))          (no smoothing; a term in every doc weighs 0)
    w(t, d)   = tf(t, d) * idf(t)

The snapshot must contain the live query as one of its documents. The model
is rebuilt per scoring call and never shared across queries.
"""

import re
from collections import Counter
from typing import Dict, List, Sequence

import numpy as np
from scipy.sparse import csr_matrix, diags
from sklearn.feature_extraction.text import CountVectorizer

SparseVector = Dict[str, float]

# ASCII word characters plus the CJK unified range; other scripts are punctuation
_NON_WORD = re.compile(r"[^\w\s一-龥]", re.ASCII)


def preprocess_text(text: str) -> List[str]:
    """Lower-case, blank out punctuation, split on whitespace."""
    if not text:
        return []
    return _NON_WORD.sub(" ", text.lower()).split()


def _identity(tokens):
    return tokens


class TfidfModel:
    """TF-IDF vectors for an ordered list of pre-tokenized documents."""

    def __init__(self, documents: Sequence[Sequence[str]]):
        self.document_count = len(documents)
        self.terms: List[str] = []
        self.idf: Dict[str, float] = {}
        self.matrix = csr_matrix((self.document_count, 0), dtype=float)

        if not any(documents):
            return

        # Documents arrive already tokenized, so the analyzer passes them through
        vectorizer = CountVectorizer(analyzer=_identity)
        counts = vectorizer.fit_transform([list(doc) for doc in documents]).astype(float)

        lengths = np.asarray(counts.sum(axis=1)).ravel()
        inv_lengths = np.divide(
            1.0, lengths, out=np.zeros_like(lengths), where=lengths > 0
        )
        doc_freq = np.asarray((counts > 0).sum(axis=0)).ravel()
        idf = np.log(self.document_count / doc_freq)

        self.terms = list(vectorizer.get_feature_names_out())
        self.idf = dict(zip(self.terms, idf.tolist()))
        self.matrix = (diags(inv_lengths) @ counts @ diags(idf)).tocsr()

    def vector(self, index: int) -> SparseVector:
        """Sparse TF-IDF vector of the document at ``index``."""
        row = self.matrix[index].tocsr()
        return {
            self.terms[j]: float(w) for j, w in zip(row.indices, row.data) if w
        }

    def vectors(self) -> List[SparseVector]:
        return [self.vector(i) for i in range(self.document_count)]

    def transform(self, tokens: Sequence[str]) -> SparseVector:
        """Weigh an arbitrary token list against this corpus; unknown terms weigh 0."""
        if not tokens:
            return {}
        total = len(tokens)
        weighted = {}
        for term, count in Counter(tokens).items():
            weight = (count / total) * self.idf.get(term, 0.0)
            if weight:
                weighted[term] = weight
        return weighted


def build_model(documents: Sequence[Sequence[str]]) -> TfidfModel:
    return TfidfModel(documents)


def cosine_similarity(vec1: SparseVector, vec2: SparseVector) -> float:
    """Cosine over the union of keys, 0.0 when either vector has zero norm."""
    keys = sorted(set(vec1) | set(vec2))
    if not keys:
        return 0.0

    a = np.array([vec1.get(k, 0.0) for k in keys])
    b = np.array([vec2.get(k, 0.0) for k in keys])
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(a, b) / (norm_a * norm_b))
    return min(max(similarity, 0.0), 1.0)
