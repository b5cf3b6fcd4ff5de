"""TF-IDF channel scoring for content-based recommendations.

Scores a corpus of short product texts against one query string. The corpus
is built per call; nothing is fitted ahead of time or kept between calls.
"""

import logging
from collections import Counter
from typing import Callable, List, Optional, Sequence, Union

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS, CountVectorizer

# Configure module logger
logger = logging.getLogger(__name__)

# Constants
# Split on anything that is not a word character, keep single-letter tokens
TOKEN_PATTERN = r"(?u)\b\w+\b"

# Words in scikit-learn's English list that name garments, cuts or sets
APPAREL_TERMS = frozenset(
    {"back", "bottom", "front", "full", "side", "top", "two", "three", "four", "five"}
)
DEFAULT_STOP_WORDS = sorted(ENGLISH_STOP_WORDS - APPAREL_TERMS)

StopWords = Optional[Union[str, List[str]]]


def build_analyzer(stop_words: StopWords = DEFAULT_STOP_WORDS) -> Callable[[str], List[str]]:
    """Get the tokenizer shared by corpus documents and queries.

    Lowercases, splits on whitespace and punctuation and drops stop words.
    """
    vectorizer = CountVectorizer(
        lowercase=True,
        token_pattern=TOKEN_PATTERN,
        stop_words=stop_words,
    )
    return vectorizer.build_analyzer()


def compute_idf(term_counts: csr_matrix) -> np.ndarray:
    """Inverse document frequency for each column of a count matrix.

    Uses ``1 + ln(N / (1 + df))``, which stays positive for any df <= N.
    """
    n_documents = term_counts.shape[0]
    document_frequency = np.asarray((term_counts > 0).sum(axis=0)).ravel()
    return 1.0 + np.log(n_documents / (1.0 + document_frequency))


def score_documents(
    documents: Sequence[str],
    query: str,
    stop_words: StopWords = DEFAULT_STOP_WORDS,
) -> List[float]:
    """Score every document against a query with TF-IDF.

    For each query token, the raw count of the token in a document is
    multiplied by the token's inverse document frequency over the corpus,
    and the products are summed per document. Repeated query tokens count
    once per repetition.

    Args:
        documents: Corpus texts, one per compared item.
        query: Text of the target item for the same channel.
        stop_words: Stop word policy passed to the tokenizer.

    Returns:
        One score per document, in input order. All zeros for a query with
        no usable tokens; empty for an empty corpus.
    """
    n_documents = len(documents)
    if n_documents == 0:
        return []

    analyzer = build_analyzer(stop_words)
    query_terms = Counter(analyzer(query or ""))
    if not query_terms:
        logger.debug("Query has no usable tokens, scoring all documents 0")
        return [0.0] * n_documents

    # Only query terms can contribute, so they are the whole vocabulary
    vocabulary = {term: idx for idx, term in enumerate(sorted(query_terms))}
    vectorizer = CountVectorizer(analyzer=analyzer, vocabulary=vocabulary)
    term_counts = vectorizer.fit_transform(documents)

    idf = compute_idf(term_counts)
    query_weights = np.zeros(len(vocabulary))
    for term, idx in vocabulary.items():
        query_weights[idx] = query_terms[term] * idf[idx]

    scores = term_counts @ query_weights
    return [float(score) for score in np.asarray(scores).ravel()]
