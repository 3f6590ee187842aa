"""Text preprocessing: tokenization, tier vocabulary and term-frequency vectors."""

import logging
from collections import Counter
from typing import Iterable, List, Sequence

import regex

from ..schemas.document import Document, TextFeatures

logger = logging.getLogger(__name__)

# Separator: anything that is neither Unicode Alphabetic nor numeric.
# Alphabetic covers combining vowel signs (Devanagari, Thai, ...).
_SEPARATOR_RE = regex.compile(r"[^\p{Alphabetic}\p{N}]+")

STOP_WORDS = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "am", "an",
    "and", "any", "are", "as", "at", "be", "because", "been", "before",
    "being", "below", "between", "both", "but", "by", "can", "could", "did",
    "do", "does", "doing", "down", "during", "each", "few", "for", "from",
    "further", "had", "has", "have", "having", "he", "her", "here", "hers",
    "herself", "him", "himself", "his", "how", "i", "if", "in", "into", "is",
    "it", "its", "itself", "just", "me", "more", "most", "my", "myself", "no",
    "nor", "not", "now", "of", "off", "on", "once", "only", "or", "other",
    "our", "ours", "ourselves", "out", "over", "own", "same", "she", "should",
    "so", "some", "such", "than", "that", "the", "their", "theirs", "them",
    "themselves", "then", "there", "these", "they", "this", "those",
    "through", "to", "too", "under", "until", "up", "very", "was", "we",
    "were", "what", "when", "where", "which", "while", "who", "whom", "why",
    "will", "with", "would", "you", "your", "yours", "yourself", "yourselves",
})


def tokenize(text: str) -> List[str]:
    """Split text into lowercase alphanumeric tokens.

    Any character that is neither alphabetic nor numeric is a separator;
    empty pieces are dropped.

    Examples:
        >>> tokenize("Hello, World! 42x")
        ['hello', 'world', '42x']
        >>> tokenize("  --  ")
        []
    """
    return [token for token in _SEPARATOR_RE.split(text.lower()) if token]


def build_vocabulary(
    documents: Iterable[Document],
    stop_words: frozenset = STOP_WORDS,
) -> List[str]:
    """Build the sorted, deduplicated vocabulary of a tier.

    Args:
        documents: All documents of one tier
        stop_words: Tokens excluded from the vocabulary

    Returns:
        Lexicographically sorted list of unique tokens
    """
    terms = set()
    for document in documents:
        terms.update(tokenize(document.text))

    vocabulary = sorted(terms - stop_words)
    logger.debug(f"Built vocabulary of {len(vocabulary)} terms")
    return vocabulary


def vectorize(text: str, vocabulary: Sequence[str]) -> List[float]:
    """Compute the term-frequency vector of text over a vocabulary.

    Each component is ``count / total_token_count``, where the total counts
    every token of the text (including tokens outside the vocabulary).
    A text without tokens yields an all-zero vector.
    """
    tokens = tokenize(text)
    total = len(tokens)
    if total == 0:
        return [0.0] * len(vocabulary)

    counts = Counter(tokens)
    return [counts.get(term, 0) / total for term in vocabulary]


class TextFeatureExtractor:
    """Turns documents into term-frequency vectors over a fixed vocabulary."""

    def __init__(self, vocabulary: Sequence[str]):
        """Initialize extractor.

        Args:
            vocabulary: Tier vocabulary, shared read-only by every extraction
        """
        self.vocabulary = list(vocabulary)

    @classmethod
    def for_documents(cls, documents: Iterable[Document]) -> "TextFeatureExtractor":
        """Create an extractor over the vocabulary of the given documents."""
        return cls(build_vocabulary(documents))

    def extract(self, document: Document) -> TextFeatures:
        return TextFeatures(
            filename=document.filename,
            tfidf_vector=vectorize(document.text, self.vocabulary),
        )
