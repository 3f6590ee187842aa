"""Tests for tokenizer, vocabulary builder and term-frequency vectors."""

import pytest

from page_clusterer.preprocessing.text import (
    STOP_WORDS,
    TextFeatureExtractor,
    build_vocabulary,
    tokenize,
    vectorize,
)
from page_clusterer.schemas.document import Document


def _doc(filename: str, text: str) -> Document:
    return Document(filename=filename, text=text)


class TestTokenize:
    """Test suite for tokenize()."""

    def test_lowercases_and_splits(self) -> None:
        assert tokenize("Hello, World!") == ["hello", "world"]

    def test_keeps_digits(self) -> None:
        assert tokenize("Page 42 of 100x") == ["page", "42", "of", "100x"]

    def test_splits_on_underscore_and_punctuation(self) -> None:
        assert tokenize("snake_case-word.dot") == ["snake", "case", "word", "dot"]

    def test_unicode_letters_are_alphanumeric(self) -> None:
        assert tokenize("Ștefan și Ärger") == ["ștefan", "și", "ärger"]

    def test_combining_vowel_signs_stay_in_word(self) -> None:
        # Devanagari and Thai vowel signs are marks, not letters
        assert tokenize("भारत भाषा") == ["भारत", "भाषा"]
        assert tokenize("สวัสดี ครับ") == ["สวัสดี", "ครับ"]

    def test_numerals_of_other_scripts(self) -> None:
        assert tokenize("page ٤٢ ½") == ["page", "٤٢", "½"]

    def test_empty_and_separator_only(self) -> None:
        assert tokenize("") == []
        assert tokenize(" \n\t--!! ") == []

    def test_no_stemming(self) -> None:
        assert tokenize("running runs ran") == ["running", "runs", "ran"]


class TestBuildVocabulary:
    """Test suite for build_vocabulary()."""

    def test_sorted_and_unique(self) -> None:
        docs = [_doc("1", "zeta alpha beta"), _doc("2", "beta gamma alpha")]
        assert build_vocabulary(docs) == ["alpha", "beta", "gamma", "zeta"]

    def test_excludes_stop_words(self) -> None:
        docs = [_doc("1", "The cat and the hat")]
        assert build_vocabulary(docs) == ["cat", "hat"]

    def test_stop_word_list_is_fixed_english(self) -> None:
        assert "the" in STOP_WORDS
        assert "and" in STOP_WORDS
        assert "cat" not in STOP_WORDS

    def test_empty_documents(self) -> None:
        assert build_vocabulary([]) == []
        assert build_vocabulary([_doc("1", "")]) == []

    def test_deterministic_regardless_of_document_order(self) -> None:
        docs = [_doc("1", "delta bravo"), _doc("2", "charlie alpha")]
        assert build_vocabulary(docs) == build_vocabulary(list(reversed(docs)))


class TestVectorize:
    """Test suite for vectorize()."""

    def test_scenario_two_of_three_terms(self) -> None:
        assert vectorize("a b", ["a", "b", "c"]) == [0.5, 0.5, 0.0]

    def test_scenario_all_three_terms(self) -> None:
        vector = vectorize("a b c", ["a", "b", "c"])
        assert vector == pytest.approx([1 / 3, 1 / 3, 1 / 3])

    def test_repeated_terms(self) -> None:
        assert vectorize("x x y x", ["x", "y"]) == [0.75, 0.25]

    def test_zero_tokens_yield_zero_vector(self) -> None:
        assert vectorize("", ["a", "b"]) == [0.0, 0.0]
        assert vectorize("!!!", ["a", "b"]) == [0.0, 0.0]

    def test_denominator_counts_out_of_vocabulary_tokens(self) -> None:
        # "the" is not in the vocabulary but still counts as a token
        assert vectorize("the cat", ["cat"]) == [0.5]

    def test_length_matches_vocabulary(self) -> None:
        vocabulary = ["a", "b", "c", "d"]
        assert len(vectorize("anything else", vocabulary)) == len(vocabulary)

    def test_empty_vocabulary(self) -> None:
        assert vectorize("some text", []) == []


class TestTextFeatureExtractor:
    """Test suite for TextFeatureExtractor."""

    def test_for_documents_builds_shared_vocabulary(self) -> None:
        docs = [_doc("d1", "apple banana"), _doc("d2", "banana cherry")]
        extractor = TextFeatureExtractor.for_documents(docs)

        assert extractor.vocabulary == ["apple", "banana", "cherry"]

        features = [extractor.extract(doc) for doc in docs]
        assert [f.filename for f in features] == ["d1", "d2"]
        assert features[0].tfidf_vector == [0.5, 0.5, 0.0]
        assert features[1].tfidf_vector == [0.0, 0.5, 0.5]
        assert all(len(f.tfidf_vector) == 3 for f in features)

    def test_vocabulary_is_copied(self) -> None:
        vocabulary = ["a"]
        extractor = TextFeatureExtractor(vocabulary)
        vocabulary.append("b")
        assert extractor.vocabulary == ["a"]
