"""
Unit tests for the lexical TF-IDF model and cosine similarity.

Run with: uv run pytest tests/test_tfidf.py -v
"""

import math
import sys
import os

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine.tfidf import TfidfModel, build_model, cosine_similarity, preprocess_text


# =============================================================================
#                            TOKENIZATION
# =============================================================================


class TestPreprocessText:
    def test_lowercase_and_punctuation(self):
        assert preprocess_text("Hello, World! 你好。") == ["hello", "world", "你好"]

    def test_unsegmented_cjk_is_one_token(self):
        assert preprocess_text("打开全民K歌") == ["打开全民k歌"]

    def test_only_ascii_words_and_cjk_range_kept(self):
        assert preprocess_text("ＡＰＰ テスト ①") == []
        assert preprocess_text("ＡＰＰ打开 テスト搜索") == ["打开", "搜索"]

    def test_empty(self):
        assert preprocess_text("") == []
        assert preprocess_text(None) == []
        assert preprocess_text("!!! ???") == []


# =============================================================================
#                            MODEL
# =============================================================================


class TestTfidfModel:
    """Weights follow tf = count/len and idf = ln(N/df)."""

    def test_weights(self):
        model = build_model([["a", "b"], ["a", "c"]])
        assert model.document_count == 2
        assert model.idf["a"] == pytest.approx(0.0)
        assert model.idf["b"] == pytest.approx(math.log(2))

        vector = model.vector(0)
        assert set(vector) == {"b"}
        assert vector["b"] == pytest.approx(0.5 * math.log(2))

    def test_repeated_term_frequency(self):
        model = build_model([["x", "x", "y"], ["z"]])
        vector = model.vector(0)
        assert vector["x"] == pytest.approx((2 / 3) * math.log(2))
        assert vector["y"] == pytest.approx((1 / 3) * math.log(2))

    def test_empty_document_has_empty_vector(self):
        model = build_model([["a"], []])
        assert model.vector(1) == {}

    def test_all_empty_corpus(self):
        model = TfidfModel([[], []])
        assert model.vectors() == [{}, {}]
        assert model.idf == {}

    def test_no_documents(self):
        assert build_model([]).vectors() == []

    def test_transform_unknown_terms_weigh_zero(self):
        model = build_model([["a", "b"], ["a", "c"]])
        vector = model.transform(["b", "unseen"])
        assert set(vector) == {"b"}
        assert vector["b"] == pytest.approx(0.5 * math.log(2))
        assert model.transform([]) == {}


# =============================================================================
#                            COSINE
# =============================================================================


class TestCosineSimilarity:
    def test_identical(self):
        vec = {"a": 0.3, "b": 0.1}
        assert cosine_similarity(vec, vec) == pytest.approx(1.0)

    def test_disjoint(self):
        assert cosine_similarity({"a": 1.0}, {"b": 1.0}) == 0.0

    def test_zero_norm_is_zero_not_nan(self):
        assert cosine_similarity({}, {"a": 1.0}) == 0.0
        assert cosine_similarity({"a": 0.0}, {"a": 0.0}) == 0.0
        assert cosine_similarity({}, {}) == 0.0

    def test_symmetric(self):
        model = build_model(
            [
                preprocess_text("打开 全民K歌 搜索 歌曲"),
                preprocess_text("打开 微信 搜索 好友"),
                preprocess_text("登录 支付宝"),
            ]
        )
        v0, v1 = model.vector(0), model.vector(1)
        assert cosine_similarity(v0, v1) == pytest.approx(cosine_similarity(v1, v0))

    def test_term_in_every_document_carries_no_signal(self):
        model = build_model([["a"], ["a"]])
        assert cosine_similarity(model.vector(0), model.vector(1)) == 0.0

    def test_bounds(self):
        texts = ["打开 全民K歌", "打开 全民K歌 搜索", "", "hello hello world", "world"]
        model = build_model([preprocess_text(t) for t in texts])
        vectors = model.vectors()
        for a in vectors:
            for b in vectors:
                sim = cosine_similarity(a, b)
                assert not math.isnan(sim)
                assert 0.0 <= sim <= 1.0
