"""
Unit tests for slot redaction, the lexicon and both intent normalizers.

Run with: uv run pytest tests/test_normalizer.py -v
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engine.errors import InvalidArgumentError
from engine.lexicon import (
    DEFAULT_LEXICON,
    QUERY_VERB_CANON,
    STRUCTURAL_VERB_CANON,
    Lexicon,
)
from engine.normalizer import (
    canonicalize_token,
    extract_actions,
    extract_entity,
    normalize_query,
    normalize_structural,
    remove_content_params,
)
from engine.slots import SLOT_TOKEN, redact_slots, split_on_slots, strip_delimited_spans


# =============================================================================
#                            SLOT EXTRACTOR
# =============================================================================


class TestRedactSlots:
    """Delimited spans and bare long runs become the placeholder."""

    def test_book_title_brackets(self):
        assert redact_slots("播放《山楂树之恋》") == f"播放{SLOT_TOKEN}"

    def test_straight_quotes(self):
        assert redact_slots('搜索 "hello world"') == f"搜索 {SLOT_TOKEN}"

    def test_separate_long_cjk_run(self):
        # "周杰伦" follows a space, not a reserved action word
        assert redact_slots("搜索 周杰伦") == f"搜索 {SLOT_TOKEN}"

    def test_short_cjk_words_survive(self):
        assert redact_slots("打开 首页") == "打开 首页"

    def test_alphanumeric_run(self):
        assert redact_slots("打开 app") == f"打开 {SLOT_TOKEN}"

    def test_placeholder_is_not_redacted_again(self):
        assert redact_slots(SLOT_TOKEN) == SLOT_TOKEN
        once = redact_slots("播放《晴天》")
        assert redact_slots(once) == once

    def test_placeholder_splits_tokens(self):
        assert split_on_slots("播放《晴天》") == ["播放"]
        assert split_on_slots("搜ab索") == ["搜", "索"]
        assert split_on_slots("") == []

    def test_empty(self):
        assert redact_slots("") == ""

    def test_strip_delimited_spans(self):
        assert strip_delimited_spans("听「晴天」和『七里香』") == "听和"


# =============================================================================
#                            LEXICON
# =============================================================================


class TestLexicon:
    """Tables are ordered and the lexicon is immutable."""

    def test_tables_are_ordered_pairs(self):
        assert STRUCTURAL_VERB_CANON[0] == ("打开", "打开")
        assert isinstance(DEFAULT_LEXICON.verb_canon, tuple)

    def test_query_table_is_narrower(self):
        structural = {surface for surface, _ in STRUCTURAL_VERB_CANON}
        query = {surface for surface, _ in QUERY_VERB_CANON}
        assert query < structural

    def test_frozen(self):
        with pytest.raises(Exception):
            DEFAULT_LEXICON.known_entities = ()

    def test_query_actions(self):
        assert "打开" in DEFAULT_LEXICON.query_actions
        assert "取消" not in DEFAULT_LEXICON.query_actions

    def test_stats(self):
        stats = DEFAULT_LEXICON.stats()
        assert stats["known_entities"] == len(DEFAULT_LEXICON.known_entities)


# =============================================================================
#                            VERB CANONICALIZATION
# =============================================================================


class TestCanonicalizeToken:
    """Containment match, first declared key wins."""

    @pytest.mark.parametrize("surface", ["进入", "启动", "开启", "打开"])
    def test_open_synonyms(self, surface):
        assert canonicalize_token(surface, STRUCTURAL_VERB_CANON) == "打开"

    def test_containment_not_equality(self):
        assert canonicalize_token("找找看", STRUCTURAL_VERB_CANON) == "搜索"

    def test_declaration_order_wins(self):
        # "保存" is declared before "保存到本地"
        assert canonicalize_token("保存到本地", STRUCTURAL_VERB_CANON) == "收藏"
        # "登录" is declared before "退出登录"
        assert canonicalize_token("退出登录", STRUCTURAL_VERB_CANON) == "登录"

    def test_reordered_table_changes_result(self):
        reordered = (("保存到本地", "下载"), ("保存", "收藏"))
        assert canonicalize_token("保存到本地", reordered) == "下载"

    def test_no_match(self):
        assert canonicalize_token("首页", STRUCTURAL_VERB_CANON) is None


# =============================================================================
#                            STRUCTURAL NORMALIZATION
# =============================================================================


class TestNormalizeStructural:
    """Labels-aware normalization used for corpus backfill."""

    @pytest.mark.parametrize("surface", ["进入", "启动", "开启"])
    def test_verb_synonym_collapse(self, surface):
        assert normalize_structural(surface) == "打开"

    def test_slot_redaction_keeps_action(self):
        intent = normalize_structural("播放《山楂树之恋》")
        assert "播放" in intent.split()
        assert "山楂树之恋" not in intent
        assert SLOT_TOKEN not in intent

    def test_residual_tokens_kept(self):
        assert normalize_structural("进入 首页") == "打开 首页"

    def test_filler_and_short_tokens_dropped(self):
        assert normalize_structural("这个 打开 a") == "打开"

    def test_labels_prepended_verbatim_and_deduped(self):
        intent = normalize_structural("打开 搜索", ["音乐", "搜索"])
        assert intent == "音乐 搜索 打开"

    def test_labels_skip_canonicalization(self):
        assert normalize_structural("", ["进入"]) == "进入"

    def test_empty_input(self):
        assert normalize_structural("") == ""
        assert normalize_structural(None) == ""

    def test_unsegmented_text_is_redacted(self):
        assert normalize_structural("进入微信") == ""

    def test_slot_does_not_join_neighbours(self):
        # "搜" and "索" around a redacted run must not form "搜索"
        assert normalize_structural("搜ab索") == ""
        assert normalize_structural("打开 搜ab索") == "打开"

    def test_deterministic(self):
        text = "打开 首页 搜索 《晴天》 播放"
        labels = ["音乐", "播放器"]
        assert normalize_structural(text, labels) == normalize_structural(text, labels)


# =============================================================================
#                            QUERY NORMALIZATION
# =============================================================================


class TestNormalizeQuery:
    """Entity-aware normalization used at query time."""

    def test_entity_then_actions(self):
        assert normalize_query("打开全民K歌") == "全民K歌 打开"
        assert normalize_query("打开抖音") == "抖音 打开"

    def test_search_synonym(self):
        intent = normalize_query("打开全民K歌找一下山楂树之恋这首歌")
        assert intent == "全民K歌 打开 搜索"

    def test_first_entity_wins(self):
        # "微信" is declared before "企业微信"
        assert extract_entity("打开企业微信") == "微信"

    def test_actions_in_table_order(self):
        assert extract_actions("分享后点赞") == ["点赞", "分享"]

    def test_no_entity(self):
        assert extract_entity("打开首页") is None
        assert extract_entity("") is None

    @pytest.mark.parametrize("surface", ["进入", "启动", "开启"])
    def test_verb_synonym_collapse(self, surface):
        assert normalize_query(surface) == "打开"

    def test_fallback_strips_content_keywords(self):
        assert normalize_query("周杰伦的歌曲") == "的歌曲"

    def test_fallback_strips_delimited_spans(self):
        assert normalize_query("「晴天」 歌词") == "歌词"

    def test_fallback_truncates(self):
        text = "一二三四五六七八九十一二三四五六七八九十一二三"
        assert normalize_query(text) == text[:20]

    def test_remove_content_params_first_occurrence_only(self):
        assert remove_content_params("音乐音乐") == "音乐"

    def test_empty(self):
        assert normalize_query("") == ""

    def test_missing_query_raises(self):
        with pytest.raises(InvalidArgumentError):
            normalize_query(None)

    def test_variants_diverge(self):
        # Known inconsistency between the two normalizers; both behaviors are relied on
        assert normalize_structural("进入微信") != normalize_query("进入微信")

    def test_custom_lexicon(self):
        lexicon = Lexicon(known_entities=("网易云音乐",), query_verb_canon=(("听", "播放"),))
        assert normalize_query("在网易云音乐听歌", lexicon) == "网易云音乐 播放"

    def test_deterministic(self):
        text = "进入抖音点赞视频"
        assert normalize_query(text) == normalize_query(text)
