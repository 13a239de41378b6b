"""
Lexicon tables for intent normalization.

All lookup tables are ordered sequences of pairs rather than dicts: verb
matching is substring containment with first-match-wins, so declaration order
decides which canonical action an ambiguous token resolves to.

A Lexicon is immutable. Build it once at startup (DEFAULT_LEXICON or
load_lexicon) and pass it into every engine call.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from utils.logger import get_logger

logger = get_logger(__name__)

VerbTable = Tuple[Tuple[str, str], ...]


# =============================================================================
# VERB NORMALIZATION - structural variant (corpus backfill)
# =============================================================================
# Order matters: "保存" precedes "保存到本地", "登录" precedes "退出登录".

STRUCTURAL_VERB_CANON: VerbTable = (
    # open
    ("打开", "打开"),
    ("进入", "打开"),
    ("启动", "打开"),
    ("开启", "打开"),
    ("访问", "打开"),
    # search
    ("搜索", "搜索"),
    ("查找", "搜索"),
    ("搜一下", "搜索"),
    ("找", "搜索"),
    ("检索", "搜索"),
    # play
    ("播放", "播放"),
    ("听", "播放"),
    ("听一下", "播放"),
    ("放", "播放"),
    ("观看", "播放"),
    ("看", "播放"),
    # like
    ("点赞", "点赞"),
    ("赞", "点赞"),
    ("喜欢", "点赞"),
    # comment
    ("评论", "评论"),
    ("留言", "评论"),
    ("发表评论", "评论"),
    # follow
    ("关注", "关注"),
    ("订阅", "关注"),
    ("加关注", "关注"),
    # share
    ("分享", "分享"),
    ("转发", "分享"),
    # favorite
    ("收藏", "收藏"),
    ("保存", "收藏"),
    # delete
    ("删除", "删除"),
    ("移除", "删除"),
    # add
    ("添加", "添加"),
    ("新增", "添加"),
    ("创建", "添加"),
    # edit
    ("编辑", "编辑"),
    ("修改", "编辑"),
    ("更改", "编辑"),
    # view
    ("查看", "查看"),
    ("浏览", "查看"),
    ("查询", "查看"),
    # download / upload
    ("下载", "下载"),
    ("保存到本地", "下载"),
    ("上传", "上传"),
    ("发布", "上传"),
    # login / logout
    ("登录", "登录"),
    ("登陆", "登录"),
    ("登入", "登录"),
    ("退出", "退出"),
    ("登出", "退出"),
    ("退出登录", "退出"),
    # cancel
    ("取消", "取消"),
    ("撤销", "取消"),
)


# =============================================================================
# VERB NORMALIZATION - query variant (query time)
# =============================================================================
# Narrower than the structural table. The two variants intentionally differ.

QUERY_VERB_CANON: VerbTable = (
    ("打开", "打开"),
    ("进入", "打开"),
    ("启动", "打开"),
    ("开启", "打开"),
    ("搜索", "搜索"),
    ("查找", "搜索"),
    ("搜一下", "搜索"),
    ("找", "搜索"),
    ("播放", "播放"),
    ("听", "播放"),
    ("观看", "播放"),
    ("看", "播放"),
    ("点赞", "点赞"),
    ("赞", "点赞"),
    ("喜欢", "点赞"),
    ("评论", "评论"),
    ("留言", "评论"),
    ("关注", "关注"),
    ("订阅", "关注"),
    ("分享", "分享"),
    ("转发", "分享"),
    ("收藏", "收藏"),
    ("保存", "收藏"),
    ("删除", "删除"),
    ("移除", "删除"),
    ("添加", "添加"),
    ("新增", "添加"),
    ("创建", "添加"),
    ("编辑", "编辑"),
    ("修改", "编辑"),
    ("查看", "查看"),
    ("浏览", "查看"),
    ("下载", "下载"),
    ("上传", "上传"),
    ("发布", "上传"),
    ("登录", "登录"),
    ("退出", "退出"),
)


# =============================================================================
# KNOWN ENTITIES (application names, must be kept)
# =============================================================================

KNOWN_ENTITIES: Tuple[str, ...] = (
    "全民K歌",
    "抖音",
    "微信",
    "支付宝",
    "淘宝",
    "京东",
    "美团",
    "饿了么",
    "哔哩哔哩",
    "B站",
    "快手",
    "小红书",
    "知乎",
    "百度",
    "网易云音乐",
    "QQ",
    "钉钉",
    "企业微信",
    "拼多多",
    "闲鱼",
    "高德地图",
    "百度地图",
    "携程",
    "飞猪",
    "去哪儿",
    "12306",
    "滴滴",
    "花小猪",
    "曹操出行",
)


# Content arguments that should be stripped (songs, singers, topics)
EXCLUDED_CONTENT_TERMS: Tuple[str, ...] = (
    "山楂树之恋",
    "周杰伦",
    "晴天",
    "七里香",
    "快乐",
    "美食",
    "旅游",
    "搞笑",
    "音乐",
    "视频",
    "图片",
    "文章",
    "新闻",
)


@dataclass(frozen=True)
class Lexicon:
    """Read-only lookup tables shared by every normalization call."""

    verb_canon: VerbTable = STRUCTURAL_VERB_CANON
    query_verb_canon: VerbTable = QUERY_VERB_CANON
    known_entities: Tuple[str, ...] = KNOWN_ENTITIES
    excluded_content_terms: Tuple[str, ...] = EXCLUDED_CONTENT_TERMS

    @property
    def query_actions(self) -> frozenset:
        """Canonical actions reachable from the query-time verb table."""
        return frozenset(action for _, action in self.query_verb_canon)

    def stats(self) -> dict:
        return {
            "verb_canon": len(self.verb_canon),
            "query_verb_canon": len(self.query_verb_canon),
            "known_entities": len(self.known_entities),
            "excluded_content_terms": len(self.excluded_content_terms),
        }


DEFAULT_LEXICON = Lexicon()


def _parse_verb_table(raw, key: str) -> VerbTable:
    """Accept either [[surface, action], ...] or an (ordered) JSON object."""
    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise ValueError(f"{key}: expected [surface, action] pairs, got {item!r}")
            pairs.append((item[0], item[1]))
    else:
        raise ValueError(f"{key}: expected a list of pairs or an object")

    for surface, action in pairs:
        if not isinstance(surface, str) or not isinstance(action, str) or not surface:
            raise ValueError(f"{key}: invalid entry {surface!r} -> {action!r}")
    return tuple(pairs)


def _parse_term_list(raw, key: str) -> Tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(t, str) and t for t in raw):
        raise ValueError(f"{key}: expected a list of non-empty strings")
    return tuple(raw)


def load_lexicon(path: str, base: Optional[Lexicon] = None) -> Lexicon:
    """
    Load a lexicon override from a JSON file.

    Keys that are absent fall back to ``base`` (DEFAULT_LEXICON by default).
    JSON arrays and objects keep their declaration order.
    """
    base = base or DEFAULT_LEXICON
    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("Lexicon file must contain a JSON object")

    lexicon = Lexicon(
        verb_canon=_parse_verb_table(data["verb_canon"], "verb_canon")
        if "verb_canon" in data
        else base.verb_canon,
        query_verb_canon=_parse_verb_table(data["query_verb_canon"], "query_verb_canon")
        if "query_verb_canon" in data
        else base.query_verb_canon,
        known_entities=_parse_term_list(data["known_entities"], "known_entities")
        if "known_entities" in data
        else base.known_entities,
        excluded_content_terms=_parse_term_list(
            data["excluded_content_terms"], "excluded_content_terms"
        )
        if "excluded_content_terms" in data
        else base.excluded_content_terms,
    )
    logger.info(f"Loaded lexicon from {path}: {lexicon.stats()}")
    return lexicon
