"""Deterministic keyword/regex extraction used when the model is unavailable.

Works on Chinese-language job postings: company after 公司/企业 markers,
role keywords followed by a seniority suffix, k/万 salary ranges, a fixed
list of cities, education and experience keywords, and list items under
responsibility/requirement headings. The result has the same shape as
the model's JSON answer so both paths share one normalizer.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

CITIES = (
    "北京", "上海", "广州", "深圳", "杭州", "成都", "武汉", "西安", "南京", "苏州",
    "天津", "重庆", "长沙", "郑州", "东莞", "青岛", "沈阳", "宁波", "昆明", "大连",
    "厦门", "合肥", "佛山", "福州", "哈尔滨", "济南", "温州", "长春", "石家庄", "常州",
    "泉州", "南宁", "贵阳", "南昌", "金华", "珠海", "惠州", "嘉兴", "南通", "中山",
    "保定", "兰州", "台州", "徐州", "太原", "绍兴", "烟台", "海口", "乌鲁木齐",
    "呼和浩特", "银川", "西宁", "拉萨", "柳州", "桂林", "三亚", "襄阳", "宜昌", "岳阳",
    "常德", "衡阳", "株洲", "湘潭", "邵阳", "益阳", "郴州", "永州", "怀化", "娄底", "湘西",
)

ROLE_KEYWORDS = ("前端", "后端", "全栈", "算法", "Java", "Python", "Go", "产品", "运营", "设计", "测试")
ROLE_SUFFIXES = ("工程师", "开发", "专家", "经理", "总监", "专员", "助理")

RESPONSIBILITY_MARKERS = ("职责", "工作", "负责")
REQUIREMENT_MARKERS = ("要求", "任职", "条件", "资格")

MAX_LIST_ITEMS = 5
MIN_ITEM_LENGTH = 4
MAX_HEADING_LENGTH = 20

# Suggestions offered when the text is long enough to be a real posting
GENERIC_SUGGESTIONS = {
    "resume": "根据该职位要求，建议在简历中突出相关技术栈和项目经验，量化工作成果。",
    "interview": "建议重点准备技术基础知识和项目经验介绍，了解公司业务背景。",
    "negotiation": "了解市场薪资水平，结合自身经验和能力合理设定期望。",
}
MIN_TEXT_FOR_SUGGESTIONS = 50

_COMPANY_RE = re.compile(r"(?:公司|企业)(?:名称)?[：:]?\s*([^\n，,。]+)")
_TITLE_RE = re.compile(
    "(?:" + "|".join(ROLE_KEYWORDS) + ").{0,5}(?:" + "|".join(ROLE_SUFFIXES) + ")"
)
_SALARY_RE = re.compile(
    r"\d+(?:\.\d+)?[kK]\s*[-~～至]\s*\d+(?:\.\d+)?[kK]"
    r"|\d+(?:\.\d+)?万\s*[-~～至]\s*\d+(?:\.\d+)?万"
    r"|\d+(?:\.\d+)?\s*[-~～至]\s*\d+(?:\.\d+)?万"
)
_LOCATION_RE = re.compile("(" + "|".join(CITIES) + ")市?")
_EDUCATION_RE = re.compile(r"本科|硕士|博士|大专|专科|高中|中专|不限")
_EXPERIENCE_RE = re.compile(r"(?:\d+年|[一二三四五六七八九十]+年).{0,3}?(?:经验|以上|优先)")
_LIST_ITEM_RE = re.compile(
    r"^(?:\d+\s*[\.、．)）]|[（(]\d+[)）]|[①②③④⑤⑥⑦⑧⑨⑩]|[一二三四五六七八九十]+、|[-•*·])\s*(.+)$"
)
_HTML_TAG_RE = re.compile(r"<\s*[a-zA-Z][^>]*>")


def looks_like_html(text: str) -> bool:
    return bool(_HTML_TAG_RE.search(text or ""))


def html_to_text(html: str) -> str:
    """Convert HTML content to plain text, one block per line."""
    from bs4 import BeautifulSoup

    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(separator="\n", strip=True)


def _first(pattern: re.Pattern, text: str, group: int = 0) -> str:
    match = pattern.search(text)
    return match.group(group).strip() if match else ""


def _section_of(line: str) -> Optional[str]:
    """Classify a heading line, or return None if it is not a heading."""
    if len(line) > MAX_HEADING_LENGTH or _LIST_ITEM_RE.match(line):
        return None
    if any(marker in line for marker in REQUIREMENT_MARKERS):
        return "requirements"
    if any(marker in line for marker in RESPONSIBILITY_MARKERS):
        return "responsibilities"
    return None


def extract_list_sections(text: str) -> dict[str, list[str]]:
    """Collect list items under responsibility/requirement headings.

    A list-prefixed line belongs to the most recent heading. Outside any
    heading, a list line is still taken when it names a marker keyword
    itself. Each section keeps at most ``MAX_LIST_ITEMS`` items.
    """
    sections: dict[str, list[str]] = {"responsibilities": [], "requirements": []}
    current: Optional[str] = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        heading = _section_of(line)
        if heading:
            current = heading
            continue

        match = _LIST_ITEM_RE.match(line)
        if not match:
            continue
        item = match.group(1).strip().rstrip("；;。")
        if len(item) < MIN_ITEM_LENGTH:
            continue

        target = current
        if target is None:
            if any(marker in line for marker in REQUIREMENT_MARKERS):
                target = "requirements"
            elif any(marker in line for marker in RESPONSIBILITY_MARKERS):
                target = "responsibilities"
        if target and len(sections[target]) < MAX_LIST_ITEMS:
            sections[target].append(item)

    return sections


def heuristic_extract(text: str) -> dict:
    """Best-effort structured fields from plain text, in the model's JSON shape."""
    text = text or ""
    sections = extract_list_sections(text)
    long_enough = len(text) > MIN_TEXT_FOR_SUGGESTIONS

    payload = {
        "company": {
            "name": _first(_COMPANY_RE, text, 1),
            "type": "其他",
        },
        "position": {
            "title": _first(_TITLE_RE, text),
            "salary": _first(_SALARY_RE, text),
            "location": _first(_LOCATION_RE, text, 1),
            "education": _first(_EDUCATION_RE, text),
            "experience": _first(_EXPERIENCE_RE, text),
        },
        "aiAnalysis": {
            "responsibilities": sections["responsibilities"],
            "requirements": sections["requirements"],
            "suggestions": dict(GENERIC_SUGGESTIONS) if long_enough else {},
        },
    }
    logger.debug(
        "Heuristic extraction: title=%r location=%r salary=%r items=%d/%d",
        payload["position"]["title"],
        payload["position"]["location"],
        payload["position"]["salary"],
        len(sections["responsibilities"]),
        len(sections["requirements"]),
    )
    return payload
