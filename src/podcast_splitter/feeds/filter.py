"""
Title-based selection of the items that belong to one show.
"""

import re
import xml.etree.ElementTree as ET
from typing import Iterable, List, Pattern, Union

PatternLike = Union[str, Pattern[str]]


def compile_patterns(patterns: Iterable[PatternLike]) -> List[Pattern[str]]:
    """
    Compile title patterns case-insensitively.

    Already-compiled patterns are recompiled with IGNORECASE added.
    """
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, str):
            compiled.append(re.compile(pattern, re.IGNORECASE))
        else:
            compiled.append(re.compile(pattern.pattern, pattern.flags | re.IGNORECASE))
    return compiled


def item_title(item: ET.Element) -> str:
    title = item.find("title")
    if title is None or title.text is None:
        return ""
    return title.text


def filter_items(items: Iterable[ET.Element], patterns: Iterable[PatternLike]) -> List[ET.Element]:
    """
    Select items whose title matches any of the patterns.

    Matching is an unanchored, case-insensitive search. Items with a
    missing or empty title never match. Feed order is preserved.

    Args:
        items: RSS <item> elements from the combined feed
        patterns: Regular expressions for one show

    Returns:
        Matching items
    """
    compiled = compile_patterns(patterns)
    selected = []
    for item in items:
        title = item_title(item)
        if title and any(pattern.search(title) for pattern in compiled):
            selected.append(item)
    return selected
