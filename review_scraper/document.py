"""Narrow view over parsed HTML: find nodes, read text, read attributes.

Site scrapers only talk to ``Node`` so their lookup rules do not depend on
the parsing library.
"""
from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from review_scraper.errors import ParseError


class Node(Protocol):
    def find(self, selector: str) -> List["Node"]: ...

    def text(self) -> str: ...

    def attr(self, name: str) -> Optional[str]: ...


class SoupNode:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    def find(self, selector: str) -> List["SoupNode"]:
        return [SoupNode(t) for t in self._tag.select(selector)]

    def text(self) -> str:
        return self._tag.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        # multi-valued attributes (class, rel) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def __repr__(self) -> str:
        return f"SoupNode(<{self._tag.name}>)"


def parse_document(body: bytes) -> SoupNode:
    try:
        soup = BeautifulSoup(body, "html.parser")
    except Exception as e:
        raise ParseError(f"could not parse document: {e}") from e
    return SoupNode(soup)


def first(node: Optional[Node], selector: str) -> Optional[Node]:
    if node is None:
        return None
    try:
        found = node.find(selector)
    except SelectorSyntaxError as e:
        raise ParseError(f"bad selector {selector!r}: {e}") from e
    return found[0] if found else None
