from __future__ import annotations

import html
import re
from html.parser import HTMLParser
from typing import Final
from urllib.parse import urlsplit


_ALLOWED_TAGS: Final[set[str]] = {
    "a",
    "abbr",
    "b",
    "blockquote",
    "br",
    "code",
    "del",
    "div",
    "em",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "i",
    "ins",
    "li",
    "ol",
    "p",
    "pre",
    "s",
    "span",
    "strong",
    "sub",
    "sup",
    "u",
    "ul",
}

_VOID_TAGS: Final[set[str]] = {"br", "hr"}

# 태그와 내용까지 통째로 제거
_DROP_CONTENT_TAGS: Final[set[str]] = {"script", "style", "iframe", "object", "template"}

_ALLOWED_ATTRS: Final[dict[str, set[str]]] = {
    "a": {"href", "title", "rel", "target"},
    "abbr": {"title"},
    "span": {"class"},
    "div": {"class"},
    "p": {"class"},
    "code": {"class"},
    "pre": {"class"},
}

_SAFE_SCHEMES: Final[set[str]] = {"", "http", "https", "mailto"}
_CTRL_RE = re.compile(r"[\x00-\x20]+")


def sanitize_html(raw_html: str) -> str:
    """허용 목록 기준으로 마크업 정리. 정리된 결과를 다시 넣어도 같은 결과"""
    parser = _Sanitizer()
    parser.feed(raw_html or "")
    parser.close()
    return "".join(parser.out)


class _Sanitizer(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.out: list[str] = []
        self._stack: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        if tag in _DROP_CONTENT_TAGS:
            self._skip_depth += 1
            return
        if self._skip_depth or tag not in _ALLOWED_TAGS:
            return

        self.out.append(f"<{tag}{_clean_attrs(tag, attrs)}>")
        if tag not in _VOID_TAGS:
            self._stack.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.handle_starttag(tag, attrs)
        if tag.lower() not in _VOID_TAGS:
            self.handle_endtag(tag)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in _DROP_CONTENT_TAGS:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if self._skip_depth or tag not in self._stack:
            return
        while self._stack:
            opened = self._stack.pop()
            self.out.append(f"</{opened}>")
            if opened == tag:
                break

    def handle_data(self, data: str) -> None:
        if self._skip_depth or not data:
            return
        self.out.append(html.escape(data, quote=False))

    def close(self) -> None:
        super().close()
        while self._stack:
            self.out.append(f"</{self._stack.pop()}>")


def _clean_attrs(tag: str, attrs: list[tuple[str, str | None]]) -> str:
    allowed = _ALLOWED_ATTRS.get(tag, set())
    cleaned: list[str] = []
    for k, v in attrs:
        k = (k or "").lower()
        if k not in allowed or v is None:
            continue
        v = v.strip()
        if k == "href" and not _is_safe_href(v):
            continue
        if k == "target" and v != "_blank":
            continue
        cleaned.append(f' {k}="{html.escape(v, quote=True)}"')
    return "".join(cleaned)


def _is_safe_href(value: str) -> bool:
    compact = _CTRL_RE.sub("", value)
    try:
        scheme = urlsplit(compact).scheme.lower()
    except ValueError:
        return False
    return scheme in _SAFE_SCHEMES
