"""
Note HTML cleaning.

Notes are rich text from the board editor. Everything stored or restored goes
through ``sanitize_note_html``: an allowlist of formatting tags, ``class``,
``style`` and ``data-*`` attributes, and http/https/mailto links only.
"""

import re
from typing import Optional

import nh3

ALLOWED_TAGS = {
    "address", "article", "aside", "footer", "header",
    "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "main", "nav", "section",
    "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure", "hr", "li", "ol", "p", "pre", "ul",
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em", "i", "kbd", "mark", "q",
    "rb", "rp", "rt", "rtc", "ruby", "s", "samp", "small", "span", "strong", "sub", "sup", "time", "u",
    "var", "wbr",
    "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th", "thead", "tr",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title", "target"},
    "*": {"class", "style"},
}
URL_SCHEMES = {"http", "https", "mailto"}
LINK_REL = "noopener noreferrer"

NBSP_RE = re.compile(r"&nbsp;|&#160;|\u00a0", re.IGNORECASE)


def _drop_protocol_relative(element: str, attribute: str, value: str) -> Optional[str]:
    if attribute == "href" and value.strip().startswith("//"):
        return None
    return value


def sanitize_note_html(html: str) -> str:
    """Allowlisted copy of html; scripts, handlers and unsafe URLs are dropped"""
    if not html:
        return ""
    return nh3.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        attribute_filter=_drop_protocol_relative,
        generic_attribute_prefixes={"data-"},
        url_schemes=URL_SCHEMES,
        link_rel=LINK_REL,
    )


def is_effectively_empty(html: str) -> bool:
    """True when nothing but markup, non-breaking spaces and whitespace remains"""
    if not html:
        return True
    text = nh3.clean(html, tags=set())
    text = NBSP_RE.sub("", text)
    return not text.strip()
