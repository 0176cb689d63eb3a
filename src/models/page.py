"""Page-signal input model produced by the HTML-parsing collaborator."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from src.utils.validators import (
    ensure_valid_payload,
    validate_heading,
    validate_token_list,
)

logger = logging.getLogger(__name__)


def _clean_tokens(value: Any, field: str) -> tuple[str, ...]:
    """Normalise a token list; malformed lists are dropped, not raised."""
    ok, msg = validate_token_list(value, field)
    if not ok:
        logger.warning("Ignoring %s: %s", field, msg)
        return ()
    seen: dict[str, None] = {}
    for token in value or ():
        token = " ".join(token.lower().split())
        if token:
            seen.setdefault(token, None)
    return tuple(seen)


@dataclass(frozen=True)
class HeadingSignal:
    """One heading with the keywords the parser extracted from it."""

    tag: str
    text: str
    keywords: tuple[str, ...] = ()

    @property
    def level(self) -> int:
        """Numeric heading level (``h2`` -> 2); 0 when the tag is unknown."""
        tag = self.tag.strip().lower()
        if len(tag) == 2 and tag[0] == "h" and tag[1] in "123456":
            return int(tag[1])
        return 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HeadingSignal":
        return cls(
            tag=str(data.get("tag") or "").strip().lower(),
            text=" ".join(str(data.get("text") or "").split()),
            keywords=_clean_tokens(data.get("keywords"), "heading keywords"),
        )


@dataclass(frozen=True)
class ImageAltText:
    """Alt text of one image plus its parsed keywords."""

    text: str
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class PageSignals:
    """Everything the engine knows about one page.

    Usage::

        signals = PageSignals.from_dict({
            "content": "SEO optimization is ...",
            "headings": [{"tag": "h1", "text": "Guide to SEO", "keywords": []}],
            "url_keywords": ["seo", "optimization"],
            "meta_keywords": [],
        })
    """

    content: str = ""
    headings: tuple[HeadingSignal, ...] = ()
    url_keywords: tuple[str, ...] = ()
    meta_keywords: tuple[str, ...] = ()
    title: str = ""
    image_alt_texts: tuple[ImageAltText, ...] = ()
    meta_tag_keywords: tuple[str, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, payload: Any) -> "PageSignals":
        """Build signals from a parser payload.

        Missing or malformed optional lists become empty tuples.

        Raises:
            InvalidInputError: If the payload is not a mapping or its
                content/title have the wrong type.
        """
        ensure_valid_payload(payload)

        headings: list[HeadingSignal] = []
        raw_headings = payload.get("headings") or []
        if not isinstance(raw_headings, (list, tuple)):
            logger.warning("Ignoring headings: expected a list.")
            raw_headings = []
        for entry in raw_headings:
            ok, msg = validate_heading(entry)
            if not ok:
                logger.warning("Skipping heading entry: %s", msg)
                continue
            heading = HeadingSignal.from_dict(entry)
            if heading.text or heading.keywords:
                headings.append(heading)

        alt_texts: list[ImageAltText] = []
        raw_alts = payload.get("image_alt_texts") or []
        if not isinstance(raw_alts, (list, tuple)):
            logger.warning("Ignoring image_alt_texts: expected a list.")
            raw_alts = []
        for entry in raw_alts:
            if isinstance(entry, str):
                alt_texts.append(ImageAltText(text=entry.strip()))
            elif isinstance(entry, Mapping) and isinstance(entry.get("text", ""), str):
                alt_texts.append(ImageAltText(
                    text=(entry.get("text") or "").strip(),
                    keywords=_clean_tokens(entry.get("keywords"), "alt keywords"),
                ))
            else:
                logger.warning("Skipping malformed image alt entry.")

        return cls(
            content=payload.get("content") or "",
            headings=tuple(headings),
            url_keywords=_clean_tokens(payload.get("url_keywords"), "url_keywords"),
            meta_keywords=_clean_tokens(payload.get("meta_keywords"), "meta_keywords"),
            title=" ".join((payload.get("title") or "").split()),
            image_alt_texts=tuple(alt_texts),
            meta_tag_keywords=_clean_tokens(
                payload.get("meta_tag_keywords"), "meta_tag_keywords"
            ),
        )

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def first_heading(self) -> Optional[HeadingSignal]:
        return self.headings[0] if self.headings else None

    @property
    def h1(self) -> Optional[HeadingSignal]:
        """The first ``h1``, falling back to the first heading of any level."""
        for heading in self.headings:
            if heading.level == 1:
                return heading
        return self.first_heading

    @property
    def title_text(self) -> str:
        """Title tag text, or the first heading when no title was supplied."""
        if self.title:
            return self.title
        first = self.first_heading
        return first.text if first else ""

    @property
    def subheadings(self) -> tuple[HeadingSignal, ...]:
        """Headings below ``h1`` (h2-h6)."""
        return tuple(h for h in self.headings if h.level > 1)

    @property
    def heading_texts(self) -> tuple[str, ...]:
        return tuple(h.text for h in self.headings if h.text)

    def all_keywords(self) -> list[str]:
        """Ordered union of URL, meta and heading keyword tokens."""
        seen: dict[str, None] = {}
        for token in self.url_keywords:
            seen.setdefault(token, None)
        for token in self.meta_keywords:
            seen.setdefault(token, None)
        for heading in self.headings:
            for token in heading.keywords:
                seen.setdefault(token, None)
        return list(seen)
