from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

from bs4 import BeautifulSoup

from forum_extract.extract import extract_attr, extract_text, node_text
from forum_extract.models import UNKNOWN_AUTHOR, ArticleDetail, Post, PreviewPost
from forum_extract.results import ItemResult, MissingElementError, ParseResult
from forum_extract.sanitizer import STATIC_ASSET_PREFIX, extract_post_content

logger = logging.getLogger(__name__)


# -------------------------
# Per-post sequences
# -------------------------


def _abstract(soup: BeautifulSoup) -> Optional[Mapping[str, Any]]:
    """JSON object from the first <script>, if it decodes. Best-effort."""
    script = soup.find("script")
    if script is None:
        return None
    raw = (script.string or "").strip().replace("\u00a0", "")
    try:
        payload = json.loads(raw)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def recommend_add_urls(soup: BeautifulSoup) -> list[str]:
    """
    `#recommend_add` (thread level, always first) followed by every
    `a.replyadd`. Without the thread-level link the sequence is empty.
    """
    head = soup.find(id="recommend_add")
    if head is None:
        return []
    return [head.get("href") or ""] + [a.get("href") or "" for a in soup.select("a.replyadd")]


def avatars_and_names(soup: BeautifulSoup) -> list[tuple[str, str]]:
    return [
        (extract_attr(cell, "src", "div.avatar", "img"), extract_text(cell, "a.xw1"))
        for cell in soup.select("td[rowspan]")
    ]


def post_contents(soup: BeautifulSoup, watermark_prefix: str = STATIC_ASSET_PREFIX) -> list[ItemResult[str]]:
    out: list[ItemResult[str]] = []
    for container in soup.select("div.pcb"):
        try:
            out.append(ItemResult.ok(extract_post_content(container, watermark_prefix)))
        except MissingElementError as e:
            out.append(ItemResult.skipped(str(e)))
    return out


def post_dates(soup: BeautifulSoup) -> list[str]:
    return [node_text(em) for em in soup.select("div.authi em")]


def reply_urls(soup: BeautifulSoup) -> list[str]:
    return [el.get("href") or "" for el in soup.select(".fastre")]


def _at(seq: Sequence, index: int):
    return seq[index] if index < len(seq) else None


def assemble_posts(
    names: Sequence[tuple[str, str]],
    contents: Sequence[ItemResult[str]],
    dates: Sequence[str],
    replies: Sequence[str],
    recommend_adds: Sequence[str],
) -> list[ItemResult[Post]]:
    """
    Zip the independently queried sequences by position, driven by `names`.

    Sequences are not assumed to be the same length. A missing date, body or
    quick-reply url skips that position only; a missing recommend-add url is
    None.
    """
    out: list[ItemResult[Post]] = []
    for i, (avatar, name) in enumerate(names):
        content = _at(contents, i)
        date = _at(dates, i)
        reply = _at(replies, i)
        if content is None:
            out.append(ItemResult.skipped("no post body at this position"))
            continue
        if not content.is_ok:
            out.append(ItemResult.skipped(content.reason or "post body missing"))
            continue
        if date is None:
            out.append(ItemResult.skipped("no timestamp at this position"))
            continue
        if reply is None:
            out.append(ItemResult.skipped("no quick-reply url at this position"))
            continue
        out.append(
            ItemResult.ok(
                Post(
                    author=name,
                    avatar_url=avatar or None,
                    date=date,
                    content=content.value or "",
                    reply_url=reply,
                    recommend_add_url=_at(recommend_adds, i),
                )
            )
        )
    return out


# -------------------------
# Top-level parsers
# -------------------------


def parse_article_detail(
    soup: BeautifulSoup, watermark_prefix: str = STATIC_ASSET_PREFIX
) -> ParseResult[ArticleDetail]:
    """
    Parse a thread page.

    Returns:
        blocked: `span#thread_subject` is empty or missing
        ok: title, posts in document order, paging/form data, abstract
        failed: any other error
    """
    try:
        abstract = _abstract(soup)

        title = extract_text(soup, "span#thread_subject")
        if not title:
            return ParseResult.blocked("thread subject missing")

        next_page_url = extract_attr(soup, "href", "a.nxt")
        form_hash = extract_attr(soup, "value", "input[name=formhash]")

        results = assemble_posts(
            names=avatars_and_names(soup),
            contents=post_contents(soup, watermark_prefix),
            dates=post_dates(soup),
            replies=reply_urls(soup),
            recommend_adds=recommend_add_urls(soup),
        )

        posts: list[Post] = []
        skipped: dict[int, str] = {}
        for i, res in enumerate(results):
            if res.is_ok:
                posts.append(res.value)  # type: ignore[arg-type]
            else:
                logger.debug("Skipping post position: index=%s reason=%s", i, res.reason)
                skipped[i] = res.reason or ""

        return ParseResult.ok(
            ArticleDetail(
                title=title,
                posts=posts,
                next_page_url=next_page_url or None,
                form_hash=form_hash or None,
                abstract=abstract,
                skipped=skipped,
            )
        )
    except Exception as e:
        logger.error("Article detail parse failed: err=%s", e, exc_info=True)
        return ParseResult.failed(str(e))


def parse_post_preview(
    soup: BeautifulSoup, watermark_prefix: str = STATIC_ASSET_PREFIX
) -> ParseResult[PreviewPost]:
    """
    First post of a thread page only.

    Returns:
        blocked: no `div.authi` timestamp
        ok: the first post; avatar "" and author "Unknown" when the author
            cell is missing
        failed: any other error (e.g. no `div.pcb` body)
    """
    try:
        authi = soup.select_one("div.authi")
        date = extract_text(authi, "em") if authi is not None else ""
        if not date:
            return ParseResult.blocked("first post timestamp missing")

        container = soup.select_one("div.pcb")
        if container is None:
            raise MissingElementError("first post body missing")
        content = extract_post_content(container, watermark_prefix)

        avatar, author = "", UNKNOWN_AUTHOR
        cell = soup.select_one("td[rowspan]")
        if cell is not None:
            avatar = extract_attr(cell, "src", "div.avatar", "img")
            author = extract_text(cell, "a.xw1") or UNKNOWN_AUTHOR

        return ParseResult.ok(PreviewPost(date=date, content=content, avatar=avatar, author=author))
    except Exception as e:
        logger.warning("Post preview parse failed: err=%s", e, exc_info=True)
        return ParseResult.failed(str(e))
