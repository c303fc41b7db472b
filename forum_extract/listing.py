from __future__ import annotations

import copy
import logging

from bs4 import BeautifulSoup
from bs4.element import Tag

from forum_extract.extract import extract_attr, extract_text
from forum_extract.models import Article, ForumPage, ForumThread
from forum_extract.results import ItemResult, ParseResult, collect_ok

logger = logging.getLogger(__name__)

ROW_SELECTOR = "tbody[id^=normal]"
LOGIN_MARKER_ID = "messagelogin"
THREAD_TYPES_ID = "thread_types"


def _parse_count(raw: str, field_name: str) -> int:
    value = int(raw)
    if value < 0:
        raise ValueError(f"negative {field_name}: {value}")
    return value


def _first_non_blank(row: Tag, extract, *column_chains: tuple[str, ...]) -> str:
    for chain in column_chains:
        value = extract(row, *chain)
        if value.strip():
            return value
    return ""


def parse_article_row(row: Tag, title_columns: tuple[str, ...] = ("th.new", "th.common")) -> ItemResult[Article]:
    """
    Parse one listing row.

    Bad counts or missing title/author skip the row; they never raise.
    """
    try:
        reply = _parse_count(extract_text(row, "td.num", "a.xi2"), "reply count")
        view = _parse_count(extract_text(row, "td.num", "em"), "view count")
    except ValueError as e:
        return ItemResult.skipped(f"bad count: {e}")

    title = _first_non_blank(row, extract_text, *[(col, ".xst") for col in title_columns])
    url = _first_non_blank(
        row,
        lambda node, *sel: extract_attr(node, "href", *sel),
        *[(col, "a.xst") for col in title_columns],
    )
    author = extract_text(row, "td.by", "a[href*=uid]")
    date = extract_text(row, "td.by", "span")
    origin = extract_text(row, "td.by", "a[target]")

    if not title.strip() or not author:
        return ItemResult.skipped("missing title or author")

    return ItemResult.ok(
        Article(
            title=title,
            author=author,
            date=date,
            url=url,
            view_count=view,
            reply_count=reply,
            origin=origin or None,
        )
    )


def parse_categories(soup: BeautifulSoup) -> list[ItemResult[ForumThread]]:
    """Thread-type filter links; the nested <span> badge is not part of the name."""
    block = soup.find(id=THREAD_TYPES_ID)
    if block is None:
        return []

    out: list[ItemResult[ForumThread]] = []
    for li in block.find_all("li"):
        try:
            link = li.find("a")
            if link is None:
                out.append(ItemResult.skipped("category item without link"))
                continue
            url = link.get("href") or ""
            label = copy.copy(link)
            for badge in label.find_all("span"):
                badge.decompose()
            name = extract_text(label)
            if not name or not url:
                out.append(ItemResult.skipped("category without name or url"))
                continue
            out.append(ItemResult.ok(ForumThread(name=name, url=url)))
        except Exception as e:
            logger.debug("Skipping category item: err=%s", e)
            out.append(ItemResult.skipped(str(e)))
    return out


def parse_forum_page(soup: BeautifulSoup, process_thread_list: bool = False) -> ParseResult[ForumPage]:
    """
    Parse a forum section listing.

    Returns:
        login_required: no rows and the login wall is present
        ok: articles (and categories, when requested) in document order
        failed: unexpected error while walking the document
    """
    try:
        rows = soup.select(ROW_SELECTOR)
        if not rows and soup.find(id=LOGIN_MARKER_ID) is not None:
            return ParseResult.login_required()

        row_results = [_safe_row(row) for row in rows]
        for i, res in enumerate(row_results):
            if not res.is_ok:
                logger.debug("Skipping listing row: index=%s reason=%s", i, res.reason)

        threads: list[ForumThread] = []
        if process_thread_list:
            threads = collect_ok(parse_categories(soup))

        return ParseResult.ok(ForumPage(articles=collect_ok(row_results), threads=threads))
    except Exception as e:
        logger.error("Forum page parse failed: err=%s", e, exc_info=True)
        return ParseResult.failed(str(e))


def parse_home_articles(soup: BeautifulSoup) -> list[Article]:
    """
    Home page "guide" listing: every <tbody> is a row, titles only in th.common.
    Failures yield an empty list.
    """
    try:
        results = [_safe_row(row, title_columns=("th.common",)) for row in soup.select("tbody")]
    except Exception as e:
        logger.error("Home page parse failed: err=%s", e, exc_info=True)
        return []
    return collect_ok(results)


def _safe_row(row: Tag, title_columns: tuple[str, ...] = ("th.new", "th.common")) -> ItemResult[Article]:
    try:
        return parse_article_row(row, title_columns)
    except Exception as e:
        logger.warning("Unexpected error in listing row: err=%s", e)
        return ItemResult.skipped(str(e))
