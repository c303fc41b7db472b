from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from forum_extract.detail import parse_article_detail, parse_post_preview
from forum_extract.http_client import HttpClient
from forum_extract.listing import parse_forum_page, parse_home_articles
from forum_extract.models import Article, ArticleDetail, ForumPage, PreviewPost
from forum_extract.results import ParseResult
from forum_extract.settings import ForumSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ForumClient:
    """
    Fetches forum pages and hands them to the parsers.

    Every query is relative to `forum_base_url`. Transport failures come back
    as tagged results:
    - requests.HTTPError -> http_status (with the status code)
    - other requests.RequestException -> failed
    """

    def __init__(self, http: HttpClient, settings: ForumSettings):
        self.http = http
        self.settings = settings

    def fetch_html(self, query: str) -> str:
        url = urljoin(self.settings.forum_base_url, query)
        logger.info("Fetching: url=%s", url)
        return self.http.get_text(url)

    def fetch_document(self, query: str) -> BeautifulSoup:
        return BeautifulSoup(self.fetch_html(query), "lxml")

    # -------------------------
    # Parsed pages
    # -------------------------

    def get_forum_articles(self, query: str, process_thread_list: bool = False) -> ParseResult[ForumPage]:
        return self._fetch_and_parse(query, lambda soup: parse_forum_page(soup, process_thread_list))

    def get_home_page_articles(self, param: str, page_num: int) -> list[Article]:
        """Home page guide listing; any failure yields an empty list."""
        try:
            soup = self.fetch_document(f"{param}&page={page_num}")
        except requests.RequestException as e:
            logger.warning("Home page fetch failed: param=%s page=%s err=%s", param, page_num, e)
            return []
        return parse_home_articles(soup)

    def get_article_detail(self, query: str) -> ParseResult[ArticleDetail]:
        return self._fetch_and_parse(
            query, lambda soup: parse_article_detail(soup, self.settings.watermark_prefix)
        )

    def get_post_preview(self, query: str) -> ParseResult[PreviewPost]:
        return self._fetch_and_parse(
            query, lambda soup: parse_post_preview(soup, self.settings.watermark_prefix)
        )

    # -------------------------
    # Side-channel actions
    # -------------------------

    def add_favorites(self, thread_id: str, form_hash: str) -> bool:
        """Fire the favorite request. True if the server answered 2xx."""
        query = self.settings.favorite_url_template % (thread_id, form_hash)
        try:
            self.fetch_html(query)
        except requests.RequestException as e:
            logger.error("Add favorites failed: thread_id=%s err=%s", thread_id, e)
            return False
        return True

    def reply_add(self, query: str) -> str:
        """
        Support (recommend) a post.

        Returns:
            The confirmation message shown in `.nfl`, or "Error".
        """
        try:
            soup = self.fetch_document(query)
        except requests.RequestException as e:
            logger.error("Reply add failed: query=%s err=%s", query, e)
            return "Error"

        marker = soup.select_one(".nfl")
        if marker is None:
            logger.error("Reply add: no confirmation message in response: query=%s", query)
            return "Error"
        message = marker.get_text(" ", strip=True)
        logger.debug("Reply add: query=%s message=%s", query, message)
        return message

    # -------------------------
    # Helpers
    # -------------------------

    def _fetch_and_parse(
        self, query: str, parse: Callable[[BeautifulSoup], ParseResult[T]]
    ) -> ParseResult[T]:
        try:
            soup = self.fetch_document(query)
        except requests.HTTPError as e:
            return ParseResult.http_status(_status_code(e), str(e))
        except requests.RequestException as e:
            logger.warning("Fetch failed: query=%s err=%s", query, e)
            return ParseResult.failed(str(e))
        return parse(soup)


def _status_code(err: requests.HTTPError) -> Optional[int]:
    return err.response.status_code if err.response is not None else None
