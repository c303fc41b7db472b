from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

from bs4 import BeautifulSoup

from forum_extract.forum_client import ForumClient
from forum_extract.http_client import HttpClient, HttpConfig
from forum_extract.listing import parse_forum_page
from forum_extract.settings import load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main() -> None:
    s = load_settings()

    http = HttpClient(
        HttpConfig(
            timeout_sec=s.request_timeout_sec,
            delay_sec=s.request_delay_sec,
            user_agent=s.user_agent,
            page_encoding=s.page_encoding,
        )
    )
    client = ForumClient(http, s)

    # Fetch the listing HTML once so it can be dumped when nothing parses
    html = client.fetch_html(s.forum_list_query)
    result = parse_forum_page(BeautifulSoup(html, "lxml"), s.fetch_thread_list)

    if not result.is_ok:
        logger.warning("Listing not parsed: kind=%s reason=%s", result.kind, result.reason)
        print(json.dumps({"kind": result.kind, "reason": result.reason}, ensure_ascii=False))
        return

    page = result.value
    if not page.articles and s.dump_html_on_empty:
        Path(s.dump_html_path).write_text(html, encoding="utf-8")
        logger.warning("No articles parsed. Dumped HTML to: %s", s.dump_html_path)

    logger.info("Parsed articles: %s threads: %s", len(page.articles), len(page.threads))

    sample = {
        "articles": [asdict(a) for a in page.articles[:5]],
        "threads": [asdict(t) for t in page.threads],
    }

    if s.fetch_first_detail and page.articles:
        detail = client.get_article_detail(page.articles[0].url)
        logger.info("First thread: kind=%s", detail.kind)
        if detail.is_ok:
            sample["detail"] = {
                "title": detail.value.title,
                "next_page_url": detail.value.next_page_url,
                "posts": [
                    {
                        "author": p.author,
                        "date": p.date,
                        "content_preview": (p.content[:120] + "…") if len(p.content) > 120 else p.content,
                    }
                    for p in detail.value.posts[:5]
                ],
            }

    print(json.dumps(sample, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
