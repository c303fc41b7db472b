from __future__ import annotations

import requests

from forum_extract.forum_client import ForumClient
from forum_extract.http_client import HttpClient, HttpConfig
from forum_extract.settings import ForumSettings

BASE = "https://www.52pojie.cn/"


class _FakeHttp(HttpClient):
    def __init__(self, pages: dict[str, object]):
        super().__init__(HttpConfig(timeout_sec=1.0, delay_sec=0.0, user_agent="test"))
        self.pages = pages
        self.requested: list[str] = []

    def get_text(self, url: str) -> str:
        self.requested.append(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise requests.ConnectionError(f"no route to {url}")
        return page  # type: ignore[return-value]


def _http_error(status: int) -> requests.HTTPError:
    resp = requests.Response()
    resp.status_code = status
    return requests.HTTPError(f"status={status}", response=resp)


def _client(pages: dict[str, object]) -> tuple[ForumClient, _FakeHttp]:
    http = _FakeHttp(pages)
    return ForumClient(http, ForumSettings()), http


THREAD = """
<html><body>
  <span id="thread_subject">Hello</span>
  <table><tr>
    <td rowspan="2"><div class="avatar"><img src="a.png"></div><a class="xw1">alice</a></td>
    <td><div class="authi"><em>2026-10-01</em></div>
        <div class="pcb"><table><tr><td class="t_f">first</td></tr></table></div></td>
  </tr><tr><td><a class="fastre" href="reply-1">回复</a></td></tr></table>
</body></html>
"""


def test_get_article_detail_fetches_relative_query():
    client, http = _client({BASE + "thread-1-1-1.html": THREAD})
    result = client.get_article_detail("thread-1-1-1.html")

    assert http.requested == [BASE + "thread-1-1-1.html"]
    assert result.is_ok
    assert result.value.title == "Hello"
    assert result.value.posts[0].content == "first"


def test_http_status_is_reported_distinctly():
    client, _ = _client({BASE + "thread-2-1-1.html": _http_error(404)})

    preview = client.get_post_preview("thread-2-1-1.html")
    detail = client.get_article_detail("thread-2-1-1.html")

    assert preview.kind == "http_status"
    assert preview.status_code == 404
    assert detail.kind == "http_status"


def test_network_error_is_generic_failure():
    client, _ = _client({})
    result = client.get_forum_articles("forum-10-1.html")
    assert result.kind == "failed"


def test_get_forum_articles_login_wall():
    client, _ = _client({BASE + "forum-10-1.html": '<div id="messagelogin"></div>'})
    assert client.get_forum_articles("forum-10-1.html", process_thread_list=True).kind == "login_required"


def test_get_home_page_articles_appends_page_number():
    client, http = _client({})
    assert client.get_home_page_articles("forum.php?mod=guide&view=hot", 2) == []
    assert http.requested == [BASE + "forum.php?mod=guide&view=hot&page=2"]


def test_add_favorites_formats_thread_and_hash():
    url = BASE + "home.php?mod=spacecp&ac=favorite&type=thread&id=123&formhash=abc"
    client, http = _client({url: "<html></html>"})

    assert client.add_favorites("123", "abc") is True
    assert http.requested == [url]


def test_add_favorites_failure_returns_false():
    client, _ = _client({})
    assert client.add_favorites("123", "abc") is False


def test_reply_add_reads_confirmation_message():
    client, _ = _client({BASE + "support-1": '<div class="nfl"><p> 投票成功 </p></div>'})
    assert client.reply_add("support-1") == "投票成功"


def test_reply_add_without_marker_returns_error():
    client, _ = _client({BASE + "support-2": "<html><body>oops</body></html>"})
    assert client.reply_add("support-2") == "Error"
