from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class ForumSettings(BaseSettings):
    """
    Environment-driven settings for fetching and parsing forum pages.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Site ----
    forum_base_url: str = Field(default="https://www.52pojie.cn/", alias="FORUM_BASE_URL")
    forum_list_query: str = Field(default="forum-10-1.html", alias="FORUM_LIST_QUERY")
    home_page_param: str = Field(default="forum.php?mod=guide&view=hot", alias="FORUM_HOME_PAGE_PARAM")

    # %s placeholders: thread id, form hash
    favorite_url_template: str = Field(
        default="home.php?mod=spacecp&ac=favorite&type=thread&id=%s&formhash=%s",
        alias="FORUM_FAVORITE_URL_TEMPLATE",
    )
    watermark_prefix: str = Field(
        default="https://static.52pojie.cn/static/",
        alias="FORUM_WATERMARK_PREFIX",
    )

    # ---- HTTP ----
    request_timeout_sec: float = Field(default=15.0, alias="FORUM_REQUEST_TIMEOUT_SEC")
    request_delay_sec: float = Field(default=0.8, alias="FORUM_REQUEST_DELAY_SEC")
    page_encoding: str = Field(default="gbk", alias="FORUM_PAGE_ENCODING")

    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/120.0.0.0 Safari/537.36"
        ),
        alias="FORUM_USER_AGENT",
    )

    # ---- run_fetch_once ----
    fetch_thread_list: bool = Field(default=True, alias="FORUM_FETCH_THREAD_LIST")
    fetch_first_detail: bool = Field(default=False, alias="FORUM_FETCH_FIRST_DETAIL")
    dump_html_on_empty: bool = Field(default=True, alias="FORUM_DUMP_HTML_ON_EMPTY")
    dump_html_path: str = Field(default="debug_forum_list.html", alias="FORUM_DUMP_HTML_PATH")


def load_settings() -> ForumSettings:
    return ForumSettings()
