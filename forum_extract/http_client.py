from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)

BLOCKED_STATUSES = (403, 429)


@dataclass(frozen=True)
class HttpConfig:
    timeout_sec: float
    delay_sec: float
    user_agent: str
    page_encoding: str = "gbk"


class HttpClient:
    """
    Loads forum pages for ForumClient.

    One GET per call, after a short pause. Any non-2xx answer is raised as
    requests.HTTPError carrying the response, so the status code can be
    reported to the caller.
    """

    def __init__(self, config: HttpConfig, session: Optional[requests.Session] = None):
        self._cfg = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": config.user_agent,
                "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
            }
        )

    def get_text(self, url: str) -> str:
        """
        Raises:
            requests.HTTPError: forum answered with a non-2xx status
            requests.RequestException: connection or timeout failure
        """
        self._pause()
        try:
            resp = self._session.get(url, timeout=self._cfg.timeout_sec)
        except requests.RequestException as e:
            logger.error("Request failed: url=%s err=%s", url, e)
            raise

        self._check_status(resp, url)
        return self._decode(resp)

    def _check_status(self, resp: requests.Response, url: str) -> None:
        if resp.ok:
            return
        kind = "blocked or rate-limited" if resp.status_code in BLOCKED_STATUSES else "error status"
        logger.error("Forum answered with %s: status=%s url=%s", kind, resp.status_code, url)
        raise requests.HTTPError(f"{kind}: status={resp.status_code} url={url}", response=resp)

    def _decode(self, resp: requests.Response) -> str:
        # No charset in the header: requests would fall back to ISO-8859-1.
        if "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = self._cfg.page_encoding
        return resp.text

    def _pause(self) -> None:
        if self._cfg.delay_sec > 0:
            time.sleep(self._cfg.delay_sec + random.uniform(0.0, 0.25))
