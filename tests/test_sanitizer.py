from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from forum_extract.results import MissingElementError
from forum_extract.sanitizer import extract_post_content, sanitize_content


def _cell(inner: str):
    soup = BeautifulSoup(f'<html><body><table><tr><td class="t_f">{inner}</td></tr></table></body></html>', "lxml")
    return soup.select_one("td.t_f")


POST_BODY = (
    '<div class="tip">下载附件 保存到相册</div>'
    "<p>hello <b>world</b></p>"
    '<script type="text/javascript">showlevel(3)</script>'
    '<div class="blockcode"><pre>int main() {\r\n    return 0;\r\n}</pre>'
    '<em onclick="copycode()">复制代码</em><div class="toolbar">x</div></div>'
    '<img src="https://static.52pojie.cn/static/image/smiley/default/1.gif">'
    '<img src="https://static.52pojie.cn/static/image/common/none.gif" file="https://attach.52pojie.cn/a.png">'
    '<img src="https://example.org/pic.jpg">'
)


def test_sanitize_content_removes_tips_and_scripts():
    out = sanitize_content(_cell(POST_BODY))
    assert "下载附件" not in out
    assert "showlevel" not in out
    assert "<p>hello <b>world</b></p>" in out


def test_sanitize_content_rewrites_code_blocks_and_drops_toolbar():
    out = sanitize_content(_cell(POST_BODY))
    assert "复制代码" not in out
    assert "toolbar" not in out
    assert "<pre>int&nbsp;main()&nbsp;{<br/>&nbsp;&nbsp;&nbsp;&nbsp;return&nbsp;0;<br/>}</pre>" in out


def test_sanitize_content_handles_images():
    out = sanitize_content(_cell(POST_BODY))
    assert "smiley" not in out
    assert 'src="https://attach.52pojie.cn/a.png"' in out
    assert 'src="https://example.org/pic.jpg"' in out


def test_file_attribute_overrides_src():
    out = sanitize_content(_cell('<img src="placeholder.gif" file="real.jpg" id="aimg_1">'))
    assert 'src="real.jpg"' in out
    assert "placeholder.gif" not in out


def test_custom_watermark_prefix():
    out = sanitize_content(_cell('<img src="https://cdn.test/static/wm.png">'), watermark_prefix="https://cdn.test/static/")
    assert "<img" not in out


def test_sanitize_content_is_idempotent():
    first = sanitize_content(_cell(POST_BODY))
    second = sanitize_content(_cell(first))
    assert second == first


def test_extract_post_content_falls_back_to_locked_block():
    soup = BeautifulSoup(
        '<div class="pcb"><div class="locked">需要<a href="x">回复</a>才可以浏览</div></div>', "lxml"
    )
    content = extract_post_content(soup.select_one("div.pcb"))
    assert content == '需要<a href="x">回复</a>才可以浏览'


def test_extract_post_content_without_body_raises():
    soup = BeautifulSoup('<div class="pcb"><p>nothing</p></div>', "lxml")
    with pytest.raises(MissingElementError):
        extract_post_content(soup.select_one("div.pcb"))
