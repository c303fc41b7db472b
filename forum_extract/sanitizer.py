from __future__ import annotations

import copy
import re

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Comment, NavigableString, Tag
from bs4.formatter import HTMLFormatter

from forum_extract.results import MissingElementError

# Site-hosted decoration (watermarks, smilies). Kept unless the path says "none".
STATIC_ASSET_PREFIX = "https://static.52pojie.cn/static/"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def _substitute(value: str) -> str:
    return EntitySubstitution.substitute_xml(value).replace("\xa0", "&nbsp;")


# Minimal escaping, but non-breaking spaces are written as entities.
CONTENT_FORMATTER = HTMLFormatter(entity_substitution=_substitute)


def _tag_factory(node: Tag) -> BeautifulSoup:
    root = node
    while root.parent is not None:
        root = root.parent
    if isinstance(root, BeautifulSoup):
        return root
    return BeautifulSoup("", "lxml")


def _rewrite_code_block(pre: Tag) -> None:
    for sibling in pre.find_next_siblings():
        sibling.decompose()

    factory = _tag_factory(pre)
    for text in list(pre.find_all(string=True)):
        if isinstance(text, Comment):
            continue
        lines = _LINE_BREAK_RE.split(str(text))
        nodes: list = []
        for i, line in enumerate(lines):
            if i:
                nodes.append(factory.new_tag("br"))
            if line:
                nodes.append(NavigableString(line.replace(" ", "\xa0")))
        for node in nodes:
            text.insert_before(node)
        text.extract()


def sanitize_content(cell: Tag, watermark_prefix: str = STATIC_ASSET_PREFIX) -> str:
    """
    Clean a post body cell in place and return its inner markup. Pass a
    copy when the surrounding document must stay as parsed.

    Steps run in this order:
    1. drop `div.tip` banners
    2. drop `script` nodes (author level badges)
    3. `pre` blocks: drop following toolbar siblings, line breaks -> <br/>,
       spaces -> &nbsp;
    4. drop site watermark images, promote lazy-load `file` attribute to `src`
    """
    for tip in cell.select("div.tip"):
        tip.decompose()

    for script in cell.find_all("script"):
        script.decompose()

    for pre in cell.find_all("pre"):
        if pre.decomposed:
            continue
        _rewrite_code_block(pre)

    for img in cell.find_all("img"):
        src = img.get("src") or ""
        if watermark_prefix in src and "none" not in src:
            img.decompose()
            continue
        real_src = img.get("file")
        if real_src:
            img["src"] = real_src

    return cell.decode_contents(formatter=CONTENT_FORMATTER)


def extract_post_content(container: Tag, watermark_prefix: str = STATIC_ASSET_PREFIX) -> str:
    """
    Content of one `div.pcb` container. The container's document is left
    untouched; the body cell is cleaned on a copy.

    Raises:
        MissingElementError: neither `td.t_f` nor `div.locked` is present
    """
    cell = container.select_one("td.t_f")
    if cell is not None:
        return sanitize_content(copy.copy(cell), watermark_prefix)

    # Locked/paid content placeholder, returned as-is.
    locked = container.select_one("div.locked")
    if locked is None:
        raise MissingElementError("post body has neither td.t_f nor div.locked")
    return locked.decode_contents()
