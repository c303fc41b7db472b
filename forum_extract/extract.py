from __future__ import annotations

from bs4.element import Tag


def node_text(node: Tag) -> str:
    """Text of a node with whitespace runs collapsed to single spaces."""
    return " ".join(node.get_text().split())


def _narrow(node: Tag, selectors: tuple[str, ...]) -> list[Tag]:
    current = [node]
    for selector in selectors:
        seen: set[int] = set()
        matched: list[Tag] = []
        for el in current:
            for m in el.select(selector):
                if id(m) not in seen:
                    seen.add(id(m))
                    matched.append(m)
        current = matched
        if not current:
            break
    return current


def extract_text(node: Tag, *selectors: str) -> str:
    """
    Narrow `node` through `selectors` one step at a time and return the text
    of the final match set ("" as soon as a step matches nothing).
    """
    if not selectors:
        return node_text(node)
    matches = _narrow(node, selectors)
    return " ".join(t for t in (node_text(m) for m in matches) if t)


def extract_attr(node: Tag, attr: str, *selectors: str) -> str:
    """
    Like `extract_text`, but returns `attr` of the first match that has it.
    With no selectors it returns the node's own text, like `extract_text`.
    """
    if not selectors:
        return node_text(node)
    for m in _narrow(node, selectors):
        value = m.get(attr)
        if value:
            return value if isinstance(value, str) else " ".join(value)
    return ""
