"""Read-only view of a rendered page snapshot.

The extractor and the session validator only ever look at a document through
:class:`Node`, so they never touch browser-automation types. The concrete
implementation parses the HTML captured from the browser with Scrapling.
"""

from __future__ import annotations

from typing import Protocol

from scrapling.parser import Selector

_EMPTY_HTML = "<html><body></body></html>"


class Node(Protocol):
    def select(self, css: str) -> list[Node]: ...

    def select_one(self, css: str) -> Node | None: ...

    def attr(self, name: str) -> str | None: ...

    @property
    def text(self) -> str: ...


class Document(Node, Protocol):
    @property
    def body_text(self) -> str: ...


class HtmlNode:
    """A :class:`Node` backed by a Scrapling selector."""

    __slots__ = ("_el",)

    def __init__(self, element: Selector) -> None:
        self._el = element

    def select(self, css: str) -> list[HtmlNode]:
        return [HtmlNode(el) for el in self._el.css(css)]

    def select_one(self, css: str) -> HtmlNode | None:
        found = self._el.css(css)
        return HtmlNode(found[0]) if found else None

    def attr(self, name: str) -> str | None:
        return self._el.attrib.get(name)

    @property
    def text(self) -> str:
        """Visible text of the element and its descendants, roughly innerText."""
        return str(self._el.get_all_text(separator="\n", strip=True))


class HtmlDocument(HtmlNode):
    """A parsed page snapshot.

    ``body_text`` is the browser's own ``innerText`` of the body when the
    caller captured it; otherwise it is derived from the parsed markup.
    """

    __slots__ = ("_body_text",)

    def __init__(self, html: str, body_text: str | None = None) -> None:
        super().__init__(Selector(html or _EMPTY_HTML))
        self._body_text = body_text

    @property
    def body_text(self) -> str:
        if self._body_text is None:
            body = self.select_one("body")
            self._body_text = body.text if body else ""
        return self._body_text
