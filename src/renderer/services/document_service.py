from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup, Doctype, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from cms_core.model import Content

logger = logging.getLogger(__name__)

# Elements that belong in <head> when a template omits the head/body skeleton
HEAD_TAGS = {"title", "meta", "link", "style", "base"}

# HTML5 output: '<br>' instead of '<br/>', and 'alt=""' kept explicit
HTML_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
    empty_attributes_are_booleans=False,
)


class DocumentService:
    """
    Stateless helpers around the mutable template document: parsing,
    skeleton completion, stylesheet and metadata injection, serialization.
    """

    @staticmethod
    def parse(html_structure: str) -> BeautifulSoup:
        if not isinstance(html_structure, str):
            raise TypeError("Template HTML structure must be a string")
        soup = BeautifulSoup(html_structure.replace('\ufeff', ''), "html.parser")
        DocumentService.ensure_skeleton(soup)
        return soup

    @staticmethod
    def ensure_skeleton(soup: BeautifulSoup) -> None:
        """
        Guarantees html > head + body. html.parser keeps markup exactly as
        written, so fragments and skeletons without head/body are completed here.
        """
        html = soup.find("html")
        if html is None:
            html = soup.new_tag("html")
            for node in list(soup.contents):
                if not isinstance(node, Doctype):
                    html.append(node.extract())
            soup.append(html)

        head = soup.find("head")
        if head is None:
            head = soup.new_tag("head")
            html.insert(0, head)

        if soup.find("body") is None:
            body = soup.new_tag("body")
            for node in list(html.contents):
                if node is head:
                    continue
                if isinstance(node, Tag) and node.name in HEAD_TAGS:
                    head.append(node.extract())
                else:
                    body.append(node.extract())
            html.append(body)

    @staticmethod
    def head(soup: BeautifulSoup) -> Tag:
        return soup.find("head")

    @staticmethod
    def body(soup: BeautifulSoup) -> Tag:
        return soup.find("body")

    @staticmethod
    def inject_styles(soup: BeautifulSoup, css: str) -> Tag:
        """Appends the stylesheet text verbatim as a <style> element in <head>."""
        style = soup.new_tag("style")
        style.string = css or ""
        DocumentService.head(soup).append(style)
        return style

    @staticmethod
    def set_page_metadata(soup: BeautifulSoup, content: Content) -> None:
        """Title from the content title; description/keywords from its metadata when present."""
        head = DocumentService.head(soup)

        title = soup.find("title")
        if title is None:
            title = soup.new_tag("title")
            head.append(title)
        title.string = content.title or ""

        for name in ("description", "keywords"):
            value = (content.metadata or {}).get(name)
            if value:
                DocumentService._upsert_meta(soup, head, name, str(value))

    @staticmethod
    def _upsert_meta(soup: BeautifulSoup, head: Tag, name: str, value: str) -> None:
        meta: Optional[Tag] = soup.find("meta", attrs={"name": name})
        if meta is None:
            meta = soup.new_tag("meta", attrs={"name": name})
            head.append(meta)
        meta["content"] = value

    @staticmethod
    def serialize(soup: BeautifulSoup) -> str:
        return soup.decode(formatter=HTML_FORMATTER)
