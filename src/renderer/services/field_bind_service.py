from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from cms_core.model import FieldDescriptor, FieldType
from renderer.model import ImageValue, LinkValue
from renderer.services.field_data_service import is_empty
from renderer.services.sanitize_service import sanitize_html

logger = logging.getLogger(__name__)

PLACEHOLDER_ATTR = "data-field"


class FieldBinder:
    """
    Writes field values into their placeholder nodes of a parsed template.

    Values are expected to have passed FieldDataService.check_render_data;
    a shape that still does not fit raises and fails the whole render.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup
        self._dispatch: Dict[FieldType, Callable[[Tag, Any], None]] = {
            FieldType.TEXT: self._bind_text,
            FieldType.TEXTAREA: self._bind_textarea,
            FieldType.RICH_TEXT: self._bind_rich_text,
            FieldType.IMAGE: self._bind_image,
            FieldType.LINK: self._bind_link,
        }

    def find_placeholder(self, field_id: str) -> Optional[Tag]:
        return self.soup.find(attrs={PLACEHOLDER_ATTR: field_id})

    def bind(self, field: FieldDescriptor, value: Any) -> bool:
        """
        Binds one value. Returns False when nothing was written because the
        template has no placeholder for the field or the value is empty.
        """
        placeholder = self.find_placeholder(field.id)
        if placeholder is None:
            logger.debug("No placeholder for field '%s'; skipping", field.id)
            return False
        if is_empty(value):
            return False

        self._dispatch[field.type](placeholder, value)
        return True

    # -------- Per-type Renderers --------

    def _bind_text(self, element: Tag, value: str) -> None:
        # Plain text node, never parsed as markup
        element.string = value

    def _bind_textarea(self, element: Tag, value: str) -> None:
        element.clear()
        lines = value.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        for i, line in enumerate(lines):
            if i:
                element.append(self.soup.new_tag("br"))
            if line:
                element.append(NavigableString(line))

    def _bind_rich_text(self, element: Tag, value: str) -> None:
        fragment = BeautifulSoup(sanitize_html(value), "html.parser")
        element.clear()
        for node in list(fragment.contents):
            element.append(node.extract())

    def _bind_image(self, element: Tag, value: Dict[str, Any]) -> None:
        image = ImageValue.model_validate(value)

        if element.name == "img":
            element["src"] = image.src
            if image.alt:
                element["alt"] = image.alt
            if image.title:
                element["title"] = image.title
            return

        img = self.soup.new_tag("img", attrs={"src": image.src, "alt": image.alt or ""})
        if image.title:
            img["title"] = image.title
        element.append(img)

    def _bind_link(self, element: Tag, value: Dict[str, Any]) -> None:
        link = LinkValue.model_validate(value)

        if element.name == "a":
            anchor = element
            if link.text:
                anchor.string = link.text
        else:
            anchor = self.soup.new_tag("a")
            anchor.string = link.text or link.href

        anchor["href"] = link.href
        if link.title:
            anchor["title"] = link.title
        if link.target:
            anchor["target"] = link.target
            # A new browsing context must not get access to window.opener
            if link.target == "_blank":
                anchor["rel"] = "noopener"

        if anchor is not element:
            element.append(anchor)
