# src/wcag_auditor/dom/builder.py
import logging
from typing import Set, Union
from bs4 import BeautifulSoup, Tag

from .models import HTMLDocument
from .core import ElementBase
from .registry import DOMRegistry
from .elements.link import LinkElement
from .elements.form import FormControlElement

logger = logging.getLogger(__name__)


class DOMBuilder:
    """
    Builder responsible for turning raw HTML (or an already parsed BeautifulSoup
    document) into the read-only HTMLDocument model audited by the QNGINE.

    The source tree is never modified: a rendered page can be audited in place.
    """

    def __init__(self):
        """Initializes the builder and ensures the DOMRegistry is populated."""
        DOMRegistry.discover()

    def parse_doc(self, source: Union[str, BeautifulSoup]) -> HTMLDocument:
        """
        Parses an HTML document into an HTMLDocument object.

        Args:
            source (str | BeautifulSoup): Raw markup or a parsed document tree.

        Returns:
            HTMLDocument: A structured representation of the document.

        Raises:
            TypeError: If the source is neither a string nor a BeautifulSoup document.
        """
        if isinstance(source, BeautifulSoup):
            soup = source
        elif isinstance(source, str):
            # Basic cleanup of potentially dirty HTML (e.g., BOM)
            soup = BeautifulSoup(source.replace('\ufeff', ''), 'html.parser')
        else:
            raise TypeError(f"Expected an HTML string or BeautifulSoup document, got {type(source).__name__}")

        html_tag = soup.find('html')
        title_tag = soup.find('title')

        element_ids = {t.get('id') for t in soup.find_all(id=True)}
        label_for = {lbl.get('for') for lbl in soup.find_all('label') if lbl.get('for')}

        root = ElementBase(
            tag="#document",
            children=[
                self._build_tree(child, element_ids, label_for)
                for child in soup.children if isinstance(child, Tag)
            ]
        )

        return HTMLDocument(
            lang=html_tag.get('lang') if html_tag is not None else None,
            has_title=title_tag is not None,
            title_text=title_tag.get_text().strip() if title_tag is not None else "",
            root=root,
            element_ids=element_ids
        )

    def _build_tree(self, tag: Tag, element_ids: Set[str], label_for: Set[str]) -> ElementBase:
        """
        Recursively builds a simplified element tree from a BeautifulSoup Tag.

        Applies enrichment logic for elements whose rules depend on the rest of
        the document (fragment links, form controls).
        """
        children = [
            self._build_tree(child, element_ids, label_for)
            for child in tag.children if isinstance(child, Tag)
        ]

        definition = DOMRegistry.get_definition(tag.name)
        if definition and (definition.matches is None or definition.matches(tag)):
            element = definition.parser(tag, children)
        else:
            element = ElementBase(tag=tag.name, attrs=dict(tag.attrs), children=children)

        # --- Enrichment: in-page link targets ---
        if isinstance(element, LinkElement) and element.is_fragment:
            element.fragment_target_found = element.href[1:] in element_ids

        # --- Enrichment: label association & required indication ---
        if isinstance(element, FormControlElement):
            control_id = tag.get('id')
            element.has_label = bool(
                (control_id and control_id in label_for)
                or tag.get('aria-label')
                or tag.get('aria-labelledby')
            )
            element.has_required_indicator = (
                tag.get('aria-required') == 'true'
                or self._is_described_in_form(tag, control_id)
            )

        return element

    @staticmethod
    def _is_described_in_form(tag: Tag, control_id: str) -> bool:
        """True when another element of the enclosing form references the control via aria-describedby."""
        if not control_id:
            return False
        form = tag.find_parent('form')
        if form is None:
            return False
        return form.find(lambda t: control_id in (t.get('aria-describedby') or '')) is not None
