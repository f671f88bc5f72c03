from __future__ import annotations

import logging

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

LANDMARK_ROLES = (
    ("main", "main"),
    ("nav", "navigation"),
    ("header", "banner"),
    ("footer", "contentinfo"),
)

SKIP_LINKS_CLASS = "skip-links"
SKIP_LINK_CSS = """
.skip-links {
  position: absolute;
  top: -40px;
  left: 6px;
  background: #000;
  color: #fff;
  padding: 8px;
  text-decoration: none;
  z-index: 1000;
}
.skip-links:focus {
  top: 6px;
}
"""


def unused_id(soup: BeautifulSoup, base: str) -> str:
    """
    Returns `base`, or `base-2`, `base-3`, ... when the id is already taken,
    so a fragment link always resolves to the element it was made for.
    """
    taken = {tag.get("id") for tag in soup.find_all(id=True)}
    candidate, suffix = base, 2
    while candidate in taken:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def add_skip_links(soup: BeautifulSoup, link_text: str, main_id: str) -> bool:
    """
    Prepends a skip-link container pointing at <main>.
    No-op when a container already exists or the page has no <main>.
    """
    if soup.find(class_=SKIP_LINKS_CLASS) is not None:
        return False

    main = soup.find("main")
    if main is None:
        return False

    if not main.get("id"):
        main["id"] = unused_id(soup, main_id)

    container = soup.new_tag("div", attrs={"class": SKIP_LINKS_CLASS})
    link = soup.new_tag("a", attrs={"href": f"#{main['id']}", "class": "skip-link"})
    link.string = link_text
    container.append(link)

    style = soup.new_tag("style")
    style.string = SKIP_LINK_CSS
    soup.find("head").append(style)

    soup.find("body").insert(0, container)
    logger.debug("Skip link inserted for #%s", main["id"])
    return True


def normalize_headings(soup: BeautifulSoup) -> int:
    """
    Closes skipped heading levels: a heading more than one level below its
    predecessor is renamed to exactly one level below it. Content and
    attributes are preserved. Returns the number of renamed headings.
    """
    expected = 1
    changed = 0
    for heading in soup.find_all(HEADING_TAGS):
        level = int(heading.name[1])
        if level > expected + 1:
            heading.name = f"h{expected + 1}"
            expected += 1
            changed += 1
        else:
            expected = level
    if changed:
        logger.debug("Heading structure normalized (%d headings renamed)", changed)
    return changed


def ensure_image_alt_text(soup: BeautifulSoup) -> int:
    """Gives every <img> without an alt attribute an empty (decorative) alt."""
    changed = 0
    for img in soup.find_all("img"):
        if not img.has_attr("alt"):
            img["alt"] = ""
            changed += 1
    return changed


def add_aria_landmarks(soup: BeautifulSoup) -> int:
    """Adds the implicit landmark role to the first main/nav/header/footer lacking one."""
    changed = 0
    for tag_name, role in LANDMARK_ROLES:
        element = soup.find(tag_name)
        if element is not None and not element.get("role"):
            element["role"] = role
            changed += 1
    return changed
