# tests/renderer/test_repair_service.py
import pytest

from renderer.services import repair_service
from renderer.services.document_service import DocumentService
from renderer.services.sanitize_service import sanitize_html


@pytest.fixture
def soup():
    """A parsed page with the full html/head/body skeleton."""
    return DocumentService.parse(
        '<html><head><title>T</title></head><body>'
        '<header></header><main><h1>A</h1><h3>B</h3><h3>C</h3><h6>D</h6></main>'
        '<img src="a.png"><img src="b.png" alt="Logo"><footer role="doc-footer"></footer>'
        '</body></html>'
    )


# --- Skip links ---

def test_skip_link_is_first_in_body(soup):
    assert repair_service.add_skip_links(soup, "Skip ahead", "content")

    first = DocumentService.body(soup).find(True)
    assert first.name == "div"
    assert "skip-links" in first.get("class")
    link = first.find("a")
    assert link["href"] == "#content"
    assert link.get_text() == "Skip ahead"
    assert soup.find("main")["id"] == "content"
    assert ".skip-links" in soup.find("head").find_all("style")[-1].string


def test_skip_links_are_idempotent(soup):
    repair_service.add_skip_links(soup, "Skip", "content")
    assert not repair_service.add_skip_links(soup, "Skip", "content")
    assert len(soup.find_all(class_="skip-links")) == 1


def test_skip_link_uses_existing_main_id():
    soup = DocumentService.parse('<main id="primary"><h1>x</h1></main>')
    repair_service.add_skip_links(soup, "Skip", "content")
    assert soup.find("a")["href"] == "#primary"


def test_skip_link_target_id_is_unique():
    soup = DocumentService.parse('<div id="main-content">x</div><main><h1>x</h1></main>')
    repair_service.add_skip_links(soup, "Skip", "main-content")

    assert soup.find("main")["id"] == "main-content-2"
    assert soup.find(class_="skip-links").find("a")["href"] == "#main-content-2"
    assert len(soup.find_all(id="main-content")) == 1


def test_unused_id():
    soup = DocumentService.parse('<p id="a"></p><p id="a-2"></p>')
    assert repair_service.unused_id(soup, "a") == "a-3"
    assert repair_service.unused_id(soup, "b") == "b"


def test_no_skip_link_without_main():
    soup = DocumentService.parse("<div><h1>x</h1></div>")
    assert not repair_service.add_skip_links(soup, "Skip", "content")
    assert soup.find("a") is None


# --- Headings ---

def test_normalize_headings(soup):
    changed = repair_service.normalize_headings(soup)
    assert [h.name for h in soup.find_all(repair_service.HEADING_TAGS)] == ["h1", "h2", "h3", "h4"]
    assert changed == 2
    assert soup.find("h4").get_text() == "D"


def test_well_formed_headings_are_untouched():
    soup = DocumentService.parse("<h1>a</h1><h2>b</h2><h2>c</h2><h3>d</h3><h2>e</h2>")
    assert repair_service.normalize_headings(soup) == 0


def test_first_heading_below_h2_is_raised():
    soup = DocumentService.parse("<h3>Intro</h3>")
    repair_service.normalize_headings(soup)
    assert soup.find("h2").get_text() == "Intro"


# --- Images & landmarks ---

def test_alt_backfill_only_touches_missing_alt(soup):
    assert repair_service.ensure_image_alt_text(soup) == 1
    assert [img["alt"] for img in soup.find_all("img")] == ["", "Logo"]


def test_landmarks(soup):
    assert repair_service.add_aria_landmarks(soup) == 2
    assert soup.find("main")["role"] == "main"
    assert soup.find("header")["role"] == "banner"
    assert soup.find("footer")["role"] == "doc-footer"


# --- Document ---

def test_parse_rejects_non_string():
    with pytest.raises(TypeError):
        DocumentService.parse(None)


def test_skeleton_moves_head_tags():
    soup = DocumentService.parse('<title>T</title><meta name="x" content="y"><p>Body</p>')
    assert soup.find("head").find("title") is not None
    assert soup.find("head").find("meta") is not None
    assert soup.find("body").find("p") is not None


def test_doctype_stays_in_front():
    soup = DocumentService.parse("<!DOCTYPE html><p>x</p>")
    html = DocumentService.serialize(soup)
    assert html.startswith("<!DOCTYPE html>")
    assert html.index("<!DOCTYPE") < html.index("<html>")


def test_serialize_uses_html5_void_elements():
    soup = DocumentService.parse('<p>a<br/>b</p><img src="x.png" alt="">')
    html = DocumentService.serialize(soup)
    assert "a<br>b" in html
    assert 'alt=""' in html


# --- Sanitizer ---

@pytest.mark.parametrize("raw, clean", [
    ("<p>ok</p><SCRIPT>alert(1)</SCRIPT>", "<p>ok</p>"),
    ('<img src="x" onError="boom()">', '<img src="x" >'),
    ('<a href="JavaScript:run()">x</a>', '<a href="run()">x</a>'),
    ("<strong>kept</strong>", "<strong>kept</strong>"),
])
def test_sanitize_html(raw, clean):
    assert sanitize_html(raw) == clean


def test_single_quoted_handlers_pass_through():
    # Only double-quoted handlers are stripped
    assert sanitize_html("<b onclick='x()'>b</b>") == "<b onclick='x()'>b</b>"
