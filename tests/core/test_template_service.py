# tests/core/test_template_service.py
import pytest

from cms_core.core.exceptions import (
    TemplateInactiveError, TemplateNotFoundError, TemplateValidationError
)
from cms_core.core.managers.database_manager import DatabaseManager
from cms_core.core.managers.template_data_manager import TemplateDataManager
from cms_core.core.services.template_service import DEFAULT_TEMPLATE, TemplateService
from cms_core.model import Content
from wcag_auditor.model import AccessibilityIssue

ACCESSIBLE_PAGE = """<html lang="en">
<head><title>Contact page</title></head>
<body>
  <a href="#main">Skip to main content</a>
  <nav><a href="/">Home page</a></nav>
  <main id="main"><h1 data-field="heading">Contact</h1></main>
</body>
</html>"""

FIELD_DATA = {"page-title": "Welcome", "content-heading": "Latest news", "content-body": "<p>Hello</p>"}


@pytest.fixture
def db(tmp_path):
    """A fresh SQLite database with the CMS schema."""
    manager = DatabaseManager(tmp_path / "cms.db")
    manager.init_schema()
    yield manager
    manager.close()


@pytest.fixture
def service(db):
    return TemplateService(TemplateDataManager(db))


@pytest.fixture
def default_template(service):
    return service.create_default_template().template


def accessible_template(**overrides):
    data = {
        "name": "Contact",
        "htmlStructure": ACCESSIBLE_PAGE,
        "contentFields": [{"id": "heading", "name": "Heading", "type": "text", "required": True}],
    }
    data.update(overrides)
    return data


# --- Create ---

def test_default_template_is_stored(service, default_template):
    assert default_template.id
    assert service.get_template_by_name("Basic Page Template").id == default_template.id
    assert [f.id for f in default_template.content_fields] == [f["id"] for f in DEFAULT_TEMPLATE["contentFields"]]


def test_advisories_do_not_block_a_save(service):
    result = service.create_default_template()

    assert any("skip links" in w for w in result.warnings)
    assert any(v.rule == "WCAG 2.4.1" for v in result.violations)


def test_accessible_template_passes_cleanly(service):
    result = service.create_template(accessible_template())
    assert result.template.name == "Contact"
    assert result.warnings == []


def test_malformed_record_is_rejected(service):
    with pytest.raises(TemplateValidationError) as exc_info:
        service.create_template({"name": "", "htmlStructure": ACCESSIBLE_PAGE})

    assert exc_info.value.errors
    assert service.get_all_templates() == []


def test_inaccessible_markup_is_rejected(service):
    markup = '<html lang="en"><head><title>Gallery</title></head><body><main><img src="a.png"></main></body></html>'

    with pytest.raises(TemplateValidationError) as exc_info:
        service.create_template({"name": "Gallery", "htmlStructure": markup})

    error = exc_info.value
    assert str(error).startswith("Template accessibility validation failed")
    assert "WCAG 1.1.1: Image missing alt attribute" in error.errors
    assert "WCAG 2.4.6: Page missing h1 heading" in error.errors
    assert all(isinstance(v, AccessibilityIssue) for v in error.violations)
    assert service.get_all_templates() == []


def test_duplicate_field_ids_are_rejected(service):
    fields = [
        {"id": "heading", "name": "Heading", "type": "text"},
        {"id": "heading", "name": "Heading again", "type": "text"},
    ]
    with pytest.raises(TemplateValidationError) as exc_info:
        service.create_template(accessible_template(contentFields=fields))
    assert "Duplicate field IDs found: heading" in exc_info.value.errors


def test_duplicate_field_names_are_rejected(service):
    fields = [
        {"id": "heading", "name": "Heading", "type": "text"},
        {"id": "subheading", "name": "Heading", "type": "text"},
    ]
    with pytest.raises(TemplateValidationError) as exc_info:
        service.create_template(accessible_template(contentFields=fields))
    assert "Duplicate field names found: Heading" in exc_info.value.errors
    assert service.get_all_templates() == []


def test_field_advisories(service):
    fields = [
        {"id": "heading", "name": "Heading", "type": "text"},
        {"id": "photo", "name": "Photo", "type": "image"},
        {"id": "more", "name": "More", "type": "link"},
    ]
    result = service.create_template(accessible_template(contentFields=fields))

    assert 'Image field "Photo" should require alt text for accessibility' in result.warnings
    assert 'Link field "More" should require title attribute for accessibility' in result.warnings


# --- Update ---

def test_partial_update(service, default_template):
    result = service.update_template(default_template.id, {"description": "Changed"})

    assert result.template.description == "Changed"
    assert result.template.name == default_template.name
    assert result.template.updated_at >= default_template.updated_at


def test_update_with_bad_markup_keeps_stored_version(service, default_template):
    with pytest.raises(TemplateValidationError):
        service.update_template(default_template.id, {"htmlStructure": "<div><img src='x.png'></div>"})

    stored = service.get_template_by_id(default_template.id)
    assert stored.html_structure == default_template.html_structure


def test_update_unknown_template(service):
    with pytest.raises(TemplateNotFoundError):
        service.update_template("missing", {"name": "x"})


# --- State ---

def test_deactivated_template_cannot_render(service, default_template):
    service.deactivate_template(default_template.id)
    assert service.get_active_templates() == []

    with pytest.raises(TemplateInactiveError):
        service.render_template(default_template.id, Content(title="Home"), FIELD_DATA)

    service.activate_template(default_template.id)
    assert service.render_template(default_template.id, Content(title="Home"), FIELD_DATA).ok


def test_delete_template(service, default_template):
    assert service.delete_template(default_template.id)
    assert service.get_template_by_id(default_template.id) is None
    with pytest.raises(TemplateNotFoundError):
        service.delete_template(default_template.id)


# --- Validation & rendering ---

def test_validate_template_compliance(service, default_template):
    result = service.validate_template_compliance(default_template.id)
    assert result.is_valid
    assert result.report is not None
    assert result.report.error_count == 0


def test_render_unknown_template(service):
    with pytest.raises(TemplateNotFoundError):
        service.render_template("missing", Content(title="Home"))


def test_render_default_template(service, default_template):
    result = service.render_template(default_template.id, Content(title="Home page"), FIELD_DATA, audit=True)

    assert result.ok
    assert "Welcome" in result.html
    assert "<p>Hello</p>" in result.html
    assert result.html.count('class="skip-links"') == 1
    assert "<title>Home page</title>" in result.html
    assert result.report.is_compliant


def test_render_reports_missing_fields(service, default_template):
    result = service.render_template(default_template.id, Content(title="Home"), {})
    assert result.html == ""
    assert len(result.errors) == 3


def test_validate_field_data(default_template):
    result = TemplateService.validate_field_data(default_template, {**FIELD_DATA, "page-title": "x" * 101})
    assert result.errors == ['Field "Page Title" must be no more than 100 characters long']
