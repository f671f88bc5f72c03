# tests/core/test_cms_config.py
import json
import logging

import pytest

from cms_core.core.managers.config_manager import ConfigManager, deep_merge
from cms_core.core.utils.configure_logging import LogWithTqdm, configure_logger
from cms_core.core.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {"level": "WARNING"},
    "renderer": {"skip_link_text": "Jump to content", "main_content_id": "content"},
    "audit": {"workers": 1, "fail_on_non_compliant": True},
}


@pytest.fixture
def config(tmp_path, monkeypatch):
    """
    Points the ConfigManager singleton at a temporary settings.json and
    restores the packaged settings afterwards.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: settings_file)
    monkeypatch.setattr(PathUtils, "get_site_settings_file", lambda: tmp_path / "cms_settings.json")

    manager = ConfigManager()
    manager.reset()
    yield manager

    monkeypatch.undo()
    manager.reset()


def test_singleton():
    assert ConfigManager() is ConfigManager()


def test_packaged_settings_are_loaded():
    assert PathUtils.get_settings_file().name == "settings.json"
    assert PathUtils.get_settings_file().exists()


def test_load(config):
    assert config.get_all()["renderer"]["main_content_id"] == "content"


def test_get_nested(config):
    assert config.get_nested("renderer.skip_link_text") == "Jump to content"
    assert config.get_nested("renderer.missing", "fallback") == "fallback"
    assert config.get_nested("renderer.skip_link_text.deeper", "fallback") == "fallback"


def test_set_nested_casts_to_existing_type(config):
    config.set_nested("audit.workers", "4")
    assert config.get_nested("audit.workers") == 4

    config.set_nested("audit.fail_on_non_compliant", "false")
    assert config.get_nested("audit.fail_on_non_compliant") is False

    config.set_nested("new_section.enabled", "yes")
    assert config.get_nested("new_section.enabled") == "yes"


def test_set_nested_through_a_scalar_fails(config):
    assert not config.set_nested("debug.level.sub", "x")


def test_reset_discards_changes(config):
    config.set_nested("audit.workers", 8)
    config.reset()
    assert config.get_nested("audit.workers") == 1


def test_missing_settings_file(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: tmp_path / "nope.json")
    monkeypatch.setattr(PathUtils, "get_site_settings_file", lambda: tmp_path / "cms_settings.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
        assert manager.sources == []
    finally:
        monkeypatch.undo()
        manager.reset()


def test_site_settings_override_defaults(config, tmp_path):
    (tmp_path / "cms_settings.json").write_text(json.dumps({
        "renderer": {"main_content_id": "page-main"},
        "database": {"path": "site.db"},
    }))
    config.reset()

    assert config.get_nested("renderer.main_content_id") == "page-main"
    assert config.get_nested("renderer.skip_link_text") == "Jump to content"
    assert config.get_nested("database.path") == "site.db"
    assert config.sources == [tmp_path / "settings.json", tmp_path / "cms_settings.json"]


def test_invalid_site_settings_are_ignored(config, tmp_path):
    (tmp_path / "cms_settings.json").write_text("[1, 2]")
    config.reset()

    assert config.get_nested("renderer.main_content_id") == "content"
    assert config.sources == [tmp_path / "settings.json"]


def test_deep_merge_keeps_the_defaults_untouched():
    defaults = {"renderer": {"a": 1, "b": {"c": 2}}, "debug": {"level": "INFO"}}
    merged = deep_merge(defaults, {"renderer": {"b": {"c": 3}}, "debug": "off"})

    assert merged == {"renderer": {"a": 1, "b": {"c": 3}}, "debug": "off"}
    assert defaults["renderer"]["b"]["c"] == 2


def test_renderer_reads_configured_defaults(config):
    from renderer.controllers.render_controller import TemplateRenderer

    renderer = TemplateRenderer()
    assert renderer.skip_link_text == "Jump to content"
    assert renderer.main_content_id == "content"


def test_database_path_defaults_to_cache_root(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = PathUtils.get_database_path("")
    assert path == tmp_path / ".cms_cache" / "cms.db"
    assert path.parent.is_dir()


def test_configure_logger_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logger("ERROR", {"renderer": "DEBUG"})
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], LogWithTqdm)
        assert logging.getLogger("renderer").level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("renderer").setLevel(logging.NOTSET)
