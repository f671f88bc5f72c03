# tests/core/test_cms_database.py
import sqlite3

import pytest

from cms_core.core.managers.database_manager import DatabaseManager
from cms_core.database_schema import TABLE_NAMES


@pytest.fixture
def db(tmp_path):
    """An initialized database in a temporary directory."""
    manager = DatabaseManager(tmp_path / "nested" / "cms.db")
    manager.init_schema()
    yield manager
    manager.close()


def _insert_content(db, content_id: str, slug: str) -> None:
    db.execute_query(
        "INSERT INTO content (id, title, slug, body, template_id, created_at, updated_at) "
        "VALUES (?, ?, ?, ?, ?, ?, ?)",
        (content_id, "T", slug, "{}", "tpl", "2024-01-01", "2024-01-01")
    )


def test_schema_creates_all_tables(db):
    rows = db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
    assert set(TABLE_NAMES) <= {r["name"] for r in rows}
    assert db.db_path.parent.is_dir()


def test_connection_is_reused_per_thread(db):
    assert db.get_connection() is db.get_connection()


def test_save_batch_and_clear_tables(db):
    _insert_content(db, "c1", "one")
    db.save_batch(
        "INSERT INTO content_versions (content_id, version, title, body, created_at) VALUES (?, ?, ?, ?, ?)",
        [("c1", 1, "T", "{}", "2024-01-01"), ("c1", 2, "T", "{}", "2024-01-02")]
    )
    assert db.fetch_one("SELECT COUNT(*) AS n FROM content_versions")["n"] == 2

    db.clear_tables(TABLE_NAMES)
    assert db.fetch_all("SELECT id FROM content") == []


def test_execute_insert_returns_row_id(db):
    _insert_content(db, "c1", "one")
    row_id = db.execute_insert(
        "INSERT INTO content_versions (content_id, version, title, body, created_at) VALUES (?, ?, ?, ?, ?)",
        ("c1", 1, "T", "{}", "2024-01-01")
    )
    assert db.fetch_one("SELECT version FROM content_versions WHERE id = ?", (row_id,))["version"] == 1


def test_versions_are_unique_per_content(db):
    _insert_content(db, "c1", "one")
    query = "INSERT INTO content_versions (content_id, version, title, body, created_at) VALUES (?, ?, ?, ?, ?)"
    db.execute_insert(query, ("c1", 1, "T", "{}", "2024-01-01"))
    with pytest.raises(sqlite3.IntegrityError):
        db.execute_insert(query, ("c1", 1, "T", "{}", "2024-01-01"))


def test_deleting_content_cascades_to_versions(db):
    _insert_content(db, "c1", "one")
    db.execute_insert(
        "INSERT INTO content_versions (content_id, version, title, body, created_at) VALUES (?, ?, ?, ?, ?)",
        ("c1", 1, "T", "{}", "2024-01-01")
    )
    db.execute_query("DELETE FROM content WHERE id = ?", ("c1",))
    assert db.fetch_all("SELECT id FROM content_versions") == []


def test_failed_reads_return_empty_results(db):
    assert db.fetch_all("SELECT * FROM missing_table") == []
    assert db.fetch_one("SELECT * FROM missing_table") is None


def test_failed_writes_raise(db):
    with pytest.raises(sqlite3.Error):
        db.execute_query("INSERT INTO missing_table VALUES (1)")
