# src/cms_core/database_schema.py

DEFAULT_SCHEMA_SCRIPT = """
CREATE TABLE IF NOT EXISTS templates (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    html_structure TEXT NOT NULL,
    css_styles TEXT NOT NULL DEFAULT '',
    accessibility_features TEXT NOT NULL,   -- JSON object
    content_fields TEXT NOT NULL,           -- JSON array
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_templates_name ON templates(name);

CREATE TABLE IF NOT EXISTS content (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    slug TEXT NOT NULL UNIQUE,
    body TEXT NOT NULL,
    template_id TEXT NOT NULL,
    author_id TEXT,
    status TEXT NOT NULL DEFAULT 'draft',
    metadata TEXT NOT NULL DEFAULT '{}',    -- JSON object
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    published_at TEXT
);
CREATE INDEX IF NOT EXISTS idx_content_status ON content(status);
CREATE INDEX IF NOT EXISTS idx_content_template ON content(template_id);

CREATE TABLE IF NOT EXISTS content_versions (
    id INTEGER PRIMARY KEY,
    content_id TEXT NOT NULL,
    version INTEGER NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL,
    metadata TEXT NOT NULL DEFAULT '{}',
    created_at TEXT NOT NULL,
    created_by TEXT,
    UNIQUE (content_id, version),
    FOREIGN KEY (content_id) REFERENCES content(id) ON DELETE CASCADE
);
"""

TABLE_NAMES = ["content_versions", "content", "templates"]
