"""Schema of the seen-item ledger."""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS processed_items (
    url_hash TEXT PRIMARY KEY,
    url TEXT NOT NULL,
    title TEXT,
    source_name TEXT,
    matched_topic TEXT NOT NULL DEFAULT '',
    analysis_json JSONB,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_processed_items_created_at ON processed_items(created_at);
"""
