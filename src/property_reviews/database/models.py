"""
Schema definitions for the Property Reviews DuckDB store
Raw review records are kept as JSON text; only the approval flag is a
mutable column
"""
# =========================
# Schema SQL Definitions
# =========================
SCHEMA_SQL = """
-- Reviews table: raw records from the property-management export
CREATE TABLE IF NOT EXISTS reviews (
    id VARCHAR PRIMARY KEY,
    listing_id VARCHAR,
    position INTEGER,  -- Order in the source export
    is_approved BOOLEAN NOT NULL DEFAULT FALSE,
    payload VARCHAR NOT NULL,  -- Raw record as JSON
    imported_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP
);

-- Listings table: property metadata shown next to reviews
CREATE TABLE IF NOT EXISTS listings (
    id VARCHAR PRIMARY KEY,
    position INTEGER,
    payload VARCHAR NOT NULL
);
"""
