"""Service layer: storage, metadata fetching and bookmark operations."""
