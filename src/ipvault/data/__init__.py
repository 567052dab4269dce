"""Bundled static reference tables (JSON)."""
