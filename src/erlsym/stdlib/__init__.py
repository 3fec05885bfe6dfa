"""Bundled builtin signature catalogs."""
