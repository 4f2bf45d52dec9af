"""Filesystem traversal, path mapping and progress rendering."""
