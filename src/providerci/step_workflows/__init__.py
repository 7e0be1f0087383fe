"""Catalog of parameterized step factories, grouped by concern."""
