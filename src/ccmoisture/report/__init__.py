"""Descriptive reports on cleaned site datasets."""
