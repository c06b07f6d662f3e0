"""Reformatting of raw logger tables into the wide analysis schema."""
