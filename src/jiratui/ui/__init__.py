"""Textual front-end: renders controller snapshots and forwards keys."""
