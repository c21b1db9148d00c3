"""Input helpers for reading JSON documents."""
