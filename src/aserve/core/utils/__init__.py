"""Shared helpers: file I/O, dictionary merging, subprocess execution."""
