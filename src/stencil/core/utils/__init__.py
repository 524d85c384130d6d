"""Shared utilities: YAML I/O, dictionary merging, paths, profiling."""
