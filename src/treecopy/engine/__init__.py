"""Recursive copy engine: filter, classify, resolve, execute, walk."""
