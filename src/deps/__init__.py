"""Dependency tree management.

This module decides per ecosystem whether to reuse, prune, or rebuild
a cached tree, and drives the package-manager commands that do it.
"""
