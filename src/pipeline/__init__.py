"""Build orchestration.

This module sequences the per-ecosystem managers, runs the build tool,
and persists caches once the build succeeded.
"""
