"""Durable cache layer.

This module persists per-ecosystem dependency snapshots and the
version markers that decide whether a snapshot can be trusted.
"""
