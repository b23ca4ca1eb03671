"""Contact storage layer.

This module defines the storage collaborator used by imports and
duplicate collapse, with a JSONL-backed reference implementation.
"""
