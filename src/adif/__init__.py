"""ADIF interchange codec.

This package tokenizes, decodes, and encodes tag-length-prefixed
contact records. It is storage- and transport-agnostic.
"""
