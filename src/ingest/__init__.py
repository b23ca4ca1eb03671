"""Contact import.

This module reads ADIF uploads and LoTW reports and reconciles their
records against the stored logbook.
"""
