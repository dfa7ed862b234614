"""
Utilities for simvar.
"""
