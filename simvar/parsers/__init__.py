"""
Readers for variant sources and interval restrictions.
"""
