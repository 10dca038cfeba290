"""
HTTP API for Gardien.
"""
