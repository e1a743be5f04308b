"""
Trade directory backend.
"""
