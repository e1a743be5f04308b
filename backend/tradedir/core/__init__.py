"""
Core configuration, tiers and parameter handling.
"""
