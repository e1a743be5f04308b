"""
Directory ranking services and data sources.
"""
