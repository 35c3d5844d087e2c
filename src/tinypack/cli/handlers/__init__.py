"""
Command handler implementations.
"""
