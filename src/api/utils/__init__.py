"""Utility modules for the API layer.

- **responses**: orjson-backed JSON response class
"""
