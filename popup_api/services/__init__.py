"""
Use cases for the popup API.

Routers call these services instead of reading or writing the store directly.
"""
