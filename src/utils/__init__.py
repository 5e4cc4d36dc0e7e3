"""
Shared Utilities

Common functions used across all modules.
"""
