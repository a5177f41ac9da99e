"""
Shared service-layer helpers.
"""
