"""
Business logic layer.

Services receive a Principal explicitly, run each mutation in one
transaction and return ServiceResult values instead of raising.
"""
