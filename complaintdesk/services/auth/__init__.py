"""
Identity and authentication services.
"""
