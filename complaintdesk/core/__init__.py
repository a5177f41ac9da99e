# complaintdesk/core/__init__.py
"""
Core utilities: exceptions, logging, constants and change events.
"""
