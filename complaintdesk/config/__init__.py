"""
Configuration package for the complaint desk.

Contains environment settings and the logging configuration.
"""

from complaintdesk.config.settings import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
