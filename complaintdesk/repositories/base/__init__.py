"""
Base repository package.
"""

from complaintdesk.repositories.base.base_repository import BaseRepository, ModelType

__all__ = ["BaseRepository", "ModelType"]
