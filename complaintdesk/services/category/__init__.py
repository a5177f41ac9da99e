from complaintdesk.services.category.category_service import CategoryService

__all__ = ["CategoryService"]
