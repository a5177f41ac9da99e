from complaintdesk.schemas.category.category import CategoryCreate, CategoryResponse, CategoryUpdate

__all__ = ["CategoryCreate", "CategoryUpdate", "CategoryResponse"]
