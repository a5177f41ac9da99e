from complaintdesk.models.category.admin_category_assignment import AdminCategoryAssignment
from complaintdesk.models.category.category import Category

__all__ = ["Category", "AdminCategoryAssignment"]
