from complaintdesk.services.admin.admin_provisioning_service import AdminProvisioningService
from complaintdesk.services.admin.role_service import RoleService

__all__ = ["AdminProvisioningService", "RoleService"]
