from complaintdesk.schemas.auth.auth import LoginRequest, StudentRegister, TokenResponse

__all__ = ["StudentRegister", "LoginRequest", "TokenResponse"]
