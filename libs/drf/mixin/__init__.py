from .permission import PermissionRegistrationMixin

__all__ = ["PermissionRegistrationMixin"]
