"""User and authentication use cases"""
from .register_user import RegisterUser
from .login_user import LoginUser
from .verify_email import VerifyEmail
from .change_password import ChangePassword
from .get_user_profile import GetUserProfile
from .delete_user import DeleteUser
from .list_users import ListUsers
from .dtos import (
    UserProfileDTO,
    RegisterUserCommandDTO,
    LoginUserCommandDTO,
    ChangePasswordCommandDTO,
    AuthResponseDTO,
    ListUsersResponseDTO,
)

__all__ = [
    "RegisterUser",
    "LoginUser",
    "VerifyEmail",
    "ChangePassword",
    "GetUserProfile",
    "DeleteUser",
    "ListUsers",
    "UserProfileDTO",
    "RegisterUserCommandDTO",
    "LoginUserCommandDTO",
    "ChangePasswordCommandDTO",
    "AuthResponseDTO",
    "ListUsersResponseDTO",
]
