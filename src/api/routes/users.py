"""User API Routes

Registration, login, profile, email verification and password change.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.user_request import (
    ChangePasswordRequestSchema,
    LoginRequestSchema,
    RegisterRequestSchema,
)
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_service import TokenClaims, TokenService
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.app.use_cases.user import (
    AuthResponseDTO,
    ChangePassword,
    ChangePasswordCommandDTO,
    GetUserProfile,
    LoginUser,
    LoginUserCommandDTO,
    RegisterUser,
    RegisterUserCommandDTO,
    UserProfileDTO,
    VerifyEmail,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
    SqlAlchemyUserRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import (
    get_config,
    get_current_user,
    get_password_hasher,
    get_session,
    get_token_service,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "/register",
    response_model=AuthResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    request: RegisterRequestSchema,
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
    config=Depends(get_config),
):
    """
    Register a new user.

    Creates the user, its credit account and the signup bonus in one
    transaction, then returns the profile and a bearer token.

    **Returns:**
    - 201: User registered
    - 400: Weak password, email or username already in use
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyUserAccountRepository(session)
    ledger = ApplyCreditDelta(uow, account_repo, SqlAlchemyCreditTransactionRepository(session))

    use_case = RegisterUser(
        uow,
        SqlAlchemyUserRepository(session),
        account_repo,
        ledger,
        password_hasher,
        token_service,
        require_email_verification=config.REQUIRE_EMAIL_VERIFICATION,
    )
    result = await use_case.execute(
        RegisterUserCommandDTO(
            username=request.username,
            email=request.email,
            password=request.password,
            phone=request.phone,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/login", response_model=AuthResponseDTO)
async def login(
    request: LoginRequestSchema,
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
    config=Depends(get_config),
):
    """
    Log in with username or email.

    **Returns:**
    - 200: Profile and bearer token
    - 401: Invalid username or password
    - 403: Email not verified (only when verification is required)
    """
    use_case = LoginUser(
        SqlAlchemyUserRepository(session),
        password_hasher,
        token_service,
        require_email_verification=config.REQUIRE_EMAIL_VERIFICATION,
    )
    result = await use_case.execute(
        LoginUserCommandDTO(identifier=request.username, password=request.password)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/me", response_model=UserProfileDTO)
async def me(
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await GetUserProfile(SqlAlchemyUserRepository(session)).execute(current_user.user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/verify-email/{token}")
async def verify_email(token: str, session: AsyncSession = Depends(get_session)):
    use_case = VerifyEmail(SqlAlchemyUnitOfWork(session), SqlAlchemyUserRepository(session))
    result = await use_case.execute(token)

    if result.is_err():
        raise ClientError(result.error)

    return {"message": "Email verified successfully"}


@router.post("/change-password")
async def change_password(
    request: ChangePasswordRequestSchema,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
):
    use_case = ChangePassword(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyUserRepository(session),
        password_hasher,
    )
    result = await use_case.execute(
        ChangePasswordCommandDTO(
            user_id=current_user.user_id,
            current_password=request.current_password,
            new_password=request.new_password,
        )
    )

    if result.is_err():
        # A wrong current password is a bad request here, not a failed login
        if result.error.code == "INVALID_CREDENTIALS":
            raise ClientError(result.error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ClientError(result.error)

    return {"message": "Password updated successfully"}
