"""Service API Routes

Paid generation endpoints and usage history.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.service_request import EditImageRequestSchema, GenerateVideoRequestSchema
from src.app.services.generation_service import GenerationService
from src.app.services.token_service import TokenClaims
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.app.use_cases.service import (
    ConsumeService,
    EditImage,
    EditImageCommandDTO,
    EditImageResponseDTO,
    GenerateVideo,
    GenerateVideoCommandDTO,
    GenerateVideoResponseDTO,
    ListServiceUsages,
    ListServiceUsagesResponseDTO,
    RefundServiceUsage,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyServiceUsageRepository,
    SqlAlchemyUserAccountRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_current_user, get_generation_service, get_session

router = APIRouter(prefix="/services", tags=["Services"])


def _charging_use_cases(session: AsyncSession):
    uow = SqlAlchemyUnitOfWork(session)
    usage_repo = SqlAlchemyServiceUsageRepository(session)
    ledger = ApplyCreditDelta(
        uow,
        SqlAlchemyUserAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    return (
        ConsumeService(uow, usage_repo, ledger),
        RefundServiceUsage(uow, usage_repo, ledger),
    )


@router.post(
    "/edit-image",
    response_model=EditImageResponseDTO,
    responses={
        402: {
            "description": "Insufficient credits",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_BALANCE",
                            "message": "Insufficient balance",
                            "details": {"required_credits": "5", "current_balance": "2"}
                        }
                    }
                }
            }
        }
    }
)
async def edit_image(
    request: EditImageRequestSchema,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    generation_service: GenerationService = Depends(get_generation_service),
):
    """
    Edit an image for ai-image-edit credits.

    Credits are charged before the generation call and refunded when the
    generation fails.

    **Returns:**
    - 200: Generated image (data URL) and optional model text
    - 402: Insufficient credits
    - 422: Request blocked by the model
    - 429: Generation quota exceeded
    - 502: Generation failed
    """
    consume, refund = _charging_use_cases(session)
    use_case = EditImage(consume, refund, generation_service)
    result = await use_case.execute(
        EditImageCommandDTO(
            user_id=current_user.user_id,
            image_base64=request.image_base64,
            mime_type=request.mime_type,
            prompt=request.prompt,
            mask_base64=request.mask_base64,
            secondary_image=request.secondary_image,
            is_two_step=request.is_two_step,
            step_two_prompt=request.step_two_prompt,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/generate-video", response_model=GenerateVideoResponseDTO)
async def generate_video(
    request: GenerateVideoRequestSchema,
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    generation_service: GenerationService = Depends(get_generation_service),
):
    consume, refund = _charging_use_cases(session)
    use_case = GenerateVideo(consume, refund, generation_service)
    result = await use_case.execute(
        GenerateVideoCommandDTO(
            user_id=current_user.user_id,
            prompt=request.prompt,
            image=request.image,
            aspect_ratio=request.aspect_ratio,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/usages", response_model=ListServiceUsagesResponseDTO)
async def list_usages(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    service_key: Optional[str] = Query(None),
    current_user: TokenClaims = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListServiceUsages(SqlAlchemyServiceUsageRepository(session))
    result = await use_case.execute(
        current_user.user_id, limit=limit, offset=offset, service_key=service_key
    )
    return result.value
