"""Service consumption use cases"""
from .consume_service import ConsumeService
from .refund_service_usage import RefundServiceUsage
from .list_service_usages import ListServiceUsages
from .edit_image import EditImage
from .generate_video import GenerateVideo
from .dtos import (
    ConsumeServiceCommandDTO,
    ServiceUsageResponseDTO,
    ConsumeServiceResponseDTO,
    RefundServiceUsageResponseDTO,
    ListServiceUsagesResponseDTO,
    EditImageCommandDTO,
    EditImageResponseDTO,
    GenerateVideoCommandDTO,
    GenerateVideoResponseDTO,
)

__all__ = [
    "ConsumeService",
    "RefundServiceUsage",
    "ListServiceUsages",
    "EditImage",
    "GenerateVideo",
    "ConsumeServiceCommandDTO",
    "ServiceUsageResponseDTO",
    "ConsumeServiceResponseDTO",
    "RefundServiceUsageResponseDTO",
    "ListServiceUsagesResponseDTO",
    "EditImageCommandDTO",
    "EditImageResponseDTO",
    "GenerateVideoCommandDTO",
    "GenerateVideoResponseDTO",
]
