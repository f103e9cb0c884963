"""Application layer interfaces."""

from .collaborators import (
    CouponValidation,
    ICouponValidator,
    INotificationService,
    IPaymentGateway,
    PaymentInitiation,
)
from .config import CourierConfig, IMarketplaceConfigProvider
from .courier import (
    GENERATED_BY_API,
    GENERATED_BY_LOCAL,
    ConsignmentResult,
    ICourierGateway,
    TrackingResult,
)

__all__ = [
    "ConsignmentResult",
    "CouponValidation",
    "CourierConfig",
    "GENERATED_BY_API",
    "GENERATED_BY_LOCAL",
    "ICouponValidator",
    "ICourierGateway",
    "IMarketplaceConfigProvider",
    "INotificationService",
    "IPaymentGateway",
    "PaymentInitiation",
    "TrackingResult",
]
