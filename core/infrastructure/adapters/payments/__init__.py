"""Payment gateway adapters."""

from .manual_payment_gateway import ManualPaymentGateway

__all__ = ["ManualPaymentGateway"]
