from ticketing.gateways.interfaces import InvoiceRequest, PaymentGateway
from ticketing.gateways.xendit import XenditGateway

__all__ = ["InvoiceRequest", "PaymentGateway", "XenditGateway"]
