"""
CreateCheckoutSessionHandler.
"""

from payments.application.commands.create_checkout_session import CreateCheckoutSessionCommand
from payments.application.dto.payment_dto import CheckoutSessionDTO
from payments.ports.payment_gateway import PaymentGateway


class CreateCheckoutSessionHandler:
    """Handler for CreateCheckoutSessionCommand."""

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    async def handle(self, command: CreateCheckoutSessionCommand) -> CheckoutSessionDTO:
        """Create a hosted checkout and return its redirect URL."""
        ref = (command.external_order_ref or "").strip() or None
        url = await self.gateway.create_checkout_session(ref)
        return CheckoutSessionDTO(url=url)
