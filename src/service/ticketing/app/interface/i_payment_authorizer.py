from abc import ABC, abstractmethod
from decimal import Decimal


class IPaymentAuthorizer(ABC):
    """Opaque pass/fail payment boundary; the core never sees card data"""

    @abstractmethod
    async def authorize(self, *, amount: Decimal, payer_id: str) -> bool:
        """
        Args:
            amount: Total to charge
            payer_id: Paying user

        Returns:
            True when the charge was authorized
        """
        pass
