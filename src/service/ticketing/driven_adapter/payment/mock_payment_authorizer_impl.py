from decimal import Decimal
from typing import Iterable

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_authorizer import IPaymentAuthorizer


class MockPaymentAuthorizerImpl(IPaymentAuthorizer):
    """Approves every charge except for payers listed in ``declined_payers``"""

    def __init__(self, declined_payers: Iterable[str] = ()) -> None:
        self.declined_payers = set(declined_payers)

    @Logger.io
    async def authorize(self, *, amount: Decimal, payer_id: str) -> bool:
        approved = payer_id not in self.declined_payers
        Logger.base.info(
            f'💳 [PAYMENT] {"Authorized" if approved else "Declined"} {amount} for {payer_id}'
        )
        return approved
