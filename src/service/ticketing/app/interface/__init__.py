"""Ticketing Interfaces"""

from src.service.ticketing.app.interface.i_payment_authorizer import IPaymentAuthorizer
from src.service.ticketing.app.interface.i_ticket_repo import ITicketRepo
from src.service.ticketing.app.interface.i_ticket_type_repo import ITicketTypeRepo

__all__ = ['IPaymentAuthorizer', 'ITicketRepo', 'ITicketTypeRepo']
