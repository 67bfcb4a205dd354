"""
Credential Issuer

Pure derivation of the scannable credential for a ticket.

Token layout::

    <scheme>.<base64url(orjson([event_id, owner_id, purchased_at_ms, sequence_index]))>

with the base64 padding stripped. The same ticket always yields the same
token, so a lost credential can be regenerated without storing anything
extra. Tokens are not signed.
"""

import base64
import binascii
from typing import Optional
from urllib.parse import urlencode

import orjson

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.ticketing_errors import MalformedCredentialError
from src.service.ticketing.domain.value_object.credential_payload import CredentialPayload


class CredentialIssuer:
    def __init__(
        self,
        *,
        scheme_version: Optional[str] = None,
        render_base_url: Optional[str] = None,
        render_size: Optional[str] = None,
    ) -> None:
        self.scheme_version = (
            settings.CREDENTIAL_SCHEME_VERSION if scheme_version is None else scheme_version
        )
        self.render_base_url = (
            settings.QR_RENDER_BASE_URL if render_base_url is None else render_base_url
        )
        self.render_size = settings.QR_RENDER_SIZE if render_size is None else render_size

    @staticmethod
    def payload_of(ticket: Ticket) -> CredentialPayload:
        return CredentialPayload(
            event_id=ticket.event_id,
            owner_id=ticket.owner_id,
            purchased_at_ms=CredentialPayload.to_epoch_ms(ticket.purchased_at),
            sequence_index=ticket.sequence_index,
        )

    def issue(self, ticket: Ticket) -> str:
        payload = self.payload_of(ticket)
        raw = orjson.dumps(
            [payload.event_id, payload.owner_id, payload.purchased_at_ms, payload.sequence_index]
        )
        body = base64.urlsafe_b64encode(raw).rstrip(b'=').decode('ascii')
        return f'{self.scheme_version}.{body}'

    def parse(self, code: str) -> CredentialPayload:
        """
        Decode a credential back into its payload.

        Raises:
            MalformedCredentialError: Wrong scheme, bad base64, bad JSON or wrong field types
        """
        if not isinstance(code, str) or not code.strip():
            raise MalformedCredentialError('empty credential')

        scheme, sep, body = code.strip().partition('.')
        if not sep or scheme != self.scheme_version:
            raise MalformedCredentialError(f'unsupported scheme {scheme!r}')
        if not body:
            raise MalformedCredentialError('missing payload')

        try:
            raw = base64.b64decode(
                body + '=' * (-len(body) % 4), altchars=b'-_', validate=True
            )
            fields = orjson.loads(raw)
        except (binascii.Error, ValueError, orjson.JSONDecodeError) as e:
            raise MalformedCredentialError('payload is not valid base64url JSON') from e

        if not isinstance(fields, list) or len(fields) != 4:
            raise MalformedCredentialError('payload must hold exactly four fields')

        event_id, owner_id, purchased_at_ms, sequence_index = fields
        if not isinstance(event_id, str) or not event_id:
            raise MalformedCredentialError('event id must be a non-empty string')
        if not isinstance(owner_id, str) or not owner_id:
            raise MalformedCredentialError('owner id must be a non-empty string')
        # bool is an int subclass
        for name, value in (('timestamp', purchased_at_ms), ('sequence', sequence_index)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise MalformedCredentialError(f'{name} must be a non-negative integer')

        return CredentialPayload(
            event_id=event_id,
            owner_id=owner_id,
            purchased_at_ms=purchased_at_ms,
            sequence_index=sequence_index,
        )

    @Logger.io
    def render_as_scannable(self, credential: str) -> str:
        """URI an external QR renderer turns into pixels; no image work happens here"""
        query = urlencode({'size': self.render_size, 'data': credential})
        return f'{self.render_base_url}?{query}'
