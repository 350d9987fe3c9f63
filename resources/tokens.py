import logging
from typing import Callable, Optional

from config import ID_LENGTH, TOKEN_TTL_MS
from exceptions import ValidationError, NotFoundError, InternalError
from resources.base import ResourceHandler, HandlerRequest, HandlerResponse, current_millis
from security import verify_password, create_random_string
from store import RecordStore, StoreError, RecordNotFoundError
from validators import phone_field, string_field, id_field, consent_field

logger = logging.getLogger(__name__)


def is_live(token: dict, now: int) -> bool:
    expires = token.get("expires")
    # bool is an int subclass; a stored true/false is not a timestamp
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        return False
    return expires > now


class TokenVerifier:
    """Single authorization gate: is this token live and bound to this account?"""

    def __init__(self, store: RecordStore, clock: Callable[[], int] = current_millis):
        self.store = store
        self.clock = clock

    async def resolve(self, token_id: Optional[str]) -> Optional[dict]:
        """Returns the stored token when it exists and is unexpired, otherwise None."""
        if not isinstance(token_id, str) or not token_id:
            return None

        try:
            token = await self.store.read("tokens", token_id)
        except RecordNotFoundError:
            return None
        except StoreError as e:
            logger.warning(f"Token lookup failed: {e}")
            return None

        if not is_live(token, self.clock()):
            return None
        return token

    async def verify(self, token_id: Optional[str], owner_key: str) -> bool:
        token = await self.resolve(token_id)
        if token is None:
            return False
        return token.get("phone") == owner_key


class TokenResource(ResourceHandler):
    """Session tokens: login (post), read, renew (put) and revoke (delete)."""

    kind = "tokens"

    def __init__(self, store: RecordStore, clock: Callable[[], int] = current_millis,
                 ttl_ms: int = TOKEN_TTL_MS):
        super().__init__(store, clock)
        self.ttl_ms = ttl_ms

    # Required data: phone, password
    async def post(self, request: HandlerRequest) -> HandlerResponse:
        phone = phone_field(request.payload.get("phone"))
        password = string_field(request.payload.get("password"))
        if not (phone and password):
            raise ValidationError("Missing required field(s).")

        try:
            user = await self.store.read("users", phone.value)
        except RecordNotFoundError:
            raise ValidationError("Could not find the specified user.")

        # Same status as the unknown user case
        if not verify_password(user.get("hashedPassword", ""), password.value):
            raise ValidationError("Password did not match specified user's stored password.")

        token_id = create_random_string(ID_LENGTH)
        token = {
            "phone": phone.value,
            "id": token_id,
            "expires": self.clock() + self.ttl_ms,
        }
        try:
            await self.store.create("tokens", token_id, token)
        except StoreError as e:
            logger.error(f"Could not persist token for {phone.value}: {e}")
            raise InternalError("Could not create the new token.")

        logger.info(f"Issued token for {phone.value}")
        return HandlerResponse(status_code=200, body=token)

    # Required data: id (query)
    async def get(self, request: HandlerRequest) -> HandlerResponse:
        token_id = id_field(request.query.get("id"))
        if not token_id:
            raise ValidationError("Missing required field.")

        try:
            token = await self.store.read("tokens", token_id.value)
        except RecordNotFoundError:
            raise NotFoundError("Token not found.")
        return HandlerResponse(status_code=200, body=token)

    # Required data: id, extend
    async def put(self, request: HandlerRequest) -> HandlerResponse:
        token_id = id_field(request.payload.get("id"))
        extend = consent_field(request.payload.get("extend"))
        if not (token_id and extend):
            raise ValidationError("Missing required field(s) or fields are invalid.")

        try:
            token = await self.store.read("tokens", token_id.value)
        except RecordNotFoundError:
            raise NotFoundError("Specified token does not exist.", status_code=400)

        now = self.clock()
        if not is_live(token, now):
            raise ValidationError("The token is already expired, and cannot be extended.")

        token["expires"] = now + self.ttl_ms
        try:
            await self.store.update("tokens", token_id.value, token)
        except StoreError as e:
            logger.error(f"Could not extend token {token_id.value}: {e}")
            raise InternalError("Could not update the token's expiration.")
        return HandlerResponse(status_code=200)

    # Required data: id (query)
    async def delete(self, request: HandlerRequest) -> HandlerResponse:
        token_id = id_field(request.query.get("id"))
        if not token_id:
            raise ValidationError("Missing required field.")

        try:
            await self.store.read("tokens", token_id.value)
        except RecordNotFoundError:
            raise NotFoundError("The specified token does not exist.", status_code=400)

        try:
            await self.store.delete("tokens", token_id.value)
        except StoreError as e:
            logger.error(f"Could not revoke token {token_id.value}: {e}")
            raise InternalError("Could not delete the specified token.")
        return HandlerResponse(status_code=200)
