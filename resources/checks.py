import logging
from typing import Callable, Optional

from config import ID_LENGTH, MAX_CHECKS, DEFAULT_CHECK_TIMEOUT_SECONDS
from exceptions import (
    ValidationError,
    AuthenticationFailure,
    ForbiddenError,
    NotFoundError,
    QuotaExceededError,
    PartialFailureError,
    InternalError,
)
from resources.accounts import owned_checks
from resources.base import ResourceHandler, HandlerRequest, HandlerResponse, current_millis
from resources.tokens import TokenVerifier
from security import create_random_string
from store import RecordStore, StoreError, RecordNotFoundError
from validators import (
    id_field,
    string_field,
    protocol_field,
    http_method_field,
    success_codes_field,
    timeout_field,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "Missing required token in header, or token is invalid."


def check_fields(payload: dict) -> dict:
    return {
        "protocol": protocol_field(payload.get("protocol")),
        "url": string_field(payload.get("url")),
        "method": http_method_field(payload.get("method")),
        "successCodes": success_codes_field(payload.get("successCodes")),
        "timeoutSeconds": timeout_field(payload.get("timeoutSeconds")),
    }


class CheckResource(ResourceHandler):
    """Monitoring checks, each owned by exactly one account and listed on it."""

    kind = "checks"

    def __init__(self, store: RecordStore, clock: Callable[[], int] = current_millis,
                 verifier: Optional[TokenVerifier] = None, max_checks: int = MAX_CHECKS):
        super().__init__(store, clock)
        self.verifier = verifier or TokenVerifier(store, clock)
        self.max_checks = max_checks

    async def _load_check(self, check_id: str, status_code: int) -> dict:
        try:
            return await self.store.read("checks", check_id)
        except RecordNotFoundError:
            raise NotFoundError("The specified check id does not exist.", status_code=status_code)

    async def _authorize(self, request: HandlerRequest, check: dict) -> None:
        if not await self.verifier.verify(request.token, check.get("userPhone")):
            logger.info(f"Rejected token for check {check.get('id')}")
            raise AuthenticationFailure(UNAUTHORIZED_MESSAGE)

    # Required data: protocol, url, method, successCodes
    # Optional data: timeoutSeconds
    async def post(self, request: HandlerRequest) -> HandlerResponse:
        fields = check_fields(request.payload)
        if not all(fields[name] for name in ("protocol", "url", "method", "successCodes")):
            raise ValidationError("Missing required inputs, or inputs are invalid.")

        if "timeoutSeconds" in request.payload:
            if not fields["timeoutSeconds"]:
                raise ValidationError("Missing required inputs, or inputs are invalid.")
            timeout_seconds = fields["timeoutSeconds"].value
        else:
            timeout_seconds = DEFAULT_CHECK_TIMEOUT_SECONDS

        # The owning account comes from the bearer token itself
        token = await self.verifier.resolve(request.token)
        if token is None:
            raise AuthenticationFailure(UNAUTHORIZED_MESSAGE)
        phone = token.get("phone")

        try:
            user = await self.store.read("users", phone)
        except StoreError as e:
            logger.info(f"Token owner {phone} could not be read: {e}")
            raise ForbiddenError("The account bound to this token could not be found.")

        user_checks = owned_checks(user)
        if len(user_checks) >= self.max_checks:
            raise QuotaExceededError(
                f"The user already has the maximum number of checks ({self.max_checks})."
            )

        check_id = create_random_string(ID_LENGTH)
        check = {
            "id": check_id,
            "userPhone": phone,
            "protocol": fields["protocol"].value,
            "url": fields["url"].value,
            "method": fields["method"].value,
            "successCodes": fields["successCodes"].value,
            "timeoutSeconds": timeout_seconds,
        }
        try:
            await self.store.create("checks", check_id, check)
        except StoreError as e:
            logger.error(f"Could not create check for {phone}: {e}")
            raise InternalError("Could not create the new check.")

        user["checks"] = user_checks + [check_id]
        try:
            await self.store.update("users", phone, user)
        except StoreError as e:
            # No rollback: the check stays persisted but is missing from the account list
            logger.error(f"Check {check_id} created but user {phone} was not updated: {e}")
            raise PartialFailureError("Could not update the user with the new check.")

        logger.info(f"Created check {check_id} for {phone}")
        return HandlerResponse(status_code=200, body=check)

    # Required data: id (query)
    async def get(self, request: HandlerRequest) -> HandlerResponse:
        check_id = id_field(request.query.get("id"))
        if not check_id:
            raise ValidationError("Missing required field.")

        check = await self._load_check(check_id.value, status_code=404)
        await self._authorize(request, check)
        return HandlerResponse(status_code=200, body=check)

    # Required data: id
    # Optional data: protocol, url, method, successCodes, timeoutSeconds (one must be sent)
    async def put(self, request: HandlerRequest) -> HandlerResponse:
        check_id = id_field(request.payload.get("id"))
        if not check_id:
            raise ValidationError("Missing required field.")

        supplied = {name: result.value for name, result in check_fields(request.payload).items() if result}
        if not supplied:
            raise ValidationError("Missing fields to update.")

        check = await self._load_check(check_id.value, status_code=400)
        await self._authorize(request, check)

        check.update(supplied)
        try:
            await self.store.update("checks", check_id.value, check)
        except StoreError as e:
            logger.error(f"Could not update check {check_id.value}: {e}")
            raise InternalError("Could not update the check.")
        return HandlerResponse(status_code=200)

    # Required data: id (query)
    async def delete(self, request: HandlerRequest) -> HandlerResponse:
        check_id = id_field(request.query.get("id"))
        if not check_id:
            raise ValidationError("Missing required field.")

        check = await self._load_check(check_id.value, status_code=400)
        await self._authorize(request, check)

        try:
            await self.store.delete("checks", check_id.value)
        except StoreError as e:
            logger.error(f"Could not delete check {check_id.value}: {e}")
            raise InternalError("Could not delete the check data.")

        phone = check.get("userPhone")
        try:
            user = await self.store.read("users", phone)
        except StoreError as e:
            logger.error(f"Check {check_id.value} deleted but owner {phone} could not be read: {e}")
            raise PartialFailureError(
                "Could not find user who created the check, so it could not delete "
                "the check from the list of checks in the user object."
            )

        user_checks = owned_checks(user)
        if check_id.value not in user_checks:
            logger.error(f"Check {check_id.value} deleted but missing from user {phone} list")
            raise PartialFailureError("Could not find the check on the user's object, so could not remove it.")

        user_checks.remove(check_id.value)
        user["checks"] = user_checks
        try:
            await self.store.update("users", phone, user)
        except StoreError as e:
            logger.error(f"Check {check_id.value} deleted but user {phone} was not updated: {e}")
            raise PartialFailureError("Could not update the user.")

        logger.info(f"Deleted check {check_id.value} of {phone}")
        return HandlerResponse(status_code=200)
