import logging
from typing import Callable, Optional

from exceptions import (
    ValidationError,
    AuthenticationFailure,
    NotFoundError,
    ConflictError,
    PartialFailureError,
    InternalError,
)
from resources.base import ResourceHandler, HandlerRequest, HandlerResponse, current_millis
from resources.tokens import TokenVerifier
from security import hash_password
from store import RecordStore, StoreError, RecordNotFoundError, RecordExistsError
from validators import phone_field, string_field, consent_field

logger = logging.getLogger(__name__)


def owned_checks(user: dict) -> list:
    checks = user.get("checks")
    return list(checks) if isinstance(checks, list) else []


def public_view(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "hashedPassword"}


class AccountResource(ResourceHandler):
    """Accounts keyed by phone number. Deleting one cascades to its checks."""

    kind = "users"

    def __init__(self, store: RecordStore, clock: Callable[[], int] = current_millis,
                 verifier: Optional[TokenVerifier] = None):
        super().__init__(store, clock)
        self.verifier = verifier or TokenVerifier(store, clock)

    async def _authorize(self, request: HandlerRequest, phone: str) -> None:
        if not await self.verifier.verify(request.token, phone):
            logger.info(f"Rejected token for account {phone}")
            raise AuthenticationFailure("Missing required token in header, or token is invalid.")

    # Required data: firstName, lastName, phone, password, tosAgreement
    async def post(self, request: HandlerRequest) -> HandlerResponse:
        payload = request.payload
        first_name = string_field(payload.get("firstName"))
        last_name = string_field(payload.get("lastName"))
        phone = phone_field(payload.get("phone"))
        password = string_field(payload.get("password"))
        tos_agreement = consent_field(payload.get("tosAgreement"))

        if not (first_name and last_name and phone and password and tos_agreement):
            raise ValidationError("Missing required fields.")

        hashed = hash_password(password.value)
        if hashed is None:
            raise InternalError("Could not hash the user's password.")

        user = {
            "firstName": first_name.value,
            "lastName": last_name.value,
            "phone": phone.value,
            "hashedPassword": hashed,
            "tosAgreement": True,
        }
        try:
            await self.store.create("users", phone.value, user)
        except RecordExistsError:
            raise ConflictError("A user with that phone number already exists.")
        except StoreError as e:
            logger.error(f"Could not create user {phone.value}: {e}")
            raise InternalError("Could not create the new user.")

        logger.info(f"Created user {phone.value}")
        return HandlerResponse(status_code=200)

    # Required data: phone (query)
    async def get(self, request: HandlerRequest) -> HandlerResponse:
        phone = phone_field(request.query.get("phone"))
        if not phone:
            raise ValidationError("Missing required field.")

        await self._authorize(request, phone.value)

        try:
            user = await self.store.read("users", phone.value)
        except RecordNotFoundError:
            raise NotFoundError("User not found.")
        return HandlerResponse(status_code=200, body=public_view(user))

    # Required data: phone
    # Optional data: firstName, lastName, password (at least one must be specified)
    async def put(self, request: HandlerRequest) -> HandlerResponse:
        payload = request.payload
        phone = phone_field(payload.get("phone"))
        first_name = string_field(payload.get("firstName"))
        last_name = string_field(payload.get("lastName"))
        password = string_field(payload.get("password"))

        if not phone:
            raise ValidationError("Missing required field.")
        if not (first_name or last_name or password):
            raise ValidationError("Missing fields to update.")

        await self._authorize(request, phone.value)

        try:
            user = await self.store.read("users", phone.value)
        except RecordNotFoundError:
            raise NotFoundError("The specified user does not exist.", status_code=400)

        if first_name:
            user["firstName"] = first_name.value
        if last_name:
            user["lastName"] = last_name.value
        if password:
            hashed = hash_password(password.value)
            if hashed is None:
                raise InternalError("Could not hash the user's password.")
            user["hashedPassword"] = hashed

        try:
            await self.store.update("users", phone.value, user)
        except StoreError as e:
            logger.error(f"Could not update user {phone.value}: {e}")
            raise InternalError("Could not update the user.")
        return HandlerResponse(status_code=200)

    # Required data: phone (query)
    async def delete(self, request: HandlerRequest) -> HandlerResponse:
        phone = phone_field(request.query.get("phone"))
        if not phone:
            raise ValidationError("Missing required field.")

        await self._authorize(request, phone.value)

        try:
            user = await self.store.read("users", phone.value)
        except RecordNotFoundError:
            raise NotFoundError("The specified user does not exist.", status_code=400)

        try:
            await self.store.delete("users", phone.value)
        except StoreError as e:
            logger.error(f"Could not delete user {phone.value}: {e}")
            raise InternalError("Could not delete the specified user.")

        # The account is gone from here on; every check is attempted regardless of failures
        check_ids = owned_checks(user)
        failures = 0
        for check_id in check_ids:
            try:
                await self.store.delete("checks", check_id)
            except StoreError as e:
                failures += 1
                logger.error(f"Could not delete check {check_id} of user {phone.value}: {e}")

        if failures:
            logger.error(f"User {phone.value} deleted with {failures}/{len(check_ids)} check deletions failed")
            raise PartialFailureError(
                f"Errors encountered while attempting to delete all of the user's checks "
                f"({failures} of {len(check_ids)} failed). "
                f"All checks may not have been deleted from the system successfully."
            )

        logger.info(f"Deleted user {phone.value} and {len(check_ids)} checks")
        return HandlerResponse(status_code=200)
