import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field

from store import RecordStore


class Verb(str, Enum):
    POST = "post"
    GET = "get"
    PUT = "put"
    DELETE = "delete"

    @classmethod
    def parse(cls, method: str) -> Optional["Verb"]:
        try:
            return cls(method.strip().lower())
        except (AttributeError, ValueError):
            return None


class HandlerRequest(BaseModel):
    """Transport-independent view of an inbound API request."""
    method: str
    resource: str
    headers: Dict[str, str] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)
    payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def token(self) -> Optional[str]:
        token = self.headers.get("token")
        return token if isinstance(token, str) else None


class HandlerResponse(BaseModel):
    status_code: int = 200
    body: Any = None
    content_type: str = "application/json"


def current_millis() -> int:
    return int(time.time() * 1000)


class ResourceHandler(ABC):
    """
    One resource kind with a coroutine per Verb.
    Subclasses that leave a verb unimplemented cannot be instantiated.
    """

    kind: str

    def __init__(self, store: RecordStore, clock: Callable[[], int] = current_millis):
        self.store = store
        self.clock = clock

    @abstractmethod
    async def post(self, request: HandlerRequest) -> HandlerResponse: ...

    @abstractmethod
    async def get(self, request: HandlerRequest) -> HandlerResponse: ...

    @abstractmethod
    async def put(self, request: HandlerRequest) -> HandlerResponse: ...

    @abstractmethod
    async def delete(self, request: HandlerRequest) -> HandlerResponse: ...

    def routes(self):
        """Maps every Verb onto the bound coroutine handling it."""
        return {(self.kind, verb): getattr(self, verb.value) for verb in Verb}
