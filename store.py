import json
import time
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models import Record

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the storage backend fails to complete an operation."""


class RecordNotFoundError(StoreError):
    pass


class RecordExistsError(StoreError):
    pass


class RecordStore(ABC):
    """
    Named-record persistence contract.
    Records are plain dicts addressed by collection name + string id.
    """

    @abstractmethod
    async def create(self, collection: str, record_id: str, record: dict) -> None:
        ...

    @abstractmethod
    async def read(self, collection: str, record_id: str) -> dict:
        ...

    @abstractmethod
    async def update(self, collection: str, record_id: str, record: dict) -> None:
        ...

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> None:
        ...


class SqlRecordStore(RecordStore):
    """
    RecordStore backed by the SQLAlchemy `records` table.
    Each call opens its own session and runs in a worker thread so the
    event loop is never blocked by the database driver.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    async def create(self, collection: str, record_id: str, record: dict) -> None:
        await asyncio.to_thread(self._create_sync, collection, record_id, record)

    async def read(self, collection: str, record_id: str) -> dict:
        return await asyncio.to_thread(self._read_sync, collection, record_id)

    async def update(self, collection: str, record_id: str, record: dict) -> None:
        await asyncio.to_thread(self._update_sync, collection, record_id, record)

    async def delete(self, collection: str, record_id: str) -> None:
        await asyncio.to_thread(self._delete_sync, collection, record_id)

    def _create_sync(self, collection: str, record_id: str, record: dict) -> None:
        db = self._session_factory()
        try:
            if db.get(Record, (collection, record_id)) is not None:
                raise RecordExistsError(f"{collection}/{record_id} already exists")
            db.add(Record(
                collection=collection,
                id=record_id,
                data=json.dumps(record),
                updated_at=int(time.time())
            ))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise RecordExistsError(f"{collection}/{record_id} already exists") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Could not create {collection}/{record_id}: {e}")
            raise StoreError(f"Could not create {collection}/{record_id}") from e
        finally:
            db.close()

    def _read_sync(self, collection: str, record_id: str) -> dict:
        db = self._session_factory()
        try:
            row = db.get(Record, (collection, record_id))
            if row is None:
                raise RecordNotFoundError(f"{collection}/{record_id} not found")
            return json.loads(row.data)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted record {collection}/{record_id}: {e}")
            raise StoreError(f"Could not decode {collection}/{record_id}") from e
        except SQLAlchemyError as e:
            logger.error(f"Could not read {collection}/{record_id}: {e}")
            raise StoreError(f"Could not read {collection}/{record_id}") from e
        finally:
            db.close()

    def _update_sync(self, collection: str, record_id: str, record: dict) -> None:
        db = self._session_factory()
        try:
            row = db.get(Record, (collection, record_id))
            if row is None:
                raise RecordNotFoundError(f"{collection}/{record_id} not found")
            row.data = json.dumps(record)
            row.updated_at = int(time.time())
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Could not update {collection}/{record_id}: {e}")
            raise StoreError(f"Could not update {collection}/{record_id}") from e
        finally:
            db.close()

    def _delete_sync(self, collection: str, record_id: str) -> None:
        db = self._session_factory()
        try:
            row = db.get(Record, (collection, record_id))
            if row is None:
                raise RecordNotFoundError(f"{collection}/{record_id} not found")
            db.delete(row)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Could not delete {collection}/{record_id}: {e}")
            raise StoreError(f"Could not delete {collection}/{record_id}") from e
        finally:
            db.close()
