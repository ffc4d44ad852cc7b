"""
Record store for rated wines and sakes.

The recommendation engine only needs `list_wines()` and `list_sakes()`
(the RecordStore protocol). The concrete stores here also provide full CRUD
with input validation:

- InMemoryRecordStore: process-local collections
- CsvRecordStore: same, persisted to wines.csv / sakes.csv with pandas
- RetryingRecordStore: wraps any RecordStore, retrying transient failures
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, Type, TypeVar, Union

import pandas as pd
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from tastelog.config import (
    DATA_DIR,
    STORE_RETRY_ATTEMPTS,
    STORE_RETRY_MAX_WAIT,
    STORE_RETRY_MIN_WAIT,
)
from tastelog.constants import ColumnNames, FilePaths
from tastelog.error_handling import (
    DataValidationError,
    ErrorCodes,
    RecordNotFoundError,
    RecordStoreError,
    is_transient_store_error,
)
from tastelog.schema import (
    RatedRecord,
    Sake,
    SakeCreate,
    SakeUpdate,
    Wine,
    WineCreate,
    WineUpdate,
)
from tastelog.utils import blank_to_none, safe_divide

logger = logging.getLogger(__name__)

R = TypeVar('R', bound=RatedRecord)

# Fields an update may never clear
REQUIRED_FIELDS = ("name", "rating")

# Classification fields: find_by compares these exactly instead of by substring
EXACT_MATCH_FIELDS = ("type",)


class RecordStore(Protocol):
    """Read side consumed by the recommendation engine."""

    async def list_wines(self) -> List[Wine]:
        ...

    async def list_sakes(self) -> List[Sake]:
        ...


class RecordCollection(Generic[R]):
    """
    CRUD over one record type.

    Records are kept in creation order; `list()` returns newest first.
    """

    def __init__(
        self,
        record_cls: Type[R],
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel],
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.record_cls = record_cls
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.on_change = on_change
        self._records: Dict[str, R] = {}

    @property
    def label(self) -> str:
        return self.record_cls.__name__.lower()

    def _validate(self, schema: Type[BaseModel], data: Union[BaseModel, Dict[str, Any]]) -> BaseModel:
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise DataValidationError.from_pydantic(e) from e

    def _changed(self, previous: Dict[str, R]) -> None:
        """
        Notify on_change; if it fails, restore `previous` and re-raise.

        Args:
            previous: Snapshot of the records taken before the mutation
        """
        if self.on_change is None:
            return
        try:
            self.on_change()
        except RecordStoreError:
            self._records = previous
            logger.warning(f"Rolled back {self.label} change after failed save")
            raise

    def _require(self, record_id: str) -> R:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(f"{self.label} record not found with id: {record_id}")
        return record

    def all(self) -> List[R]:
        """Records in creation order."""
        return list(self._records.values())

    def load(self, records: List[R]) -> None:
        """Replace the contents without triggering on_change."""
        self._records = {record.id: record for record in records}

    async def create(self, data: Union[BaseModel, Dict[str, Any]]) -> R:
        """
        Validate and store a new record.

        Raises:
            DataValidationError: If the payload breaks a validation rule
        """
        payload = self._validate(self.create_schema, data)
        now = datetime.now()
        record = self.record_cls(
            id=uuid.uuid4().hex,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        previous = dict(self._records)
        self._records[record.id] = record
        self._changed(previous)
        logger.info(f"Created {self.label} {record.id} ({record.name})")
        return record

    async def get(self, record_id: str) -> Optional[R]:
        """Record with this id, or None."""
        return self._records.get(record_id)

    async def list(self) -> List[R]:
        """All records, newest first."""
        newest_first = list(reversed(self._records.values()))
        return sorted(newest_first, key=lambda record: record.created_at, reverse=True)

    async def update(self, record_id: str, data: Union[BaseModel, Dict[str, Any]]) -> R:
        """
        Apply a partial update. Blank optional strings clear the attribute.

        Raises:
            RecordNotFoundError: If no record has this id
            DataValidationError: If the payload breaks a validation rule
        """
        existing = self._require(record_id)
        payload = self._validate(self.update_schema, data)

        changes = payload.model_dump(exclude_unset=True)
        changes = {
            field: value for field, value in changes.items()
            if value is not None or field not in REQUIRED_FIELDS
        }
        changes["updated_at"] = datetime.now()

        updated = existing.model_copy(update=changes)
        previous = dict(self._records)
        self._records[record_id] = updated
        self._changed(previous)
        logger.info(f"Updated {self.label} {record_id}")
        return updated

    async def delete(self, record_id: str) -> None:
        """
        Raises:
            RecordNotFoundError: If no record has this id
        """
        self._require(record_id)
        previous = dict(self._records)
        del self._records[record_id]
        self._changed(previous)
        logger.info(f"Deleted {self.label} {record_id}")

    async def count(self) -> int:
        """Number of stored records."""
        return len(self._records)

    async def find_by_rating(self, min_rating: int, max_rating: int = 5) -> List[R]:
        """Records rated within [min_rating, max_rating], best first then newest."""
        matching = [
            record for record in await self.list()
            if min_rating <= record.rating <= max_rating
        ]
        return sorted(matching, key=lambda record: record.rating, reverse=True)

    async def find_by(self, field: str, text: str) -> List[R]:
        """
        Search one attribute, newest first.

        Classification fields (EXACT_MATCH_FIELDS) must equal `text`; every
        other field is a case-insensitive substring search.
        """
        if field not in self.record_cls.model_fields:
            raise ValueError(f"Unknown {self.label} field: {field}")

        records = [record for record in await self.list() if getattr(record, field) is not None]
        if field in EXACT_MATCH_FIELDS:
            return [record for record in records if getattr(record, field) == text]

        needle = text.lower()
        return [record for record in records if needle in str(getattr(record, field)).lower()]

    async def top_rated(self, limit: int = 10) -> List[R]:
        """The `limit` best rated records; ties keep newest first."""
        ranked = sorted(await self.list(), key=lambda record: record.rating, reverse=True)
        return ranked[:limit]

    async def average_rating(self) -> float:
        """Mean rating, 0 for an empty collection."""
        records = self.all()
        return safe_divide(sum(record.rating for record in records), len(records))


class SakeCollection(RecordCollection[Sake]):
    """Sake records, plus classification statistics."""

    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        super().__init__(Sake, SakeCreate, SakeUpdate, on_change=on_change)

    async def type_distribution(self) -> Dict[str, int]:
        """
        Number of sakes per classification, most common first.

        Sakes without a type are left out. Ties keep first-recorded order.
        """
        types = pd.Series([sake.type for sake in self.all()], dtype=object).dropna()
        if types.empty:
            return {}

        counts = types.groupby(types, sort=False).size().sort_values(ascending=False, kind="stable")
        return {str(sake_type): int(count) for sake_type, count in counts.items()}


class InMemoryRecordStore:
    """Wine and sake collections held in process memory."""

    def __init__(self):
        self.wines: RecordCollection[Wine] = RecordCollection(
            Wine, WineCreate, WineUpdate, on_change=self._on_change
        )
        self.sakes = SakeCollection(on_change=self._on_change)

    def _on_change(self) -> None:
        pass

    async def list_wines(self) -> List[Wine]:
        return await self.wines.list()

    async def list_sakes(self) -> List[Sake]:
        return await self.sakes.list()


class CsvRecordStore(InMemoryRecordStore):
    """
    In-memory store persisted to CSV files.

    Loads data_dir/wines.csv and data_dir/sakes.csv on construction (missing
    files mean empty collections) and rewrites both after every change.
    """

    def __init__(self, data_dir: Union[str, Path] = DATA_DIR):
        super().__init__()
        self.data_dir = Path(data_dir)
        self.wines_path = self.data_dir / FilePaths.WINES_CSV
        self.sakes_path = self.data_dir / FilePaths.SAKES_CSV

        self.wines.load(self._read(self.wines_path, Wine))
        self.sakes.load(self._read(self.sakes_path, Sake))
        logger.info(
            f"Loaded {len(self.wines.all())} wines and {len(self.sakes.all())} sakes from {self.data_dir}"
        )

    def _read(self, path: Path, record_cls: Type[R]) -> List[R]:
        if not path.exists():
            logger.warning(f"{path} not found, starting with an empty collection")
            return []

        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
            return [
                record_cls.model_validate({key: blank_to_none(value) for key, value in row.items()})
                for row in df.to_dict("records")
            ]
        except (OSError, ValueError, pd.errors.ParserError) as e:
            # pydantic ValidationError and pandas EmptyDataError are ValueErrors
            raise RecordStoreError(f"Failed to read {path}", code=ErrorCodes.READ_FAILED, details=str(e)) from e

    def _write(self, path: Path, records: List[RatedRecord], columns: List[str]) -> None:
        rows = [record.model_dump(mode="json") for record in records]
        df = pd.DataFrame(rows, columns=columns, dtype=object)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            df.to_csv(path, index=False)
        except OSError as e:
            raise RecordStoreError(f"Failed to write {path}", code=ErrorCodes.WRITE_FAILED, details=str(e)) from e

    def save(self) -> None:
        """Write both collections to disk."""
        self._write(self.wines_path, self.wines.all(), ColumnNames.wine_columns())
        self._write(self.sakes_path, self.sakes.all(), ColumnNames.sake_columns())
        logger.debug(f"Saved records to {self.data_dir}")

    def _on_change(self) -> None:
        self.save()


class RetryingRecordStore:
    """
    Retry wrapper for any RecordStore.

    Transient RecordStoreErrors (connection, busy, lock, timeout) are retried
    with exponential backoff; anything else, and the last failure, propagate.
    """

    def __init__(
        self,
        store: RecordStore,
        attempts: int = STORE_RETRY_ATTEMPTS,
        min_wait: float = STORE_RETRY_MIN_WAIT,
        max_wait: float = STORE_RETRY_MAX_WAIT,
    ):
        self.store = store
        self.attempts = attempts
        self.min_wait = min_wait
        self.max_wait = max_wait

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.min_wait, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception(is_transient_store_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def list_wines(self) -> List[Wine]:
        return await self._retrying()(self.store.list_wines)

    async def list_sakes(self) -> List[Sake]:
        return await self._retrying()(self.store.list_sakes)
