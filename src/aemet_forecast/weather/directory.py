"""Municipality lookup backed by the bundled AEMET municipality table."""

import json
import logging
import os
import threading
from typing import List, Optional, Tuple

from pydantic import ValidationError

from aemet_forecast.config import AEMET_MUNICIPALITIES_PATH_ENV
from aemet_forecast.weather.exceptions import DataUnavailableError, NotFoundError
from aemet_forecast.weather.models import MUNICIPALITY_ID_PREFIX, MunicipalityRecord

logger = logging.getLogger(__name__)

DEFAULT_DATASET_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "data", "municipalities.json"
)


class MunicipalityDirectory:
    """Read-only directory of municipalities.

    The dataset is loaded lazily on first lookup, exactly once, under a lock.
    Records are immutable afterwards and can be shared between threads.
    """

    def __init__(self, dataset_path: Optional[str] = None):
        """Initialize the directory.

        Args:
            dataset_path: Path to a JSON array of municipality records. Falls back to
                AEMET_MUNICIPALITIES_PATH, then to the bundled table.
        """
        self.dataset_path = dataset_path or os.getenv(AEMET_MUNICIPALITIES_PATH_ENV) or DEFAULT_DATASET_PATH
        self._records: Optional[Tuple[MunicipalityRecord, ...]] = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        """Whether the dataset has been parsed."""
        return self._records is not None

    def load(self) -> None:
        """Parse the dataset into records. Subsequent calls are no-ops.

        Raises:
            DataUnavailableError: If the file is missing or malformed
        """
        if self._records is not None:
            return

        with self._lock:
            if self._records is not None:
                return

            logger.debug(f"Loading municipalities from {self.dataset_path}")
            try:
                with open(self.dataset_path, encoding="utf-8") as f:
                    raw = json.load(f)
            except OSError as e:
                raise DataUnavailableError(f"error reading municipalities data: {e}") from e
            except ValueError as e:
                raise DataUnavailableError(f"error parsing municipalities data: {e}") from e

            if not isinstance(raw, list):
                raise DataUnavailableError(
                    f"error parsing municipalities data: expected a JSON array, got {type(raw).__name__}"
                )

            try:
                records = tuple(MunicipalityRecord.model_validate(item) for item in raw)
            except ValidationError as e:
                raise DataUnavailableError(f"error parsing municipalities data: {e}") from e

            # Publish only the fully built tuple
            self._records = records
            logger.info(f"Loaded {len(records)} municipalities")

    def _ensure_loaded(self) -> Tuple[MunicipalityRecord, ...]:
        self.load()
        return self._records

    def all(self) -> List[MunicipalityRecord]:
        """Return every municipality in dataset order."""
        return list(self._ensure_loaded())

    def __len__(self) -> int:
        return len(self._ensure_loaded())

    def find_id_by_exact_name(self, name: str) -> str:
        """Find the identifier of the municipality with exactly this name.

        Matching ignores case and surrounding whitespace. When several records
        share a name, the first one in the dataset wins.

        Args:
            name: Municipality display name

        Returns:
            Bare municipality identifier, e.g. '28079'

        Raises:
            NotFoundError: If no record matches
            DataUnavailableError: If the dataset cannot be loaded
        """
        normalized_name = name.strip().lower()

        for record in self._ensure_loaded():
            if record.name.lower() == normalized_name:
                return record.id

        raise NotFoundError(f"municipality not found: {name}", target=name)

    def find_by_partial_name(self, partial_name: str) -> List[MunicipalityRecord]:
        """Find every municipality whose name contains the given text.

        Args:
            partial_name: Case-insensitive substring; empty matches everything

        Returns:
            Matching records in dataset order, possibly empty
        """
        needle = partial_name.lower()
        return [record for record in self._ensure_loaded() if needle in record.name.lower()]

    def find_by_id(self, municipality_id: str) -> MunicipalityRecord:
        """Find a municipality by identifier.

        Args:
            municipality_id: Bare code such as '08019' (a prefixed 'id08019' is accepted too)

        Returns:
            The matching record

        Raises:
            NotFoundError: If no record has this identifier
        """
        search_id = municipality_id
        if not search_id.startswith(MUNICIPALITY_ID_PREFIX):
            search_id = MUNICIPALITY_ID_PREFIX + search_id

        for record in self._ensure_loaded():
            if record.source_id == search_id:
                return record

        raise NotFoundError(f"municipality ID not found: {municipality_id}", target=municipality_id)


_default_directory: Optional[MunicipalityDirectory] = None
_default_lock = threading.Lock()


def default_directory() -> MunicipalityDirectory:
    """Return the process-wide directory over the configured or bundled dataset."""
    global _default_directory
    if _default_directory is None:
        with _default_lock:
            if _default_directory is None:
                _default_directory = MunicipalityDirectory()
    return _default_directory
