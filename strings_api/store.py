import logging

from .exceptions import Conflict, NotFound
from .models import StringRecord
from .utils import analyze_string, compute_sha256

logger = logging.getLogger(__name__)


class ContentStore:
    """
    In-memory collection of StringRecords keyed by content hash.

    One instance is owned by the app config for the lifetime of the process;
    request handlers reach it through ``apps.get_app_config('strings_api').store``.
    Records never leave the store by reference to its internal dict, and the
    records themselves are frozen.
    """

    def __init__(self):
        self._records = {}

    def __len__(self):
        return len(self._records)

    def __contains__(self, identity):
        return identity in self._records

    def insert(self, record: StringRecord) -> StringRecord:
        if record.id in self._records:
            logger.warning("Rejected duplicate insert for id=%s", record.id)
            raise Conflict()
        self._records[record.id] = record
        logger.info("Stored string id=%s length=%s", record.id, record.properties.length)
        return record

    def create(self, value: str) -> StringRecord:
        """Analyze ``value`` and insert it as a new record."""
        # checked here so duplicates are rejected before analysis runs
        if compute_sha256(value) in self._records:
            logger.warning("Rejected duplicate value (len=%s)", len(value))
            raise Conflict()
        return self.insert(StringRecord(value=value, properties=analyze_string(value)))

    def get(self, identity: str) -> StringRecord:
        try:
            return self._records[identity]
        except KeyError:
            raise NotFound()

    def get_by_value(self, value: str) -> StringRecord:
        return self.get(compute_sha256(value))

    def delete(self, identity: str) -> None:
        try:
            del self._records[identity]
        except KeyError:
            raise NotFound()
        logger.info("Deleted string id=%s", identity)

    def delete_by_value(self, value: str) -> None:
        self.delete(compute_sha256(value))

    def list(self):
        """Snapshot of all records in insertion order."""
        return tuple(self._records.values())

    def clear(self):
        self._records.clear()
