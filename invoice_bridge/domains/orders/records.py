from typing import Dict, List, Tuple

from .exceptions import InvoiceRecordNotFoundError
from .models import InvoiceRecord

ERROR_KEY_PREFIX = "error-"


class InvoiceRecordLog:
    """In-memory log of submitted orders for debugging.

    Successful submissions are keyed by order id, failures by
    ``error-<order id>``. Contents are lost on restart.
    """

    def __init__(self) -> None:
        self._records: Dict[str, InvoiceRecord] = {}

    def record_success(self, record: InvoiceRecord) -> None:
        self._records[record.order_id] = record

    def record_failure(self, record: InvoiceRecord) -> None:
        self._records[f"{ERROR_KEY_PREFIX}{record.order_id}"] = record

    def get(self, key: str) -> InvoiceRecord:
        try:
            return self._records[key]
        except KeyError:
            raise InvoiceRecordNotFoundError()

    def split(self) -> Tuple[List[InvoiceRecord], List[InvoiceRecord]]:
        """Return (invoices, errors) in insertion order."""
        invoices = [r for r in self._records.values() if r.error is None]
        errors = [r for r in self._records.values() if r.error is not None]
        return invoices, errors

    @property
    def error_count(self) -> int:
        return sum(1 for key in self._records if key.startswith(ERROR_KEY_PREFIX))

    def __len__(self) -> int:
        return len(self._records)
