"""In-memory patient store for one analysis session."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ehr_cohort.models import PatientRecord


class PatientStore:
    """Immutable record set with lookup by patient ID.

    ``id`` uniqueness is assumed, not enforced; lookups return the first
    record with a matching ID.
    """

    def __init__(self, records: Iterable[PatientRecord] = ()) -> None:
        self._records: tuple[PatientRecord, ...] = tuple(records)
        self._by_id: dict[str, PatientRecord] = {}
        for record in self._records:
            self._by_id.setdefault(record.id, record)

    @property
    def records(self) -> tuple[PatientRecord, ...]:
        return self._records

    def get(self, patient_id: str) -> Optional[PatientRecord]:
        return self._by_id.get(patient_id)

    def ids(self) -> list[str]:
        return [r.id for r in self._records]

    def categories(self) -> list[str]:
        """Distinct diagnosis categories in first-seen order."""
        return list(dict.fromkeys(r.diagnosis_category for r in self._records))

    def options(self) -> list[tuple[str, str]]:
        """``(id, label)`` pairs for a patient picker."""
        return [(r.id, f"Patient {r.id} - {r.diagnosis_category}") for r in self._records]

    def __contains__(self, patient_id: object) -> bool:
        return patient_id in self._by_id

    def __iter__(self) -> Iterator[PatientRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
