"""
Score stores.

Keep one score per (user, quiz) pair. Recording an attempt reads the
existing record, applies the repeat-attempt policy and writes under a
single lock, so two concurrent first attempts cannot both be recorded
as first.
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from quizgrader.config import RepeatAttemptPolicy
from quizgrader.scoring.policies import AttemptOutcome, ScoreRecord, resolve_attempt

LOG = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(list[ScoreRecord])


class ScoreStoreError(Exception):
    """Raised when the score store cannot be read or written."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class ScoreStore(ABC):
    """
    Base class for score stores.

    Subclasses only decide how records are persisted; lookups and the
    attempt bookkeeping live here.
    """

    def __init__(self) -> None:
        self._records: dict[tuple[str, str], ScoreRecord] = {}
        self._lock = threading.Lock()

    @abstractmethod
    def _persist(self, records: dict[tuple[str, str], ScoreRecord]) -> None:
        """Write the given records out. Called with the lock held."""
        ...

    def _commit(self, record: ScoreRecord) -> None:
        """Persist the records with ``record`` applied, then keep them in memory."""
        records = {**self._records, (record.user_id, record.quiz_id): record}
        self._persist(records)
        self._records = records

    def get(self, user_id: str, quiz_id: str) -> ScoreRecord | None:
        """Return the stored record for a user and quiz, if any."""
        with self._lock:
            return self._records.get((user_id, quiz_id))

    def put(self, record: ScoreRecord) -> None:
        """Store a record unconditionally, replacing any previous one."""
        with self._lock:
            self._commit(record)

    def all_scores(self) -> list[ScoreRecord]:
        """Return every stored record."""
        with self._lock:
            return list(self._records.values())

    def scores_for_user(self, user_id: str) -> list[ScoreRecord]:
        """Return the records of one user."""
        return [r for r in self.all_scores() if r.user_id == user_id]

    def scores_for_quiz(self, quiz_id: str) -> list[ScoreRecord]:
        """Return the records of one quiz."""
        return [r for r in self.all_scores() if r.quiz_id == quiz_id]

    def record_attempt(
        self,
        user_id: str,
        quiz_id: str,
        score: int,
        policy: RepeatAttemptPolicy,
    ) -> AttemptOutcome:
        """
        Record a graded attempt according to a repeat-attempt policy.

        Args:
            user_id: Submitter id.
            quiz_id: Quiz id.
            score: Points scored on this attempt.
            policy: Policy deciding whether a repeat attempt replaces the record.

        Returns:
            AttemptOutcome describing what was done.

        Raises:
            RepeatAttemptRejected: If the policy refuses the repeat attempt.
        """
        candidate = ScoreRecord(user_id=user_id, quiz_id=quiz_id, score=score)

        with self._lock:
            existing = self._records.get((user_id, quiz_id))
            outcome = resolve_attempt(policy, existing, candidate)
            if outcome.recorded:
                self._commit(candidate)

        return outcome


class InMemoryScoreStore(ScoreStore):
    """Score store that lives only as long as the process."""

    def _persist(self, records: dict[tuple[str, str], ScoreRecord]) -> None:
        pass


class JsonFileScoreStore(ScoreStore):
    """
    Score store backed by a JSON file.

    The whole file is loaded on creation and rewritten on every change.
    """

    def __init__(self, path: Path | str):
        super().__init__()
        self._path = Path(path)
        for record in self._load():
            self._records[(record.user_id, record.quiz_id)] = record

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    def _load(self) -> list[ScoreRecord]:
        """Read records from disk; a missing file means no records."""
        if not self._path.exists():
            return []

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return _RECORDS_ADAPTER.validate_python(data.get("scores", []))
        except (OSError, json.JSONDecodeError, AttributeError, ValidationError) as e:
            raise ScoreStoreError(f"Cannot read score store '{self._path}': {e}", cause=e) from e

    def _persist(self, records: dict[tuple[str, str], ScoreRecord]) -> None:
        """Write to a sibling temp file, then swap it in place of the store file."""
        payload = {
            "scores": _RECORDS_ADAPTER.dump_python(list(records.values()), mode="json"),
        }
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise ScoreStoreError(f"Cannot write score store '{self._path}': {e}", cause=e) from e
        LOG.debug("Wrote %d score records to %s", len(records), self._path)
