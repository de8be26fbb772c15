import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, List, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection

from rtrwh_calculator.config.database import db
from rtrwh_calculator.config.settings import STORAGE_BACKEND
from rtrwh_calculator.models.results import CalculationResults
from rtrwh_calculator.models.submission import UserSubmission
from rtrwh_calculator.models.user_input import CalculationType, UserInput

logger = logging.getLogger(__name__)


class SubmissionStore(ABC):
    """
    Append-only storage for calculation submissions.
    Enforces a standard interface for every backend.
    """

    def save_submission(
        self,
        user_inputs: UserInput,
        calculation_type: CalculationType,
        results: CalculationResults
    ) -> UserSubmission:
        """
        Wraps the calculation in a UserSubmission (new id + timestamp)
        and persists it.
        """
        submission = UserSubmission(
            user_inputs=user_inputs,
            calculation_type=calculation_type,
            results=results
        )
        self._insert(submission)
        logger.info(f"💾 Saved {calculation_type} submission {submission.id}")
        return submission

    @abstractmethod
    def _insert(self, submission: UserSubmission) -> None:
        pass

    @abstractmethod
    def get_submission(self, submission_id: str) -> Optional[UserSubmission]:
        pass

    @abstractmethod
    def get_recent_submissions(self, limit: int = 10) -> List[UserSubmission]:
        """Newest first."""
        pass


class MemorySubmissionStore(SubmissionStore):
    """
    Keeps submissions in a dict for the life of the process.
    """

    def __init__(self):
        self._submissions: Dict[str, UserSubmission] = {}

    def _insert(self, submission: UserSubmission) -> None:
        self._submissions[submission.id] = submission

    def get_submission(self, submission_id: str) -> Optional[UserSubmission]:
        return self._submissions.get(submission_id)

    def get_recent_submissions(self, limit: int = 10) -> List[UserSubmission]:
        # Newest insert wins ties on created_at
        newest_first = reversed(list(self._submissions.values()))
        ordered = sorted(newest_first, key=lambda s: s.created_at, reverse=True)
        return ordered[:limit]


class MongoSubmissionStore(SubmissionStore):
    """
    Persists submissions in MongoDB, one document per calculation.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def _insert(self, submission: UserSubmission) -> None:
        # Store our UUID as the lookup key, not Mongo's ObjectId
        self.collection.insert_one(submission.model_dump(mode="python"))

    def get_submission(self, submission_id: str) -> Optional[UserSubmission]:
        doc = self.collection.find_one({"id": submission_id}, {"_id": 0})
        if doc is None:
            return None
        return UserSubmission.model_validate(doc)

    def get_recent_submissions(self, limit: int = 10) -> List[UserSubmission]:
        cursor = self.collection.find({}, {"_id": 0}).sort("created_at", DESCENDING).limit(limit)
        return [UserSubmission.model_validate(doc) for doc in cursor]


@lru_cache(maxsize=1)
def get_submission_store() -> SubmissionStore:
    """
    Returns the process-wide store selected by STORAGE_BACKEND.
    """
    if STORAGE_BACKEND == "mongo":
        collection = db.get_submissions_collection()
        collection.create_index([("id", 1)], unique=True)
        collection.create_index([("created_at", DESCENDING)])
        logger.info("Using MongoDB submission store")
        return MongoSubmissionStore(collection)

    if STORAGE_BACKEND != "memory":
        raise ValueError(f"Unknown STORAGE_BACKEND: {STORAGE_BACKEND}")

    logger.info("Using in-memory submission store")
    return MemorySubmissionStore()
