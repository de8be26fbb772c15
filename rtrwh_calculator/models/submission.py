from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import List
import uuid

from rtrwh_calculator.models.user_input import UserInput, CalculationType
from rtrwh_calculator.models.results import CalculationResults


class UserSubmission(BaseModel):
    """
    A stored calculation: the inputs, the mode and the derived results.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_inputs: UserInput
    calculation_type: CalculationType
    results: CalculationResults
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True


class SubmissionListResponse(BaseModel):
    """
    Standard response format for lists of submissions.
    """
    count: int
    data: List[UserSubmission]
