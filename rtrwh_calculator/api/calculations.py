import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from rtrwh_calculator.models.submission import SubmissionListResponse, UserSubmission
from rtrwh_calculator.models.user_input import CalculationType, UserInput
from rtrwh_calculator.services.calculation_engine import CalculationEngine, get_calculation_engine
from rtrwh_calculator.services.errors import CityNotFoundError
from rtrwh_calculator.services.submission_store import SubmissionStore, get_submission_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/calculations", tags=["Calculations"])


@router.post("/{calculation_type}", status_code=201, response_model=UserSubmission)
def create_calculation(
    calculation_type: CalculationType,
    user_input: UserInput,
    engine: CalculationEngine = Depends(get_calculation_engine),
    store: SubmissionStore = Depends(get_submission_store)
):
    """
    Runs a rainwater or recharge calculation and stores it as a submission.
    """
    try:
        results = engine.calculate(user_input, calculation_type)
    except CityNotFoundError as e:
        logger.error(f"❌ Calculation failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return store.save_submission(user_input, calculation_type, results)


@router.get("/", response_model=SubmissionListResponse)
def list_calculations(
    limit: int = Query(10, ge=1, le=100),
    store: SubmissionStore = Depends(get_submission_store)
):
    """
    Most recent submissions, newest first.
    """
    submissions = store.get_recent_submissions(limit)
    return {"count": len(submissions), "data": submissions}


@router.get("/{submission_id}", response_model=UserSubmission)
def get_calculation(
    submission_id: str,
    store: SubmissionStore = Depends(get_submission_store)
):
    submission = store.get_submission(submission_id)
    if submission is None:
        raise HTTPException(status_code=404, detail=f"Submission {submission_id} not found")
    return submission
