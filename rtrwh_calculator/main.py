import json
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from rtrwh_calculator.api.calculations import router as calculations_router
from rtrwh_calculator.api.reference import router as reference_router
from rtrwh_calculator.config.database import db
from rtrwh_calculator.config.settings import API_HOST, API_PORT, CORS_ORIGINS, LOG_LEVEL, STORAGE_BACKEND
from rtrwh_calculator.models.user_input import UserInput
from rtrwh_calculator.services.calculation_engine import get_calculation_engine
from rtrwh_calculator.services.errors import CalculatorError, ReferenceDataError
from rtrwh_calculator.utils.logger import setup_logger

logger = setup_logger(level=getattr(logging, LOG_LEVEL, logging.INFO))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager: loads the reference tables on startup so a broken
    data file fails the boot, and closes Mongo on shutdown.
    """
    get_calculation_engine()
    logger.info(f"🚀 Calculator API ready (storage: {STORAGE_BACKEND})")
    yield
    if STORAGE_BACKEND == "mongo":
        db.close()
    logger.info("Shutting down Calculator API...")


app = FastAPI(
    title="RTRWH & Artificial Recharge Calculator",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register Routes
app.include_router(calculations_router)
app.include_router(reference_router)


@app.exception_handler(ReferenceDataError)
async def reference_data_error_handler(request: Request, exc: ReferenceDataError):
    logger.error(f"❌ Reference data unavailable: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health")
def health_check():
    return {"status": "active", "service": "RTRWH Calculator", "storage": STORAGE_BACKEND}


# --- CLI JOB RUNNER ---
def run_calculation_file(calculation_type: str, input_path: str) -> dict:
    """
    Validates a JSON input file and runs one calculation on it.
    Returns the serialized results.
    """
    with open(Path(input_path), mode='r', encoding='utf-8') as f:
        raw = json.load(f)

    user_input = UserInput.model_validate(raw)
    results = get_calculation_engine().calculate(user_input, calculation_type)
    return results.model_dump(mode="json")


def main():
    """
    Main Entry Point.
    Usage:
        python -m rtrwh_calculator.main serve
        python -m rtrwh_calculator.main <rainwater|recharge> <input.json>
    """
    if len(sys.argv) < 2:
        logger.error("No job specified. Usage: python -m rtrwh_calculator.main <serve|rainwater|recharge> [input.json]")
        sys.exit(1)

    job_name = sys.argv[1]

    if job_name == "serve":
        import uvicorn
        uvicorn.run(app, host=API_HOST, port=API_PORT)
        return

    if job_name not in ("rainwater", "recharge"):
        logger.warning(f"Job {job_name} not recognized.")
        sys.exit(1)

    if len(sys.argv) < 3:
        logger.error(f"Missing input file. Usage: python -m rtrwh_calculator.main {job_name} <input.json>")
        sys.exit(1)

    try:
        results = run_calculation_file(job_name, sys.argv[2])
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"❌ Invalid input: {e}")
        sys.exit(1)
    except CalculatorError:
        logger.exception("Critical Calculation Failure")
        sys.exit(1)

    print(json.dumps(results, indent=2))


if __name__ == "__main__":
    main()
