"""
FastAPI Backend for the Drainage Network Optimization System.

Provides HTTP API access to the drainage engines.
CLI (main.py) continues to work independently.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import sys
import os
import logging
from logging.handlers import RotatingFileHandler

from backend.models.request import CatchmentRequest, ComplianceRequest, OptimizationRequest
from backend.models.response import ComplianceResponse, OptimizationResponse, RunoffResponse
from backend.services.optimizer_service import run_compliance, run_optimization, run_runoff
from design_config import DEFAULT_CONFIG, STANDARD_DIAMETERS

# ============================================================================
# LOGGING: console (alongside uvicorn) + rotating file
# ============================================================================
app_logger = logging.getLogger("backend")
app_logger.setLevel(logging.DEBUG)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
console_handler.setFormatter(formatter)

# Engine modules log under their own names
APP_LOGGERS = ("backend", "ga_optimizer", "network_generator", "hydraulics", "cost_engine")
for name in APP_LOGGERS:
    logging.getLogger(name).addHandler(console_handler)
    logging.getLogger(name).propagate = False

log_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")
os.makedirs(log_dir, exist_ok=True)
log_file = os.path.join(log_dir, "backend.log")

file_handler = RotatingFileHandler(log_file, maxBytes=10*1024*1024, backupCount=5)  # 10MB per file, keep 5 backups
file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
file_handler.setFormatter(file_formatter)

root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
root_logger.addHandler(file_handler)
for name in APP_LOGGERS:
    logging.getLogger(name).addHandler(file_handler)

logger = logging.getLogger(__name__)
logger.info("Drainage API starting - Logging configured to file and console")

app = FastAPI(
    title="Drainage Network Optimization API",
    description="Stormwater drainage sizing, optimization and NBC compliance",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
        "capacitor://localhost",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with clear messages."""
    error_messages = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        error_messages.append(f"{field}: {error['msg']}")

    return JSONResponse(
        status_code=422,
        content={"detail": "; ".join(error_messages)}
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Drainage Network Optimization API",
        "version": "1.0.0",
        "endpoints": {
            "POST /optimize": "Run network optimization with compliance report",
            "POST /runoff": "Peak runoff by the Rational Method",
            "POST /compliance": "NBC / BBMP checks for one generated network",
            "GET /reference/rainfall": "IMD rainfall reference data",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/reference/rainfall")
async def rainfall_reference():
    """IMD rainfall reference data and the standard diameter catalog."""
    rainfall = DEFAULT_CONFIG.rainfall
    return {
        "monsoon_avg": rainfall.monsoon_avg,
        "extreme_event": rainfall.extreme_event,
        "annual_avg_mm": rainfall.annual_avg_mm,
        "peak_month": rainfall.peak_month,
        "ward_adjustments": dict(rainfall.ward_adjustments),
        "standard_diameters": list(STANDARD_DIAMETERS),
    }


@app.post("/runoff", response_model=RunoffResponse)
def runoff(request: CatchmentRequest):
    """Peak runoff for a catchment."""
    try:
        return run_runoff(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/compliance", response_model=ComplianceResponse)
def compliance(request: ComplianceRequest):
    """NBC / BBMP compliance of a single generated network (no search)."""
    try:
        return run_compliance(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/optimize", response_model=OptimizationResponse)
def optimize(request: OptimizationRequest):
    """
    Run drainage network optimization.

    The optimizer is CPU bound, so this is a sync endpoint (threadpool).

    Args:
        request: OptimizationRequest with catchment and search settings

    Returns:
        OptimizationResponse with network, cost breakdown and compliance
    """
    try:
        logger.debug(f"Received payload: {request.model_dump()}")
        return run_optimization(request.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("Unexpected error in /optimize")
        raise HTTPException(status_code=500, detail="Optimization failed")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
