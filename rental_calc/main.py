"""
Main FastAPI application entry point.
"""

import logging
import math
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, JSONResponse

from rental_calc import __version__
from rental_calc.config import get_settings
from rental_calc.api import router as api_router
from rental_calc.calculations import DEFAULT_INPUTS, CalculatorInputs, calculate_all
from rental_calc.ui.forms import INPUT_FIELDS, parse_form
from rental_calc.ui.formatting import format_currency, format_percent

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

UI_DIR = Path(__file__).parent / "ui"

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Rental property cash flow, cap rate and return calculator",
    version=__version__,
    debug=settings.debug,
)

# Mount static files
app.mount("/static", StaticFiles(directory=UI_DIR / "static"), name="static")

# Set up templates
templates = Jinja2Templates(directory=UI_DIR / "templates")
templates.env.filters["currency"] = format_currency
templates.env.filters["percent"] = format_percent

# Include API routes
app.include_router(api_router, prefix="/api")


def _json_safe(value):
    """Replace NaN and infinity, which JSON cannot encode, with their names."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return 422 for invalid bodies, including rejected non-finite numbers."""
    errors = _json_safe(jsonable_encoder(exc.errors()))
    logger.info("Rejected request to %s: %s", request.url.path, errors)
    return JSONResponse(status_code=422, content={"detail": errors})


def _results_context(inputs: CalculatorInputs) -> dict:
    """Template variables for the results panel."""
    return {
        "inputs": inputs,
        "results": calculate_all(inputs),
        "preview_months": settings.amortization_preview_months,
    }


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the calculator page with the default scenario."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": settings.app_name,
            "fields": INPUT_FIELDS,
            **_results_context(DEFAULT_INPUTS),
        },
    )


@app.get("/partials/results", response_class=HTMLResponse)
async def results_partial(request: Request):
    """Recalculate and render the results panel for the submitted form."""
    inputs = parse_form(request.query_params)
    logger.debug("Recalculating results for %s", inputs)
    return templates.TemplateResponse(
        request, "_results.html", _results_context(inputs)
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}
