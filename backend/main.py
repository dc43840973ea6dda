"""SEO Meta Analyzer API – FastAPI app."""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from logging_config import configure_logging
from scraper import AnalysisError, InvalidUrlError, analyze_url
from schemas import AnalysisReport, AnalyzeRequest, ErrorResponse

configure_logging()
logger = logging.getLogger(__name__)

CORS_ALLOW_ORIGINS = [
    origin.strip() for origin in os.getenv("SEO_CORS_ALLOW_ORIGINS", "*").split(",") if origin.strip()
] or ["*"]

app = FastAPI(
    title="SEO Meta Analyzer API",
    description="Meta tag extraction and SEO completeness scoring",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = str(error.get("msg") or "Invalid request").removeprefix("Value error, ")
        messages.append(f"{text} at \"{location}\"" if location else text)
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": _validation_message(exc)})


@app.exception_handler(InvalidUrlError)
async def invalid_url_handler(request: Request, exc: InvalidUrlError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"message": str(exc) or "Failed to analyze the website. Please try again later."},
    )


@app.post(
    "/api/analyze",
    response_model=AnalysisReport,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def analyze(body: AnalyzeRequest) -> AnalysisReport:
    """
    Pipeline: normalize URL -> fetch HTML -> extract meta tags -> score -> return report.
    """
    try:
        return analyze_url(body.url)
    except InvalidUrlError:
        raise
    except AnalysisError:
        logger.exception("Error analyzing URL %s", body.url)
        raise
    except Exception as exc:
        logger.exception("Unexpected error analyzing URL %s", body.url)
        raise AnalysisError(str(exc) or "Failed to analyze URL") from exc


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
