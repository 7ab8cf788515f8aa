"""
Fundly Lead Qualifier API - Main Application.

FastAPI application exposing lead evaluation and stored-lead lookups.
"""

import argparse
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__

app = FastAPI(
    title="Fundly Lead Qualifier API",
    description="Evaluate scraped Fundly leads against funding programs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Internal tool; the dashboard is served from a different origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "fundly-lead-qualifier-api"
    }


@app.get("/", tags=["Root"])
def root():
    return {
        "message": "Fundly Lead Qualifier API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


from api.routers import evaluate, leads

app.include_router(evaluate.router, prefix="/api/v1", tags=["Evaluation"])
app.include_router(leads.router, prefix="/api/v1", tags=["Leads"])


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the Fundly Lead Qualifier API")
    parser.add_argument("--host", default=os.getenv("API_HOST", "127.0.0.1"), help="Bind host")
    parser.add_argument("--port", type=int, default=int(os.getenv("API_PORT", "8000")), help="Bind port")
    parser.add_argument("--log-level", default=os.getenv("API_LOG_LEVEL", "info"), help="uvicorn log level")
    return parser


def main(argv=None) -> None:
    args = build_arg_parser().parse_args(argv)
    import uvicorn

    uvicorn.run(
        app,
        host=str(args.host),
        port=int(args.port),
        log_level=str(args.log_level),
        reload=False,
    )


if __name__ == "__main__":
    main()
