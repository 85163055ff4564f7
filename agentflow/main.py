"""
FastAPI application entry point.

Assembles the FastAPI app with the orchestrator router.
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agentflow.graph.orchestrator_api import router as orchestrator_router


# ============================================================================
# Logging configuration (single source of truth for all engines)
# ============================================================================
LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
)

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,  # Override any prior basicConfig calls
)

# Quiet noisy third-party loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.WARNING)


# Create FastAPI app
app = FastAPI(
    title="agentflow",
    description="Agent orchestration engine (routing, fan-out, pipelines) built with LangGraph",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(orchestrator_router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "agentflow",
        "version": "0.1.0",
        "engines": {
            "capstone": {"status": "active", "endpoints": "/api/orchestrator/run"},
            "router": {"status": "active", "endpoints": "/api/orchestrator/route"},
            "parallel": {"status": "active", "endpoints": "/api/orchestrator/investigate"},
            "pipeline": {"status": "active", "endpoints": "/api/orchestrator/workflow"},
        },
    }


@app.get("/health")
async def health():
    """Global health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
