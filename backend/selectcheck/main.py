import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import VERSION, get_cors_origins, log_level, default_profile_name
from .routers import analyze

logging.basicConfig(level=log_level())
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Select Check API",
    description="Accessibility checks for <select> markup fragments",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Requested-With"],
)

app.include_router(analyze.router)

logger.info("Select Check %s ready (default profile: %s)", VERSION, default_profile_name())


@app.get("/health")
def health():
    return {"status": "healthy", "version": VERSION}


@app.get("/")
def root():
    return {"name": "Select Check", "version": VERSION, "docs": "/docs"}
