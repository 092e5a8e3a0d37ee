"""FastAPI main application for shift planning and run control."""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Config
from .logger import configure_logging
from .routes import optimization_router, schedule_router

config = Config()

# Configure logging
configure_logging(config.LOG_LEVEL, config.LOG_FILE)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Shift Planner API", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(optimization_router)
app.include_router(schedule_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Shift Planner API", "status": "running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
