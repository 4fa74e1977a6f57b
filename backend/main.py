from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
from pathlib import Path
from typing import List, Optional
from datetime import datetime
import psutil
import time
import threading

from casediary.core import config

# Import routers
from casediary.api.router import router as api_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.CONFIG["debug"] else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[
        logging.StreamHandler(),  # Output to console
        logging.FileHandler(config.log_file, encoding="utf-8")  # Save to file
    ]
)
logger = logging.getLogger("main")

app = FastAPI(title=config.app_title, description=config.app_description)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # The UI is served separately
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS middleware configured")


# Add middleware to track request processing times
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    # Log slow requests (more than 1 second)
    if process_time > 1.0:
        logger.warning(f"SLOW REQUEST: {request.method} {request.url.path} took {process_time:.2f} seconds")

    return response

# Include routers
app.include_router(api_router, prefix="/api")
logger.info("API routers included")


@app.get("/")
async def root():
    return {"message": f"Welcome to {config.app_title}"}


@app.get("/health")
async def health_check():
    """
    Lightweight health check that does not touch the case store.
    """
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.get("/status")
async def server_status():
    """
    Get the server status - lightweight endpoint that will always respond quickly.
    """
    memory = psutil.virtual_memory()
    process = psutil.Process()

    return {
        "timestamp": datetime.now().isoformat(),
        "system": {
            "cpu_percent": psutil.cpu_percent(interval=0.1),
            "memory_percent": memory.percent,
            "available_memory_mb": memory.available / (1024 * 1024),
        },
        "server": {
            "threads": threading.active_count(),
            "process_memory_mb": process.memory_info().rss / (1024 * 1024),
            "uptime_seconds": time.time() - process.create_time(),
        },
        "ai_configured": bool(config.openai_api_key),
    }


@app.get("/logs", response_model=List[str])
async def get_logs(lines: Optional[int] = 100, component: Optional[str] = None):
    """
    Get the most recent log entries.

    Args:
        lines: Number of most recent log lines to return
        component: Filter by component name (e.g., "case_store", "llm_service", "document_processor")

    Returns:
        List of log lines
    """
    logger.info(f"Logs endpoint accessed: lines={lines}, component={component}")

    log_file = Path(config.log_file)
    if not log_file.exists():
        return ["No logs found"]

    try:
        with open(log_file, "r", encoding="utf-8") as f:
            all_logs = f.readlines()
    except OSError as e:
        logger.error(f"Error reading logs: {str(e)}")
        return [f"Error reading logs: {str(e)}"]

    # Filter by component if specified
    if component:
        all_logs = [line for line in all_logs if f" - {component} - " in line]

    # Return the most recent logs, limited by the lines parameter
    return all_logs[-lines:]


if __name__ == "__main__":
    logger.info("Starting server")
    uvicorn.run("main:app", host=config.host, port=config.port, reload=True)
