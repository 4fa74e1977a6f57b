#!/usr/bin/env python
import argparse
import os

import uvicorn

from casediary.core import config


def main():
    """Run the FastAPI server."""
    parser = argparse.ArgumentParser(description="Run the Case Diary server")
    parser.add_argument("--host", type=str, help="Host to run on")
    parser.add_argument("--port", type=int, help="Port to run on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    host = args.host or config.host
    port = args.port or config.port

    # Ensure logs are output immediately
    os.environ["PYTHONUNBUFFERED"] = "1"

    # Single worker: the case collection is held in this process
    print(f"✨ Starting {config.app_title} server")
    print(f"🖥️  Host: {host}, Port: {port}")
    print(f"🗂️  Case data: {os.path.abspath(config.data_dir)}")
    print(f"🔄 Reload: {'Enabled' if args.reload else 'Disabled'}")
    print(f"📚 API Docs: http://localhost:{port}/docs")
    print(f"🩺 Health Check: http://localhost:{port}/health")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        log_level="info",
        reload=args.reload,
        timeout_keep_alive=300,  # long AI streams
    )


if __name__ == "__main__":
    main()
