#!/usr/bin/env python3
"""
Startup script for the demo-mode API server
This script starts the FastAPI server with proper configuration
"""

import uvicorn
import os
from dotenv import load_dotenv

from app.config.settings import settings

def main():
    # Load environment variables
    load_dotenv()

    # Server configuration
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3001"))
    reload = os.getenv("RELOAD", "true").lower() == "true"

    print("Starting demo-mode API server...")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Reload: {reload}")
    print(f"Storage: {settings.STORAGE_DIR}")
    print("=" * 50)

    # Start the server
    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower()
    )

if __name__ == "__main__":
    main()
