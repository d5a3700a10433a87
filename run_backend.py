#!/usr/bin/env python
"""Script to run the task manager API server."""
import os
from pathlib import Path

# Change to the project directory so the default SQLite file lands here
os.chdir(Path(__file__).resolve().parent)

import uvicorn

from taskmanager.config import IS_PRODUCTION, PORT

if __name__ == "__main__":
    uvicorn.run(
        "taskmanager.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=not IS_PRODUCTION
    )
