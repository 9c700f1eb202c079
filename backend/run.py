#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Starts the API with auto-reload against the database configured in
DATABASE_URL (SQLite file by default). Production runs uvicorn directly.
"""
import os
import sys
from pathlib import Path

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("ENVIRONMENT", "development")

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting tutorslot development server at http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    uvicorn.run("tutorslot.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
