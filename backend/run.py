#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Uses the test database unless IS_TESTING is already set, so local work never
touches the primary database.
"""
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("IS_TESTING", "true")

import uvicorn  # noqa: E402

if __name__ == "__main__":
    print("Starting SkillSwap scheduling API at http://localhost:8000 (docs: /docs)")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
