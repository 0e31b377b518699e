#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Usage:
    python run.py
"""

import uvicorn

from tutorly.core.config import settings

if __name__ == "__main__":
    print("Starting Tutorly API at http://localhost:8000 (docs at /docs)")
    uvicorn.run(
        "tutorly.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
        log_level=settings.log_level.lower(),
    )
