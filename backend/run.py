#!/usr/bin/env python3
# backend/run.py
"""Local development server for the booking rules API."""

import os

import uvicorn

if __name__ == "__main__":
    host = os.getenv("LIVADAI_HOST", "0.0.0.0")
    port = int(os.getenv("LIVADAI_PORT", "8000"))
    uvicorn.run(
        "livadai.main:app",
        host=host,
        port=port,
        reload=os.getenv("LIVADAI_RELOAD", "").lower() in {"1", "true", "yes"},
        log_level="info",
    )
