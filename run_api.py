#!/usr/bin/env python3
"""
Run the Crime Analytics API.
Tune clustering and ranking via environment (or .env): HOTSPOT_EPS_KM, HOTSPOT_MIN_POINTS, RISK_ZONE_LIMIT, ...
"""
import os

from dotenv import load_dotenv
import uvicorn

load_dotenv()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.environ.get("RELOAD", "0") == "1",
    )
