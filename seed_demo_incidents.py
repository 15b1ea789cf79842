"""
Seed the demo city incidents by POSTing them to the /incidents API.

Run with the API already running (python run_api.py). Optionally set CRIME_API_URL and DEMO_SEED in env.
Incidents are spread over the last 14 days so week-over-week trends and weekday stats are populated.
Usage: python seed_demo_incidents.py
"""

import os

import httpx
from dotenv import load_dotenv

from core import settings
from core.demo import generate_demo_raw

load_dotenv()

CRIME_API_URL = (os.environ.get("CRIME_API_URL") or "http://localhost:8000").rstrip("/")
BATCH_SIZE = 50


def main():
    records = generate_demo_raw(seed=settings.demo_seed())
    print(f"Seeding {len(records)} demo incidents via {CRIME_API_URL}/incidents")
    client = httpx.Client(timeout=30.0)
    try:
        for start in range(0, len(records), BATCH_SIZE):
            batch = records[start:start + BATCH_SIZE]
            r = client.post(f"{CRIME_API_URL}/incidents", json={"incidents": batch})
            if r.is_success:
                data = r.json()
                print(f"  [{start + len(batch)}/{len(records)}] ingested={data.get('ingested')} total={data.get('total')}")
            else:
                print(f"  [{start + len(batch)}/{len(records)}] FAILED {r.status_code} {r.text[:200]}")
        print("Done. Open /dashboard to see the computed views.")
    finally:
        client.close()


if __name__ == "__main__":
    main()
