"""Refresh the bundled LCS city list from the live directory.

The bundled file is the last fallback when neither the LCS endpoint nor
LCS_CITIES_JSON yields cities, so it should be refreshed whenever LCS
adds service areas.

Prerequisites:
    LCS_BASE_URL, LCS_API_KEY and LCS_API_PASSWORD set (or in .env)

Usage:
    # Overwrite the packaged file
    python scripts/sync_lcs_cities.py

    # Write somewhere else and keep the packaged file untouched
    python scripts/sync_lcs_cities.py --output /tmp/lcs_cities.json
"""

import argparse
import json
import sys

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")


def main():
    from shipping.courier.directory import CityDirectory
    from shipping.courier.http import LcsHttp
    from shipping.courier.settings import BUNDLED_CITIES_FILE, get_settings

    parser = argparse.ArgumentParser(description="Refresh the bundled LCS city list")
    parser.add_argument("--output", default=str(BUNDLED_CITIES_FILE), help="Where to write the city list")
    parser.add_argument("--min-count", type=int, default=50, help="Refuse to write fewer cities (default: 50)")
    args = parser.parse_args()

    settings = get_settings()
    if not settings.has_credentials:
        print("LCS credentials are not configured; nothing to fetch.")
        sys.exit(1)

    directory = CityDirectory(settings, LcsHttp(timeout=settings.request_timeout))
    records = directory.fetch_remote()
    if len(records) < args.min_count:
        print(f"LCS returned {len(records)} cities (expected at least {args.min_count}); file left unchanged.")
        sys.exit(1)

    with open(args.output, "w", encoding="utf-8") as handle:
        json.dump({"cities": records}, handle, indent=2, ensure_ascii=False)
    print(f"Wrote {len(records)} cities to {args.output}")


if __name__ == "__main__":
    main()
