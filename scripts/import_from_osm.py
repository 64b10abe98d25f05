#!/usr/bin/env python
"""
Import ESS initiatives from OpenStreetMap (Overpass API) into Supabase.

Usage:
    python scripts/import_from_osm.py second_hand
    python scripts/import_from_osm.py all --skip-duplicates
"""

import argparse
import logging
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings  # noqa: E402
from app.core.database import get_supabase  # noqa: E402
from app.services.osm_import import FRANCE_BBOX, OSM_TAG_MAPPING, import_from_osm  # noqa: E402

logger = logging.getLogger("lamap.import_osm")


def build_parser() -> argparse.ArgumentParser:
    available = "\n".join(
        f"  {tag:<20} -> {m['type'].value}" for tag, m in OSM_TAG_MAPPING.items()
    )
    parser = argparse.ArgumentParser(
        description="LaMap - OSM data import tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Available tags:\n{available}\n  {'all':<20} -> every type, sequentially",
    )
    parser.add_argument("tag", choices=list(OSM_TAG_MAPPING) + ["all"])
    parser.add_argument(
        "--skip-duplicates",
        action="store_true",
        help="skip nodes near an existing initiative",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    supabase = get_supabase()
    tags = list(OSM_TAG_MAPPING) if args.tag == "all" else [args.tag]

    logger.info(f"Bounding box: France ({FRANCE_BBOX})")

    total = 0
    for i, tag in enumerate(tags):
        if i:
            logger.info(f"Waiting {settings.OSM_IMPORT_PAUSE}s before next request...")
            time.sleep(settings.OSM_IMPORT_PAUSE)

        report = import_from_osm(supabase, tag, skip_duplicates=args.skip_duplicates)
        print(
            f"{tag:<20} found={report.found:<6} named={report.named:<6} "
            f"duplicates={report.duplicates:<6} inserted={report.inserted:<6} errors={report.errors}"
        )
        total += report.inserted

    print(f"Import complete: {total} initiatives inserted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
