#!/usr/bin/env python3
"""Seed page content into DynamoDB from the bundled page schemas."""

import argparse
import json
import os
import sys

# Add the shared layer to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src", "layers", "shared", "python"))

from sitecms.content import ALL_PAGE_IDS
from sitecms.services.seeding import SeedingService
from sitecms.utils.exceptions import SiteCMSError


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed page content")
    parser.add_argument("pages", nargs="*", default=["all"], help=f"Page ids ({', '.join(ALL_PAGE_IDS)}) or 'all'")
    parser.add_argument("--stage", default="dev", help="Deployment stage")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--force", action="store_true", help="Overwrite stored content instead of merging")
    args = parser.parse_args()

    os.environ.setdefault("TABLE_NAME", f"sitecms-{args.stage}")
    os.environ.setdefault("AWS_DEFAULT_REGION", args.region)
    print(f"Seeding pages to table: {os.environ['TABLE_NAME']}")

    try:
        report = SeedingService().seed(args.pages, force=args.force, author="seed-script")
    except SiteCMSError as e:
        print(f"Seeding failed: {e.message}")
        if e.details:
            print(json.dumps(e.details, indent=2))
        return 1

    for result in report.results:
        if result.status == "ok":
            print(f"  {result.page_id}: published v{result.version} ({'merged' if result.merged else 'fresh'})")
        else:
            print(f"  {result.page_id}: FAILED - {result.error}")

    print(f"\nSeeding complete! {report.succeeded}/{report.total} pages ({report.mode})")
    return 0 if report.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
