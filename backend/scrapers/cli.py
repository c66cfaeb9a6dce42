#!/usr/bin/env python3
"""
Command-line runner for the Douban collection crawler.

Usage:
    cd backend
    python -m scrapers.cli <profile-url-or-uid> [--cookie COOKIE] [--output FILE]

Examples:
    python -m scrapers.cli ahbei                                  # Anonymous crawl
    python -m scrapers.cli https://www.douban.com/people/ahbei/ --cookie "bid=..."
    python -m scrapers.cli ahbei --output reviews.json            # Save records
    python -m scrapers.cli --list                                 # List categories
"""

import asyncio
import argparse
import logging
import json
import sys

from scrapers.config import CrawlConfig, get_category_summary
from scrapers.exceptions import CrawlError
from scrapers.manager import CrawlManager
from scrapers.utils.extractors import extract_subject_id


def list_all_categories():
    """List all configured categories."""
    print(f"\n{'='*60}")
    print("Configured Categories")
    print(f"{'='*60}\n")

    for cat in get_category_summary():
        status = "✓" if cat['enabled'] else "✗"
        print(f"{status} {cat['icon']} {cat['key']:6} {cat['label']:8} {cat['host']}")


async def run_crawl(subject_id: str, cookie: str, output: str = None) -> int:
    """Crawl one user and optionally write the records to a JSON file."""
    print(f"\n{'='*60}")
    print(f"Crawling collections for: {subject_id}")
    print(f"{'='*60}\n")

    manager = CrawlManager(CrawlConfig.from_settings())
    try:
        records = await manager.crawl(subject_id, cookie, print)
    except CrawlError as e:
        print(f"\n❌ Error: {e}")
        return 1
    finally:
        await manager.close()

    summary = manager.get_results_summary()
    print(f"\n{'='*60}")
    print("RESULTS")
    print(f"{'='*60}")
    print(json.dumps(summary, indent=2, default=str, ensure_ascii=False))

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            json.dump([r.to_dict() for r in records], f, indent=2, ensure_ascii=False)
        print(f"\nSaved {len(records)} records to {output}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Crawl a Douban user\'s collections')
    parser.add_argument('target', nargs='?', help='Profile URL or user id')
    parser.add_argument('--cookie', default='', help='Douban cookie for logged-in access')
    parser.add_argument('--output', '-o', help='Write records to this JSON file')
    parser.add_argument('--list', action='store_true', help='List all categories')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.list:
        list_all_categories()
        return 0

    if not args.target:
        parser.print_help()
        return 2

    subject_id = extract_subject_id(args.target)
    if not subject_id:
        print("Invalid Douban link or UID format")
        return 2

    return asyncio.run(run_crawl(subject_id, args.cookie, args.output))


if __name__ == '__main__':
    sys.exit(main())
