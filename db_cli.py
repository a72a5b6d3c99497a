#!/usr/bin/env python3
"""
Database CLI for Property Reviews
Commands for initializing, importing into, and inspecting the DuckDB store
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from property_reviews import config
from property_reviews.database import DatabaseManager
from property_reviews.repository import DuckDBReviewRepository
from property_reviews.service import ReviewService


def cmd_init(args):
    """Initialize database schema"""
    db_path = Path(args.db) if args.db else config.DB_PATH

    print(f"🗄️  Initializing database: {db_path}")

    with DatabaseManager(db_path) as db:
        db.initialize_schema()
        stats = db.get_table_stats()

    print("✅ Database initialized!")
    print(f"   Tables created: reviews, listings")
    print(f"   Current stats: {stats}")
    return 0


def cmd_import(args):
    """Import a reviews JSON export into the database"""
    json_path = Path(args.input) if args.input else config.REVIEWS_FILE
    db_path = Path(args.db) if args.db else config.DB_PATH

    if not json_path.exists():
        print(f"❌ Input file not found: {json_path}")
        return 1

    print(f"📦 Importing data:")
    print(f"   From: {json_path}")
    print(f"   To: {db_path}")

    with DatabaseManager(db_path) as db:
        counts = DuckDBReviewRepository(db).import_file(json_path)
        table_stats = db.get_table_stats()

    print("\n✅ Import Complete!")
    print(f"   Reviews: {counts['reviews']:,}")
    print(f"   Listings: {counts['listings']:,}")
    print(f"\n📊 Verification:")
    for table, count in table_stats.items():
        print(f"   {table}: {count:,}")
    return 0


def cmd_stats(args):
    """Show database statistics"""
    db_path = Path(args.db) if args.db else config.DB_PATH

    if not db_path.exists():
        print(f"❌ Database not found: {db_path}")
        print("   Run 'db_cli.py init' first")
        return 1

    with DatabaseManager(db_path) as db:
        service = ReviewService(DuckDBReviewRepository(db))
        stats = service.get_stats(args.listing_id)
        table_stats = db.get_table_stats()

    print("\n📊 Database Statistics")
    print("=" * 40)
    for table, count in table_stats.items():
        print(f"   {table}: {count:,}")

    print(f"\n⭐ Reviews{' for ' + args.listing_id if args.listing_id else ''}")
    print(f"   Total: {stats.total_reviews:,}")
    print(f"   Average rating: {stats.average_rating}")
    print(f"   Approved: {stats.approved_count:,}")
    print(f"   Pending: {stats.pending_count:,}")

    if stats.channel_distribution:
        print("\n📡 By channel:")
        for channel, count in sorted(stats.channel_distribution.items(), key=lambda kv: -kv[1]):
            print(f"   {channel}: {count:,}")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Property Reviews Database CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Initialize new database
  python db_cli.py init

  # Import the JSON export
  python db_cli.py import --input data/reviews.json

  # Show statistics
  python db_cli.py stats --listing-id L001
        """
    )

    parser.add_argument("--db", help="Database path (default: data/property_reviews.duckdb)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Init command
    init_parser = subparsers.add_parser("init", help="Initialize database schema")
    init_parser.set_defaults(func=cmd_init)

    # Import command
    import_parser = subparsers.add_parser("import", help="Import JSON export")
    import_parser.add_argument("--input", "-i", help="Input JSON path")
    import_parser.set_defaults(func=cmd_import)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show statistics")
    stats_parser.add_argument("--listing-id", help="Restrict to one property")
    stats_parser.set_defaults(func=cmd_stats)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main() or 0)
