"""
Property Reviews - Main CLI
Manager operations (list, stats, approve, export) and public page output
"""
import sys
import json
import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional
import argparse

from . import config
from .database import DatabaseManager
from .map_reviews import MapReviewsClient
from .repository import (
    DuckDBReviewRepository,
    JsonFileReviewRepository,
    ReviewRepository,
)
from .service import ReviewService
from .transformers import reviews_to_dataframe
from .utils import MapReviewsError, ReviewStoreError, UnauthorizedError

logger = logging.getLogger(__name__)


# =========================
# Helpers
# =========================
def build_repository(args) -> ReviewRepository:
    """Pick DuckDB storage when --db is given, the JSON file otherwise"""
    if getattr(args, "db", None):
        return DuckDBReviewRepository(DatabaseManager(args.db))
    return JsonFileReviewRepository(args.data or config.REVIEWS_FILE)


def build_service(args) -> ReviewService:
    return ReviewService(
        repository=build_repository(args),
        map_client=MapReviewsClient(debug=args.debug),
        admin_key=config.ADMIN_ACCESS_CODE,
    )


def emit(data: Any):
    """Print command output as JSON"""
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def _review_params(args) -> Dict[str, Optional[str]]:
    # Flags arrive as strings, the same way URL query parameters do
    return {
        "listingId": args.listing_id,
        "rating": args.rating,
        "category": args.category,
        "channel": args.channel,
        "startDate": args.start_date,
        "endDate": args.end_date,
        "approved": args.approved,
        "sortBy": args.sort_by,
        "sortOrder": args.sort_order,
        "limit": args.limit,
        "offset": args.offset,
    }


# =========================
# Commands
# =========================
def cmd_list(args):
    """List filtered, sorted reviews"""
    service = build_service(args)
    service.authorize(args.admin_key)
    emit(service.get_reviews(_review_params(args)))
    return 0


def cmd_stats(args):
    """Show review statistics"""
    service = build_service(args)
    service.authorize(args.admin_key)
    emit(service.get_stats(args.listing_id).to_dict())
    return 0


def cmd_approve(args):
    """Approve or reject a review"""
    service = build_service(args)
    service.authorize(args.admin_key)
    result = service.set_approval(args.review_id, not args.reject)
    emit(result.to_dict())
    return 0 if result.found else 1


def cmd_options(args):
    """Show available filter values"""
    service = build_service(args)
    service.authorize(args.admin_key)
    emit(service.get_filter_options())
    return 0


def cmd_public(args):
    """Show public page content for a property"""
    service = build_service(args)
    page = service.get_public_page(args.listing_id, place_id=args.place_id)
    emit(page)
    return 0 if page["listing"] is not None else 1


def cmd_google(args):
    """Show map-service reviews for a place"""
    client = MapReviewsClient(debug=args.debug)
    if args.status:
        emit(client.integration_status())
        return 0
    if args.search:
        emit(client.search_places(args.search, location=args.location))
        return 0
    emit(client.get_place_reviews(args.place_id, limit=args.limit, sort_order=args.order))
    return 0


def cmd_export(args):
    """Export normalized reviews to CSV"""
    service = build_service(args)
    service.authorize(args.admin_key)
    df = reviews_to_dataframe(service.load_reviews())

    args.output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.output, index=False)

    print(f"\n✅ Export complete!")
    print(f"   Reviews: {len(df)}")
    print(f"   Output: {args.output}")
    return 0


def cmd_db_import(args):
    """Load a JSON export into the DuckDB store"""
    db_path = args.db or config.DB_PATH
    source = args.input or args.data or config.REVIEWS_FILE

    with DatabaseManager(db_path) as db:
        counts = DuckDBReviewRepository(db).import_file(source)

    print(f"\n✅ Import complete!")
    print(f"   From: {source}")
    print(f"   To: {db_path}")
    print(f"   Reviews: {counts['reviews']}")
    print(f"   Listings: {counts['listings']}")
    return 0


# =========================
# Main CLI
# =========================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="property-reviews",
        description="Property review management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Pending 5-star Airbnb reviews, newest first
  property-reviews list --rating 5 --channel airbnb --approved false

  # Statistics for one property
  property-reviews stats --listing-id L001

  # Approve / reject a review
  property-reviews approve rev_001
  property-reviews approve rev_001 --reject

  # Public page content (approved reviews + Google reviews)
  property-reviews public L001

  # Find a Google Maps place
  property-reviews google --search "Flex Living" --location London

  # Work against DuckDB instead of the JSON file
  property-reviews --db data/property_reviews.duckdb db-import
  property-reviews --db data/property_reviews.duckdb list
        """
    )

    parser.add_argument("--debug", action="store_true", help="Debug mode")
    parser.add_argument("--data", type=Path, help="Reviews JSON file")
    parser.add_argument("--db", type=Path, help="DuckDB file (instead of --data)")
    parser.add_argument("--admin-key", help="Shared admin key for manager commands")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ===== LIST =====
    list_parser = subparsers.add_parser("list", help="List reviews")
    list_parser.add_argument("--listing-id")
    list_parser.add_argument("--rating")
    list_parser.add_argument("--category")
    list_parser.add_argument("--channel")
    list_parser.add_argument("--start-date")
    list_parser.add_argument("--end-date")
    list_parser.add_argument("--approved", help="'true' or 'false'")
    list_parser.add_argument("--sort-by", default=config.QUERY_DEFAULTS["sort_by"],
                             help="date, rating, guestName, listingName, channel, category")
    list_parser.add_argument("--sort-order", default=config.QUERY_DEFAULTS["sort_order"],
                             choices=["asc", "desc"])
    list_parser.add_argument("--limit", default=str(config.QUERY_DEFAULTS["limit"]))
    list_parser.add_argument("--offset", default=str(config.QUERY_DEFAULTS["offset"]))
    list_parser.set_defaults(func=cmd_list)

    # ===== STATS =====
    stats_parser = subparsers.add_parser("stats", help="Review statistics")
    stats_parser.add_argument("--listing-id")
    stats_parser.set_defaults(func=cmd_stats)

    # ===== APPROVE =====
    approve_parser = subparsers.add_parser("approve", help="Approve a review")
    approve_parser.add_argument("review_id")
    approve_parser.add_argument("--reject", action="store_true",
                                help="Withdraw approval instead")
    approve_parser.set_defaults(func=cmd_approve)

    # ===== OPTIONS =====
    options_parser = subparsers.add_parser("options", help="Filter values")
    options_parser.set_defaults(func=cmd_options)

    # ===== PUBLIC =====
    public_parser = subparsers.add_parser("public", help="Public property page")
    public_parser.add_argument("listing_id")
    public_parser.add_argument("--place-id", help="Google Maps place_id")
    public_parser.set_defaults(func=cmd_public)

    # ===== GOOGLE =====
    google_parser = subparsers.add_parser("google", help="Google Maps reviews")
    google_parser.add_argument("place_id", nargs="?", default=config.MOCK_PLACE_ID)
    google_parser.add_argument("--limit", type=int, default=20)
    google_parser.add_argument("--order", default="desc", choices=["asc", "desc"])
    google_parser.add_argument("--status", action="store_true",
                               help="Show integration status only")
    google_parser.add_argument("--search", metavar="QUERY", help="Search places instead of listing reviews")
    google_parser.add_argument("--location", help="Area for --search")
    google_parser.set_defaults(func=cmd_google)

    # ===== EXPORT =====
    export_parser = subparsers.add_parser("export", help="Export reviews to CSV")
    export_parser.add_argument("--output", type=Path, required=True)
    export_parser.set_defaults(func=cmd_export)

    # ===== DB IMPORT =====
    import_parser = subparsers.add_parser("db-import", help="Load JSON export into DuckDB")
    import_parser.add_argument("--input", type=Path, help="Reviews JSON file")
    import_parser.set_defaults(func=cmd_db_import)

    return parser


def main(argv=None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logging.config.dictConfig(config.get_log_config(debug=args.debug))

    if not args.command:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except UnauthorizedError:
        print("❌ Unauthorized: missing or wrong admin key", file=sys.stderr)
        return 2
    except ReviewStoreError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except MapReviewsError as e:
        print(f"❌ Map reviews unavailable: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
