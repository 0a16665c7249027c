"""
Command line entry point.

Usage:
    doctor-finder serve --port 5000
    doctor-finder search --city Ottawa --specialty "Family Medicine"
    doctor-finder search --specialty other --custom-specialty "Sports Medicine"
    doctor-finder scrape --last-name Smith --json
    doctor-finder specialties
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import httpx

from .config import CLIENT_TIMEOUT_SECONDS, DEFAULT_SERVER_URL, HOST, LOG_LEVEL, PORT, ScraperSettings
from .models import GENDER_CODES, DoctorRecord, SearchCriteria
from .specialties import OTHER_SPECIALTY, SPECIALTIES, resolve_specialty
from .utils import TotalScrapeFailure

GENDER_LABELS = {'M': 'Male', 'F': 'Female'}


def format_record(record: DoctorRecord) -> str:
    """Render one record; every field may be empty."""
    lines = [record.full_name or "(name not found)"]
    if record.city:
        lines.append(f"  City: {record.city}")
    if record.postal_code:
        lines.append(f"  Postal code: {record.postal_code}")
    if record.gender:
        lines.append(f"  Gender: {GENDER_LABELS.get(record.gender, record.gender)}")
    if record.language:
        lines.append(f"  Language: {record.language}")
    if record.specialty:
        lines.append(f"  Specialty: {record.specialty}")
    if record.raw_data:
        raw = record.raw_data.replace("\n", " | ")
        lines.append(f"  Raw: {raw}")
    return "\n".join(lines)


def print_results(doctors: list[DoctorRecord], as_json: bool = False):
    if as_json:
        print(json.dumps([d.to_dict() for d in doctors], indent=2, ensure_ascii=False))
        return

    if not doctors:
        print("No doctors found. Try broadening your search criteria.")
        return

    print(f"Search Results ({len(doctors)} doctors found)\n")
    for doctor in doctors:
        print(format_record(doctor))
        print()


def criteria_from_args(args: argparse.Namespace) -> SearchCriteria:
    return SearchCriteria(
        first_name=args.first_name,
        last_name=args.last_name,
        city=args.city,
        postal_code=args.postal_code,
        gender=args.gender,
        language=args.language,
        specialty=resolve_specialty(args.specialty, args.custom_specialty),
    )


def add_criteria_arguments(parser: argparse.ArgumentParser, city: Optional[str], specialty: Optional[str]):
    parser.add_argument("--first-name", help="Given name")
    parser.add_argument("--last-name", help="Family name")
    parser.add_argument("--city", default=city, help=f"City (default: {city or 'any'})")
    parser.add_argument("--postal-code", help="Postal code")
    parser.add_argument("--gender", choices=GENDER_CODES, help="Gender code")
    parser.add_argument("--language", help="Language spoken")
    parser.add_argument(
        "--specialty",
        default=specialty,
        help=f"Specialty, or '{OTHER_SPECIALTY}' with --custom-specialty (default: {specialty or 'any'})",
    )
    parser.add_argument("--custom-specialty", help=f"Free-text specialty used when --specialty is '{OTHER_SPECIALTY}'")
    parser.add_argument("--json", action="store_true", help="Print records as JSON")


def run_search(args: argparse.Namespace) -> int:
    """Search through a running API server."""
    from .client import DoctorFinderClient, describe_failure

    criteria = criteria_from_args(args)
    print("Searching for doctors... this can take up to a minute.", file=sys.stderr)

    with DoctorFinderClient(args.server, timeout=args.timeout) as client:
        try:
            doctors = client.search(criteria)
        except (httpx.HTTPError, ValueError) as e:
            logging.getLogger(__name__).debug(f"Search failed: {e!r}")
            print(describe_failure(e, args.server), file=sys.stderr)
            return 1

    print_results(doctors, args.json)
    return 0


def run_scrape(args: argparse.Namespace) -> int:
    """Scrape in-process, without the API server."""
    from .service import DoctorSearchService

    criteria = criteria_from_args(args)
    service = DoctorSearchService(ScraperSettings.from_env())

    try:
        doctors = asyncio.run(service.search(criteria))
    except TotalScrapeFailure as e:
        print(f"Failed: {e}", file=sys.stderr)
        print(f"Debug screenshots: {', '.join(e.screenshots)}", file=sys.stderr)
        return 1

    print_results(doctors, args.json)
    return 0


def run_serve(args: argparse.Namespace) -> int:
    from .api import main as serve

    serve(host=args.host, port=args.port)
    return 0


def run_specialties(args: argparse.Namespace) -> int:
    for name in SPECIALTIES:
        print(name)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="doctor-finder", description="Find physicians on the public registry.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT)
    serve.set_defaults(func=run_serve)

    # Same defaults as the search form
    search = subparsers.add_parser("search", help="Search via a running API server")
    add_criteria_arguments(search, city="Ottawa", specialty="Family Medicine")
    search.add_argument("--server", default=DEFAULT_SERVER_URL, help=f"API base URL (default: {DEFAULT_SERVER_URL})")
    search.add_argument("--timeout", type=float, default=CLIENT_TIMEOUT_SECONDS, help="Request timeout in seconds")
    search.set_defaults(func=run_search)

    scrape = subparsers.add_parser("scrape", help="Scrape directly without a server")
    add_criteria_arguments(scrape, city=None, specialty=None)
    scrape.set_defaults(func=run_scrape)

    listing = subparsers.add_parser("specialties", help="List known specialties")
    listing.set_defaults(func=run_specialties)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
