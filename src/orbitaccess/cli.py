# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for access reports and visualization.

Usage:
    # Per-satellite access/gap statistics from a recorded access report
    orbitaccess report -m mission.json -s satellites.json -a accesses.json

    # Same, and write the validated, normalized report
    orbitaccess report -m mission.json -s satellites.json -a accesses.json -o out.json

    # CZML document with sensor overlays colored by merged visibility
    orbitaccess czml -m mission.json -s satellites.json -a accesses.json -o demo.czml

    # Same, with satellites placed from externally propagated tracks
    orbitaccess czml -m mission.json -s satellites.json -a accesses.json -t tracks.json -o demo.czml
"""
import argparse
import json
import logging
import sys

from orbitaccess.adapters.concurrent_access import (
    CollectionResult,
    ConcurrentAccessCollector,
)
from orbitaccess.adapters.czml_exporter import access_packets, write_czml
from orbitaccess.adapters.json_io import (
    JsonMissionReader,
    read_access_report,
    write_access_report,
)
from orbitaccess.adapters.report_source import ReportAccessSource
from orbitaccess.domain.errors import NoMatchingIntervals
from orbitaccess.domain.mission import Mission, SatelliteSpec
from orbitaccess.domain.statistics import compute_pooled_statistics, format_statistics


def collect(
    mission_path: str,
    satellites_path: str,
    accesses_path: str,
    max_workers: int | None = None,
    fail_fast: bool = False,
) -> tuple[Mission, list[SatelliteSpec], CollectionResult]:
    """
    Load configuration and collect accesses for every satellite.

    Returns:
        (mission, satellites, result); result holds the sealed aggregator
        and one outcome per satellite.
    """
    reader = JsonMissionReader()
    mission = reader.read_mission(mission_path)
    satellites = reader.read_satellites(satellites_path)
    report = read_access_report(accesses_path, mission.horizon)

    collector = ConcurrentAccessCollector(
        ReportAccessSource(report), max_workers=max_workers, fail_fast=fail_fast,
    )
    result = collector.collect(mission, satellites)
    for outcome in result.failed:
        print(f"Warning: satellite {outcome.satellite} failed: {outcome.error}", file=sys.stderr)
    return mission, satellites, result


def print_statistics(result: CollectionResult) -> None:
    """Access and gap statistics per satellite, pooled over instruments and locations."""
    aggregator = result.aggregator
    for satellite in result.succeeded:
        sequences = [
            seq for sat, _, _, seq in aggregator.triples() if sat == satellite
        ]
        print(f"Satellite {satellite}: {len(sequences)} access sequences")
        for label, measure_visible in (("access", True), ("gap", False)):
            try:
                stats = compute_pooled_statistics(sequences, measure_visible)
            except NoMatchingIntervals:
                print(f"  No {label} intervals")
                continue
            for line in format_statistics(label, stats):
                print(f"  {line}")


def run_report(args) -> None:
    _, _, result = collect(
        args.mission, args.satellites, args.accesses,
        max_workers=args.workers, fail_fast=args.fail_fast,
    )
    _require_success(result)
    print_statistics(result)
    if args.output:
        n = write_access_report(result.aggregator, args.output)
        print(f"Wrote {n} access sequences to {args.output}")


def run_czml(args) -> None:
    mission, satellites, result = collect(
        args.mission, args.satellites, args.accesses,
        max_workers=args.workers, fail_fast=args.fail_fast,
    )
    _require_success(result)
    tracks = JsonMissionReader().read_tracks(args.tracks) if args.tracks else None
    packets = access_packets(mission, satellites, result.aggregator, tracks=tracks)
    n = write_czml(packets, args.output)
    print(f"Exported {n} CZML packets to {args.output}")


def _require_success(result: CollectionResult) -> None:
    if not result.succeeded:
        print("Error: no satellite completed access collection", file=sys.stderr)
        sys.exit(1)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--mission', '-m', required=True,
        help="Path to mission JSON (observations + locations)"
    )
    parser.add_argument(
        '--satellites', '-s', required=True,
        help="Path to satellites JSON (TLEs + sensors)"
    )
    parser.add_argument(
        '--accesses', '-a', required=True,
        help="Path to recorded access report JSON"
    )
    parser.add_argument(
        '--workers', type=int, default=None,
        help="Thread pool size for per-satellite collection"
    )
    parser.add_argument(
        '--fail-fast', action='store_true', default=False,
        help="Abort on the first satellite failure instead of skipping it"
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true', default=False,
        help="Log progress to stderr"
    )


def main():
    parser = argparse.ArgumentParser(
        description="Merge and visualize satellite instrument access intervals"
    )
    commands = parser.add_subparsers(dest='command', required=True)

    report = commands.add_parser('report', help="Print access/gap statistics")
    _add_common_arguments(report)
    report.add_argument('--output', '-o', help="Write normalized access report JSON")
    report.set_defaults(handler=run_report)

    czml = commands.add_parser('czml', help="Export CZML visualization")
    _add_common_arguments(czml)
    czml.add_argument('--output', '-o', required=True, help="Output CZML path")
    czml.add_argument(
        '--tracks', '-t', default=None,
        help="Path to propagated satellite tracks JSON (positions + orientations)"
    )
    czml.set_defaults(handler=run_czml)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.handler(args)
    except FileNotFoundError as e:
        print(f"Error: Input file not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except (ValueError, KeyError, RuntimeError, ConnectionError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
