"""
Personal Activity Summary - Main Module
=======================================

Summarizes daily step logs and activity sessions over a selectable window.

Key Design Decisions:
1. The record store is loaded once and passed in explicitly - no globals
2. The reference instant is injectable (--now) so results are reproducible
3. Month / year windows use calendar arithmetic, not fixed day offsets
4. Averages use the nominal period length by default (7 / 30 / 365 days)

This module serves as the CLI entry point and orchestrates the workflow by
importing functions and classes from specialized modules.
"""

import argparse
import json
from datetime import datetime

# Import from modules
from activity_summary.models import AveragePolicy, TimeRange
from activity_summary.data_loader import load_record_store
from activity_summary.aggregator import compute_snapshot
from activity_summary.reporter import (
    print_snapshot,
    print_activity_breakdown,
    generate_json_output
)


# =============================================================================
# CLI INTERFACE
# =============================================================================

def parse_now(value: str) -> datetime:
    """argparse type for the --now reference instant."""
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid reference instant '{value}'. Use ISO 8601, e.g. 2024-03-15T18:00"
        )


def create_parser():
    """Create and return the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='Personal Activity Summary',
        description='Summarizes step logs and activity sessions over a time window.',
        epilog='Example: python -m activity_summary.main --steps data/steps.json --activities data/activities.json --range month --show-breakdown',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--steps',
        type=str,
        default='data/steps.json',
        help='Path to step log JSON file (default: data/steps.json)'
    )

    parser.add_argument(
        '--activities',
        type=str,
        default='data/activities.json',
        help='Path to activity log JSON file (default: data/activities.json)'
    )

    parser.add_argument(
        '--range',
        dest='time_range',
        choices=[r.value for r in TimeRange],
        default=TimeRange.WEEK.value,
        help='Time window to summarize (default: week)'
    )

    parser.add_argument(
        '--now',
        type=parse_now,
        default=None,
        help='Reference instant in ISO 8601 (default: current local time)'
    )

    parser.add_argument(
        '--average-policy',
        choices=[p.value for p in AveragePolicy],
        default=AveragePolicy.NOMINAL.value,
        help='Averaging denominator: nominal period length or elapsed days (default: nominal)'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail on the first invalid record instead of skipping it (default: False)'
    )

    parser.add_argument(
        '--estimate-missing',
        action='store_true',
        help='Estimate missing calories / distance from step counts (default: False)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the summary as JSON instead of text (default: False)'
    )

    parser.add_argument(
        '--show-breakdown',
        action='store_true',
        help='Show activity counts per type (default: False)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show all outputs (summary and breakdown)'
    )

    return parser


def main(argv=None):
    """Main entry point for the application."""
    parser = create_parser()
    args = parser.parse_args(argv)
    now = args.now or datetime.now()
    chatty = not args.json

    if chatty:
        print("\nPersonal Activity Summary")
        print("=" * 70)

    try:
        # Load data
        if chatty:
            print("\nLoading data...")
        store = load_record_store(
            args.steps,
            args.activities,
            strict=args.strict,
            estimate_missing=args.estimate_missing
        )
        if chatty:
            print(f"  Loaded {len(store.get_all_metric_records())} daily step records")
            print(f"  Loaded {len(store.get_all_activity_records())} activity records")

        snapshot = compute_snapshot(
            store,
            TimeRange(args.time_range),
            now,
            AveragePolicy(args.average_policy)
        )

        if args.json:
            print(json.dumps(generate_json_output(snapshot, now), indent=2))
            return 0

        print_snapshot(snapshot)

        # Show breakdown if requested
        if args.verbose or args.show_breakdown:
            print_activity_breakdown(snapshot)

        print("\n" + "=" * 70)
        print("Summary complete!")
        print("=" * 70 + "\n")

    except FileNotFoundError as e:
        print(f"\nFile Error: {e}", flush=True)
        print("   Check that the input files exist and paths are correct.\n", flush=True)
        return 1
    except (KeyError, TypeError) as e:
        print(f"\nData Structure Error: {e}", flush=True)
        print("   The JSON file structure is invalid.", flush=True)
        print("   Step data must contain 'step_logs' key, activity data must contain 'activity_logs' key.\n", flush=True)
        return 1
    except ValueError as e:
        print(f"\nData Validation Error: {e}", flush=True)
        print("   Check your input data for invalid values, missing fields, or incorrect formats.\n", flush=True)
        return 1
    except Exception as e:
        print(f"\nUnexpected error: {e}\n", flush=True)
        return 1

    return 0


if __name__ == '__main__':
    exit(main())
