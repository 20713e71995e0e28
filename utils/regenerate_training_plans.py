# This script regenerates training plans for assessed players whose plan
# never arrived (failed job, lost request) and stores them on their profile
#
# Usage: python -m utils.regenerate_training_plans [--limit N] [--dry-run]

import argparse
import logging

from training.assessment import AssessmentValidationError
from utils import db
from utils.formatting import format_rating
from utils.plan_jobs import generate_training_plan_for_user

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(description="Regenerate missing training plans")
    parser.add_argument("--limit", type=int, default=100, help="Maximum number of profiles to process")
    parser.add_argument("--dry-run", action="store_true", help="List profiles without writing plans")
    return parser


def regenerate_missing_plans(limit=100, dry_run=False):
    """Regenerate plans for assessed profiles without a training program.

    Returns a dict with counts for regenerated, skipped and failed profiles.
    """
    profiles = db.get_profiles_missing_plan(limit=limit)
    summary = {"found": len(profiles), "regenerated": 0, "skipped": 0, "failed": 0}

    for profile in profiles:
        user_id = profile.get("id")
        if dry_run:
            print(f"Would regenerate plan for {user_id} (rating {format_rating(profile.get('displayed_rating'))})")
            continue

        try:
            plan = generate_training_plan_for_user(user_id, profile)
        except AssessmentValidationError as e:
            # Incomplete stored answers, the player has to reassess
            logger.warning(f"Skipping {user_id}: {e}")
            summary["skipped"] += 1
            continue
        except db.PersistenceError as e:
            logger.error(f"Failed to regenerate plan for {user_id}: {e}")
            summary["failed"] += 1
            continue

        summary["regenerated"] += 1
        print(f"Regenerated plan for {user_id}: {', '.join(plan.top_three_focus_areas)}")

    return summary


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    try:
        summary = regenerate_missing_plans(limit=args.limit, dry_run=args.dry_run)
    except db.SupabaseConfigError as e:
        print(f"Please set Supabase credentials as environment variables. ({e})")
        return 1
    except db.PersistenceError as e:
        print(f"Could not load profiles: {e}")
        return 1

    if not summary["found"]:
        print("No assessed profiles without a training plan.")
        return 0

    print(
        f"Profiles: {summary['found']}, regenerated: {summary['regenerated']}, "
        f"skipped: {summary['skipped']}, failed: {summary['failed']}"
    )
    return 0 if summary["failed"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
