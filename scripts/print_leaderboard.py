#!/usr/bin/env python3
"""
Print the challenge leaderboards to the console.

Reads activity records from a JSON file, or fetches them from the activities
feed when no file is given, and logs the athlete and team rankings.

Usage:
    python scripts/print_leaderboard.py
    python scripts/print_leaderboard.py --file activities.json --metric raw
    python scripts/print_leaderboard.py --period secondWeek
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx
from loguru import logger

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.activities.client import ActivitiesClient
from src.activities.exceptions import ActivitiesApiError
from src.challenge.exceptions import ChallengeException
from src.challenge.schemas import ChallengeLeaderboards
from src.challenge.service import challenge_service
from src.config import get_settings

# Configure logger
logger.remove()
logger.add(sys.stdout, format="<level>{message}</level>", level="INFO")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--file", type=Path, help="JSON file with activity records")
    parser.add_argument("--metric", choices=("capped", "raw"), default="capped")
    parser.add_argument("--period", choices=("firstWeek", "secondWeek"))
    return parser.parse_args()


async def load_leaderboards(args: argparse.Namespace) -> ChallengeLeaderboards:
    if args.file:
        records = json.loads(args.file.read_text())
        if args.period:
            return challenge_service.build_weekly_leaderboards(records, args.metric)
        return challenge_service.build_leaderboards(records, args.metric)

    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.ACTIVITIES_API_TIMEOUT) as http:
        client = ActivitiesClient(http, settings.ACTIVITIES_API_URL)
        if args.period:
            groups = await client.fetch_weekly_challenge(args.period)
            return challenge_service.build_weekly_leaderboards(groups, args.metric)
        records = await client.fetch_activities()
        return challenge_service.build_leaderboards(records, args.metric)


def print_leaderboards(leaderboards: ChallengeLeaderboards) -> None:
    summary = leaderboards.summary
    logger.info(f"Ranking metric: {leaderboards.metric}")
    logger.info(
        f"{summary.total_activities} activities, {summary.total_athletes} athletes, "
        f"{summary.total_teams} teams, {summary.total_distance / 1000:.2f} km"
    )

    logger.info("\nAthletes")
    logger.info("=" * 72)
    for athlete in leaderboards.athletes:
        logger.info(
            f"{athlete.rank:>3}. {athlete.name:<28} {athlete.team:<12} "
            f"{athlete.capped_distance_km:>8.2f} km capped "
            f"{athlete.total_distance_km:>8.2f} km total"
        )

    logger.info("\nTeams")
    logger.info("=" * 72)
    for team in leaderboards.teams:
        logger.info(
            f"{team.rank:>3}. {team.name:<20} {team.member_count:>3} members "
            f"{team.capped_distance_km:>8.2f} km capped "
            f"{team.total_distance_km:>8.2f} km total"
        )


async def main() -> int:
    args = parse_args()
    try:
        leaderboards = await load_leaderboards(args)
    except (ActivitiesApiError, ChallengeException) as e:
        logger.error(f"Could not build leaderboards: {e}")
        return 1

    print_leaderboards(leaderboards)
    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
