"""
Retroactive achievement awarding script.

Runs an achievement pass for every active user, so users who already
qualify for newly added catalog entries receive them.
Run with: python -m scripts.retroactive_achievements
"""

import asyncio

from scripts._common import script_repositories
from services.achievement_service import AchievementService
from services.stats_service import StatsService


async def award_retroactive_achievements() -> int:
    """Award achievements to all active users; returns the number granted."""
    async with script_repositories() as repos:
        user_ids = await repos.users.list_active_ids()

        print(f"Found {len(user_ids)} user(s) to process")
        print("=" * 50)

        stats_service = StatsService(repos)
        service = AchievementService(repos, stats_service=stats_service)
        total_awarded = 0

        for user_id in user_ids:
            stats = await stats_service.get_user_stats(user_id)
            print(f"\nProcessing user: {user_id}")
            print(f"  - Total points: {stats.total_points}")
            print(f"  - Uploads: {stats.upload_count}")
            print(f"  - Collections: {stats.collection_count}")
            print(f"  - Consecutive days: {stats.consecutive_days}")

            awarded = await service.check_achievements(user_id)
            if awarded:
                total_awarded += len(awarded)
                print(f"  Awarded: {[a.title for a in awarded]}")
            else:
                print("  No new achievements to award")

        print("\n" + "=" * 50)
        print(f"Done! Awarded {total_awarded} achievement(s) across {len(user_ids)} user(s)")
        return total_awarded


if __name__ == "__main__":
    asyncio.run(award_retroactive_achievements())
