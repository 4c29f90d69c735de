"""
wonbyte-progress - inspect and manage a learner's stored progress.

Usage:
  wonbyte-progress summary                     # Totals, streak, level, goal
  wonbyte-progress weekly                      # Last 7 days of activity
  wonbyte-progress usage                       # Storage used
  wonbyte-progress export --output backup.json # Dump every ledger as JSON
  wonbyte-progress clear --yes                 # Erase all progress
  wonbyte-progress --db ./progress.db --namespace minji summary
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from wonbyte.config import configure_logging, load_settings
from wonbyte.ledger import SQLiteStore, StorageKey, StudyCoordinator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wonbyte-progress",
        description="Inspect and manage stored learning progress",
    )
    parser.add_argument("--db", type=Path, help="Progress database (default: from settings)")
    parser.add_argument("--namespace", help="Learner namespace (default: from settings)")
    parser.add_argument("--log-level", help="Logging level (default: from settings)")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("summary", help="Show totals, streak, level and today's goal")
    sub.add_parser("weekly", help="Show the last 7 days of activity")
    sub.add_parser("usage", help="Show storage used by this learner")

    export = sub.add_parser("export", help="Write every ledger as one JSON document")
    export.add_argument("--output", type=Path, help="Output file (default: stdout)")

    clear = sub.add_parser("clear", help="Erase all stored progress")
    clear.add_argument("--yes", action="store_true", help="Confirm erasing")
    return parser


def cmd_summary(coordinator: StudyCoordinator) -> int:
    s = coordinator.summary()
    print(f"Nickname:        {s.profile.nickname or '-'} ({s.profile.grade_level.value})")
    print(f"Sessions:        {s.stats.total_sessions} ({s.stats.total_time} min)")
    print(f"Texts read:      {s.stats.texts_read}")
    print(f"Problems:        {s.stats.correct_answers}/{s.stats.problems_solved} ({s.stats.accuracy_rate}%)")
    print(f"Streak:          {s.stats.weekly_streak} day(s)")
    print(f"Vocabulary:      {s.vocabulary_count} saved, {s.unmastered_count} to review")
    print(f"Wrong answers:   {s.unsolved_count} unsolved")
    print(f"Bookmarks:       {s.bookmark_count}")
    print(f"Level:           {s.game.level} ({s.game.exp} exp, {s.game.points} points)")
    print(f"Badges:          {', '.join(s.game.badges) or '-'}")
    print(f"Today's goal:    {s.today.time}/{s.profile.daily_goal} min ({s.daily_goal_percent}%)")
    return 0


def cmd_weekly(coordinator: StudyCoordinator) -> int:
    print(f"{'date':<12}{'day':<4}{'min':>5}{'texts':>7}{'probs':>7}{'right':>7}{'words':>7}")
    for d in coordinator.stats.get_weekly_stats():
        print(f"{d.date:<12}{d.day:<4}{d.time:>5}{d.texts:>7}{d.problems:>7}{d.correct:>7}{d.vocabulary:>7}")
    return 0


def cmd_export(coordinator: StudyCoordinator, output: Optional[Path]) -> int:
    document = {
        key.value: coordinator.store.load(key)
        for key in StorageKey
    }
    text = json.dumps(document, ensure_ascii=False, indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        logger.info(f"Exported progress to {output}")
    else:
        print(text)
    return 0


def cmd_clear(coordinator: StudyCoordinator, confirmed: bool) -> int:
    if not confirmed:
        print("Refusing to erase progress without --yes", file=sys.stderr)
        return 1
    return 0 if coordinator.reset_all() else 1


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    store = SQLiteStore(args.db or settings.db_path, namespace=args.namespace or settings.namespace)
    coordinator = StudyCoordinator(store=store)

    if args.command == "summary":
        return cmd_summary(coordinator)
    if args.command == "weekly":
        return cmd_weekly(coordinator)
    if args.command == "usage":
        print(store.format_usage())
        return 0
    if args.command == "export":
        return cmd_export(coordinator, args.output)
    return cmd_clear(coordinator, args.yes)


if __name__ == "__main__":
    sys.exit(main())
