#!/usr/bin/env python3
"""
Command-line host for the vocabulary trainer.

Usage:
    python -m app.cli import abandon superfluous --enrich
    python -m app.cli import --backup words.json
    python -m app.cli due
    python -m app.cli delete abandon
    python -m app.cli study --size 20
    python -m app.cli study --all --cram
    python -m app.cli stats
    python -m app.cli reset --yes
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Optional

from dotenv import load_dotenv

from app.session_controller import StudyController
from core import store
from core.analytics import DEFAULT_DAILY_GOAL, DIFFICULTY_LABELS, word_difficulty_band, word_freshness
from core.analytics.metrics import daily_accuracy
from core.analytics.queries import load_review_events_df
from core.enrichment import EnrichmentCache, EnrichmentRunner
from core.errors import CorruptPersistedStateError, EmptySelectionError
from core.schemas import Word
from core.session import progress_percent
from core.srs import Judgment
from core.srs.constants import BATCH_SIZE_OPTIONS, DEFAULT_BATCH_SIZE

load_dotenv()

JUDGMENT_KEYS = {
    "1": Judgment.FORGOT,
    "2": Judgment.UNCERTAIN,
    "3": Judgment.MASTERED,
}

PROMPT = "[1] forgot  [2] unsure  [3] got it  [q] pause  [x] exit > "


def get_daily_goal() -> int:
    raw = os.getenv("DAILY_GOAL")
    if not raw:
        return DEFAULT_DAILY_GOAL
    try:
        goal = int(raw)
    except ValueError:
        raise ValueError(f"DAILY_GOAL must be an integer, got {raw!r}")
    return goal if goal > 0 else DEFAULT_DAILY_GOAL


def format_card(word: Word) -> str:
    lines = [f"  {word.term}  {word.phonetic or ''}".rstrip()]
    for meaning in word.meanings:
        lines.append(f"    {meaning.part_of_speech} {meaning.definition}".rstrip())
        if meaning.example:
            lines.append(f"      e.g. {meaning.example}")
    if word.mnemonic:
        lines.append(f"    ({word.mnemonic})")
    return "\n".join(lines)


# ---- Commands ----

def cmd_import(controller: StudyController, args) -> int:
    if args.backup:
        with open(args.backup, encoding="utf-8") as f:
            raw = f.read()
        try:
            records = store.parse_words(raw)
        except CorruptPersistedStateError as exc:
            print(f"⚠ Backup is not a valid word list: {exc.reason.splitlines()[0]}")
            return 1
        added = controller.merge_backup(records)
        print(f"✓ Merged {len(added)} words from backup")
        return 0

    terms = list(args.terms)
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            terms.extend(line.strip() for line in f)

    if not args.enrich:
        created = controller.import_terms(terms)
        print(f"✓ Imported {len(created)} new words")
        return 0

    cache = EnrichmentCache()
    with EnrichmentRunner(cache) as runner:
        created = controller.import_terms(terms, runner=runner)
        print(f"✓ Imported {len(created)} new words, enriching in background...")
    updated = controller.apply_enrichment(cache)
    print(f"✓ Enriched {updated} words")
    if runner.failures:
        print(f"⚠ Enrichment failed for: {', '.join(sorted(runner.failures))}")
    return 0


def cmd_due(controller: StudyController, args) -> int:
    due = controller.due()
    print(f"{len(due)} words due")
    for word in due[:args.limit]:
        freshness = word_freshness(word, controller.now)
        print(f"  {word.term:<24} {word.status.value:<9} interval={word.interval} fresh={freshness:.0f}%")
    return 0


def cmd_delete(controller: StudyController, args) -> int:
    word = controller.find_word(args.term)
    if word is None:
        print(f"No word matching '{args.term}'")
        return 1
    controller.delete_word(word.id)
    print(f"✓ Deleted '{word.term}'")
    return 0


def run_study(
    controller: StudyController,
    read: Callable[[str], str] = input
) -> Optional[bool]:
    """
    Drive the active session interactively.

    Returns:
        True when the session finished, False when paused, None when exited
    """
    while controller.is_active:
        word = controller.current_word()
        if word is None:
            break
        state = controller.session
        print(f"\n[{state.initial_count - state.remaining_count}/{state.initial_count}] "
              f"{progress_percent(state):.0f}%")
        print(f"  {word.term}  {word.phonetic or ''}".rstrip())

        key = read(PROMPT).strip().lower()
        if key == "q":
            print("Paused. Run `study` again to resume.")
            return False
        if key == "x":
            controller.exit()
            print("Session discarded.")
            return None
        if key not in JUDGMENT_KEYS:
            print("Please press 1, 2, 3, q or x.")
            continue

        controller.judge(JUDGMENT_KEYS[key])
        print(format_card(word))

    print(f"\n✓ Session complete. Points: {controller.points.balance}")
    return True


def cmd_study(controller: StudyController, args) -> int:
    try:
        if args.again:
            controller.review_again(cram=True)
        elif args.next:
            controller.continue_next_batch(size=args.size)
        elif controller.is_active and not (args.size or args.all):
            print(f"Resuming session ({controller.session.remaining_count} left)")
        elif args.all:
            controller.start(word_ids=[w.id for w in controller.words], cram=args.cram)
        else:
            controller.start(count=args.size or DEFAULT_BATCH_SIZE, cram=args.cram)
    except EmptySelectionError as exc:
        print(str(exc))
        return 1

    run_study(controller)
    return 0


def cmd_stats(controller: StudyController, args) -> int:
    data = controller.dashboard(args.goal or get_daily_goal())
    print(f"Today:   {data.today_count}/{data.daily_goal} ({data.goal_progress_percent:.0f}%)")
    print(f"Streak:  {data.streak_days} days")
    print(f"Words:   {data.total_words} ({data.due_count} due)")
    print(f"Points:  {controller.points.balance}")
    for status, count in data.status_counts.items():
        print(f"  {status:<9} {count}")

    bands = {}
    for word in controller.words:
        label = DIFFICULTY_LABELS[word_difficulty_band(word.ease_factor)]
        bands[label] = bands.get(label, 0) + 1
    if bands:
        print("Difficulty: " + ", ".join(f"{label} {n}" for label, n in bands.items()))

    accuracy = daily_accuracy(load_review_events_df(), int(Judgment.MASTERED))
    if not accuracy.empty:
        print("Recent accuracy:")
        for day, share in accuracy.tail(7).items():
            print(f"  {day.date().isoformat()} {share * 100:.0f}%")
    return 0


def cmd_reset(controller: StudyController, args) -> int:
    if not args.yes:
        print("This deletes every word, the session, history and points. Re-run with --yes.")
        return 1
    controller.clear_all()
    print("✓ All data cleared")
    return 0


# ---- Entry Point ----

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Spaced-repetition vocabulary trainer")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Add words to the collection")
    p_import.add_argument("terms", nargs="*", help="Words to add")
    p_import.add_argument("--file", help="Text file with one word per line")
    p_import.add_argument("--enrich", action="store_true", help="Fetch meanings with AI")
    p_import.add_argument("--backup", help="JSON word list to merge (existing words are kept)")
    p_import.set_defaults(func=cmd_import)

    p_due = sub.add_parser("due", help="List words due for review")
    p_due.add_argument("--limit", type=int, default=DEFAULT_BATCH_SIZE)
    p_due.set_defaults(func=cmd_due)

    p_delete = sub.add_parser("delete", help="Remove a word by term")
    p_delete.add_argument("term")
    p_delete.set_defaults(func=cmd_delete)

    p_study = sub.add_parser("study", help="Start or resume a study session")
    group = p_study.add_mutually_exclusive_group()
    group.add_argument("--size", type=int, help=f"Batch size (e.g. {', '.join(map(str, BATCH_SIZE_OPTIONS))})")
    group.add_argument("--all", action="store_true", help="Every word in the collection")
    group.add_argument("--again", action="store_true", help="Replay the last batch shuffled")
    p_study.add_argument("--next", action="store_true", help="Continue with the next due batch")
    p_study.add_argument("--cram", action="store_true", help="Shuffle; by size, pick from all words")
    p_study.set_defaults(func=cmd_study)

    p_stats = sub.add_parser("stats", help="Show progress")
    p_stats.add_argument("--goal", type=int, help="Daily goal (defaults to DAILY_GOAL)")
    p_stats.set_defaults(func=cmd_stats)

    p_reset = sub.add_parser("reset", help="Delete all data")
    p_reset.add_argument("--yes", action="store_true")
    p_reset.set_defaults(func=cmd_reset)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    controller = StudyController()
    return args.func(controller, args)


if __name__ == "__main__":
    sys.exit(main())
