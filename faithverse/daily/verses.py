"""
Verse of the day, one record per (profile, day).

Selection is deterministic: the day's ordinal picks from the catalog, so every
profile sees the same verse on the same day.
"""
from datetime import date

from faithverse.core.clock import Clock, day_stamp
from faithverse.core.logging import get_logger
from faithverse.daily.models import DailyVerse
from faithverse.daily.scheduler import DAILY_VERSE_CHALLENGE, DailyScheduler
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import load_record, save_record

logger = get_logger(__name__)

VERSE_KEY_PREFIX = "faithverse_daily_verse_"

VERSE_CATALOG = [
    {
        "verse": "For God so loved the world that he gave his one and only Son, "
                 "that whoever believes in him shall not perish but have eternal life.",
        "reference": "John 3:16",
    },
    {
        "verse": "Trust in the Lord with all your heart and lean not on your own understanding.",
        "reference": "Proverbs 3:5",
    },
    {
        "verse": "I can do all things through Christ who strengthens me.",
        "reference": "Philippians 4:13",
    },
    {
        "verse": "The Lord is my shepherd, I lack nothing.",
        "reference": "Psalm 23:1",
    },
    {
        "verse": "Be strong and courageous. Do not be afraid; do not be discouraged, "
                 "for the Lord your God will be with you wherever you go.",
        "reference": "Joshua 1:9",
    },
]


def verse_key(profile_id: str) -> str:
    return f"{VERSE_KEY_PREFIX}{profile_id}"


def verse_for_day(day: date) -> DailyVerse:
    pick = VERSE_CATALOG[day.toordinal() % len(VERSE_CATALOG)]
    stamp = day_stamp(day)
    return DailyVerse(id=f"verse_{stamp}", date=stamp, **pick)


class DailyVerseService:
    def __init__(self, store: KeyValueStore, clock: Clock, scheduler: DailyScheduler):
        self.store = store
        self.clock = clock
        self.scheduler = scheduler

    def get_today(self, profile_id: str, today: date | None = None) -> DailyVerse:
        today = today or self.clock.today()
        stored = load_record(self.store, verse_key(profile_id), DailyVerse)
        if stored is not None and stored.date == day_stamp(today):
            return stored

        verse = verse_for_day(today)
        save_record(self.store, verse_key(profile_id), verse)
        return verse

    def mark_completed(self, profile_id: str, completed: bool, memorized: bool = False) -> DailyVerse:
        """Record today's verse as read/memorized and update the daily_verse challenge."""
        today = self.clock.today()
        verse = self.get_today(profile_id, today).model_copy(
            update={"completed": completed, "memorized": memorized})
        save_record(self.store, verse_key(profile_id), verse)

        self.scheduler.update_challenge(profile_id, DAILY_VERSE_CHALLENGE, completed, today=today)
        logger.info(f"[DAILY] profile={profile_id} verse={verse.reference} "
                    f"completed={completed} memorized={memorized}")
        return verse

    def purge(self, profile_id: str) -> None:
        self.store.remove(verse_key(profile_id))
