"""
Wires every engine component over one store and one clock.
"""
from typing import Optional

from faithverse.core.clock import Clock
from faithverse.daily.scheduler import DailyScheduler
from faithverse.daily.streak import QuizStreakTracker
from faithverse.daily.verses import DailyVerseService
from faithverse.leaderboard.ranker import LeaderboardRanker
from faithverse.profiles.service import ProfileStore
from faithverse.scores.ledger import ScoreLedger
from faithverse.storage.adapter import KeyValueStore
from faithverse.stories.tracker import StoryTracker
from faithverse.sync.client import CloudSyncClient
from faithverse.transfer.service import TransferService


class ProgressEngine:
    def __init__(self, store: KeyValueStore, clock: Optional[Clock] = None):
        self.store = store
        self.clock = clock or Clock()

        self.profiles = ProfileStore(store, self.clock)
        self.streaks = QuizStreakTracker(store, self.clock)
        self.daily = DailyScheduler(store, self.clock, self.streaks)
        self.verses = DailyVerseService(store, self.clock, self.daily)
        self.scores = ScoreLedger(store, self.clock, self.profiles)
        self.stories = StoryTracker(store, self.clock, self.profiles)
        self.leaderboard = LeaderboardRanker(self.profiles, self.clock)
        self.transfer = TransferService(self.clock, self.profiles, self.scores, self.stories)
        self.sync = CloudSyncClient(self.transfer)

        # Reset and delete cascade to these in registration order
        for dependent in (self.scores, self.stories, self.daily, self.verses):
            self.profiles.register_dependent(dependent)
