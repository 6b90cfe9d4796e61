"""
Profile store: identity records, the current-profile pointer and the single
sanctioned XP/level update path.

Core rules:
  - usernames are unique case-insensitively
  - level == xp // XP_PER_LEVEL + 1, recomputed only by apply_xp
  - reset/delete cascade to every registered dependent store via purge()
"""
import uuid
from typing import Callable, Optional, Protocol, Type

from pydantic import BaseModel

from faithverse.core.clock import Clock
from faithverse.core.config import XP_PER_LEVEL
from faithverse.core.exceptions import DuplicateUsername, NotFound, ProtectedField
from faithverse.core.logging import get_logger
from faithverse.profiles.models import (
    Badge, Preferences, Profile, ProfileCreate, ProfileStats, Rarity, empty_play_counts,
)
from faithverse.scores.models import ModuleType
from faithverse.storage.adapter import KeyValueStore
from faithverse.storage.records import load_records, save_records

logger = get_logger(__name__)

PROFILES_KEY = "faithverse_profiles"
CURRENT_PROFILE_KEY = "faithverse_current_profile"

# Only the engine writes these: apply_xp for xp/level, the score ledger for
# play counts and total score, the achievement hooks for achievements/badges.
PROTECTED_FIELDS = {
    "id", "xp", "level", "joined_at",
    "games_played", "total_score", "achievements", "badges",
}

# Nested blocks merged key-by-key on update instead of replaced wholesale
_NESTED_MODELS: dict[str, Type[BaseModel]] = {
    "preferences": Preferences,
    "stats": ProfileStats,
}


class ProfileDependent(Protocol):
    """Anything holding records scoped to a profile id."""

    def purge(self, profile_id: str) -> None: ...


def level_for_xp(xp: int) -> int:
    return max(xp, 0) // XP_PER_LEVEL + 1


def new_profile_id() -> str:
    return f"user_{uuid.uuid4().hex}"


def _field_names(model: Type[BaseModel], data: dict) -> dict:
    """Map camelCase aliases onto field names, leaving unknown keys alone."""
    by_alias = {f.alias: name for name, f in model.model_fields.items() if f.alias}
    return {by_alias.get(key, key): value for key, value in data.items()}


class ProfileStore:
    def __init__(self, store: KeyValueStore, clock: Clock):
        self.store = store
        self.clock = clock
        self._dependents: list[ProfileDependent] = []

    def register_dependent(self, dependent: ProfileDependent) -> None:
        self._dependents.append(dependent)

    # ------------------------------------------------------------------
    # READS (never raise for absence)
    # ------------------------------------------------------------------

    def list_all(self) -> list[Profile]:
        return load_records(self.store, PROFILES_KEY, Profile)

    def get(self, profile_id: str) -> Optional[Profile]:
        return next((p for p in self.list_all() if p.id == profile_id), None)

    def get_current(self) -> Optional[Profile]:
        current_id = self.store.get(CURRENT_PROFILE_KEY)
        if not current_id:
            return None
        return self.get(current_id)

    def current_id(self) -> Optional[str]:
        return self.store.get(CURRENT_PROFILE_KEY) or None

    def find_by_username(self, username: str) -> Optional[Profile]:
        wanted = username.strip().casefold()
        return next((p for p in self.list_all() if p.username.casefold() == wanted), None)

    # ------------------------------------------------------------------
    # IDENTITY
    # ------------------------------------------------------------------

    def create(self, data: ProfileCreate) -> Profile:
        username = data.username.strip()
        profiles = self.list_all()
        if any(p.username.casefold() == username.casefold() for p in profiles):
            raise DuplicateUsername(username)

        now = self.clock.now()
        profile = Profile(
            id=new_profile_id(),
            username=username,
            display_name=(data.display_name or "").strip() or username,
            avatar=data.avatar,
            email=data.email,
            preferences=data.preferences,
            joined_at=now,
            last_active=now,
        )
        profiles.append(profile)
        save_records(self.store, PROFILES_KEY, profiles)
        self.store.set(CURRENT_PROFILE_KEY, profile.id)
        logger.info(f"[PROFILE] created id={profile.id} username='{username}'")
        return profile

    def add_existing(self, profile: Profile) -> Profile:
        """Append an already-built profile (import). Username must be free."""
        profiles = self.list_all()
        if any(p.username.casefold() == profile.username.casefold() for p in profiles):
            raise DuplicateUsername(profile.username)
        profiles.append(profile)
        save_records(self.store, PROFILES_KEY, profiles)
        return profile

    def update(self, profile_id: str, fields: dict) -> Profile:
        """Merge partial fields into a profile. Always refreshes last_active."""
        changes = _field_names(Profile, fields)
        protected = PROTECTED_FIELDS & changes.keys()
        if protected:
            raise ProtectedField(list(protected))

        if "username" in changes:
            username = str(changes["username"]).strip()
            other = self.find_by_username(username)
            if other is not None and other.id != profile_id:
                raise DuplicateUsername(username)
            changes["username"] = username

        def apply(profile: Profile) -> Profile:
            merged = profile.model_dump()
            for name, value in changes.items():
                nested = _NESTED_MODELS.get(name)
                if nested is not None and isinstance(value, dict):
                    merged[name] = {**merged[name], **_field_names(nested, value)}
                else:
                    merged[name] = value
            merged["last_active"] = self.clock.now()
            return Profile.model_validate(merged)

        return self._mutate(profile_id, apply)

    def sign_in(self, username: str) -> Profile:
        profile = self.find_by_username(username)
        if profile is None:
            raise NotFound("Profile", username)
        self.store.set(CURRENT_PROFILE_KEY, profile.id)
        logger.info(f"[PROFILE] signed in id={profile.id}")
        return self.touch(profile.id)

    def sign_out(self) -> None:
        self.store.remove(CURRENT_PROFILE_KEY)

    def switch_current(self, profile_id: str) -> Profile:
        """Point the current-profile pointer at another stored profile."""
        profile = self.get(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        self.store.set(CURRENT_PROFILE_KEY, profile_id)
        logger.info(f"[PROFILE] switched current -> {profile_id}")
        return profile

    def touch(self, profile_id: str) -> Profile:
        now = self.clock.now()
        return self._mutate(profile_id, lambda p: p.model_copy(update={"last_active": now}))

    # ------------------------------------------------------------------
    # PROGRESSION
    # ------------------------------------------------------------------

    def apply_xp(self, profile_id: str, delta: int) -> Profile:
        now = self.clock.now()

        def apply(profile: Profile) -> Profile:
            xp = max(0, profile.xp + delta)
            return profile.model_copy(update={"xp": xp, "level": level_for_xp(xp), "last_active": now})

        before = self.get(profile_id)
        updated = self._mutate(profile_id, apply)
        if before is not None and updated.level != before.level:
            logger.info(f"[LEVEL] profile={profile_id} {before.level} -> {updated.level} (xp={updated.xp})")
        return updated

    def increment_play_count(self, profile_id: str, module_type: ModuleType, score: int = 0) -> Profile:
        def apply(profile: Profile) -> Profile:
            counts = {**empty_play_counts(), **profile.games_played}
            counts[module_type.value] = counts.get(module_type.value, 0) + 1
            best = max(profile.total_score, score, 0)
            return profile.model_copy(update={"games_played": counts, "total_score": best})

        return self._mutate(profile_id, apply)

    def record_stat(self, profile_id: str, stat: str, amount: int = 1) -> Profile:
        if stat not in ProfileStats.model_fields:
            raise ValueError(f"Unknown stat: {stat}")

        def apply(profile: Profile) -> Profile:
            value = max(0, getattr(profile.stats, stat) + amount)
            stats = profile.stats.model_copy(update={stat: value})
            return profile.model_copy(update={"stats": stats})

        return self._mutate(profile_id, apply)

    def unlock_achievement(self, profile_id: str, achievement_id: str) -> bool:
        """Returns True if newly unlocked, False if the profile already had it."""
        profile = self.get(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        if achievement_id in profile.achievements:
            return False
        self._mutate(profile_id, lambda p: p.model_copy(
            update={"achievements": [*p.achievements, achievement_id]}))
        logger.info(f"[ACHIEVEMENT] profile={profile_id} earned '{achievement_id}'")
        return True

    def award_badge(self, profile_id: str, badge_id: str, name: str = "", rarity: Rarity = Rarity.COMMON) -> bool:
        profile = self.get(profile_id)
        if profile is None:
            raise NotFound("Profile", profile_id)
        if any(b.id == badge_id for b in profile.badges):
            return False
        badge = Badge(id=badge_id, name=name, rarity=rarity, unlocked_at=self.clock.now())
        self._mutate(profile_id, lambda p: p.model_copy(update={"badges": [*p.badges, badge]}))
        logger.info(f"[BADGE] profile={profile_id} earned '{badge_id}' ({rarity.value})")
        return True

    # ------------------------------------------------------------------
    # RESET / DELETE
    # ------------------------------------------------------------------

    def reset_progress(self, profile_id: str) -> Profile:
        """Clear progression but keep identity and preferences."""
        now = self.clock.now()

        def apply(profile: Profile) -> Profile:
            return profile.model_copy(update={
                "xp": 0,
                "level": 1,
                "total_score": 0,
                "games_played": empty_play_counts(),
                "achievements": [],
                "badges": [],
                "stats": ProfileStats(),
                "last_active": now,
            })

        profile = self._mutate(profile_id, apply)
        self._purge_dependents(profile_id)
        logger.info(f"[PROFILE] progress reset id={profile_id}")
        return profile

    def delete(self, profile_id: str) -> None:
        profiles = self.list_all()
        remaining = [p for p in profiles if p.id != profile_id]
        if len(remaining) == len(profiles):
            raise NotFound("Profile", profile_id)

        save_records(self.store, PROFILES_KEY, remaining)
        self._purge_dependents(profile_id)

        if self.store.get(CURRENT_PROFILE_KEY) == profile_id:
            self.store.remove(CURRENT_PROFILE_KEY)
        logger.info(f"[PROFILE] deleted id={profile_id}")

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _purge_dependents(self, profile_id: str) -> None:
        for dependent in self._dependents:
            dependent.purge(profile_id)

    def _mutate(self, profile_id: str, change: Callable[[Profile], Profile]) -> Profile:
        profiles = self.list_all()
        for index, profile in enumerate(profiles):
            if profile.id == profile_id:
                profiles[index] = change(profile)
                save_records(self.store, PROFILES_KEY, profiles)
                return profiles[index]
        raise NotFound("Profile", profile_id)
