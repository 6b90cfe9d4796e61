"""
Maintenance script: recompute every profile's level from its xp.

Level is always xp // XP_PER_LEVEL + 1. Run this after changing
XP_PER_LEVEL or after hand-editing stored profiles.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from faithverse.core.container import ProgressEngine
from faithverse.db.base import SessionLocal
from faithverse.profiles.service import level_for_xp
from faithverse.storage.adapter import SqlKeyValueStore


def recompute_levels():
    db = SessionLocal()

    try:
        engine = ProgressEngine(SqlKeyValueStore(db))
        profiles = engine.profiles.list_all()
        print(f"Found {len(profiles)} profiles to check", flush=True)

        fixed = 0
        for profile in profiles:
            expected = level_for_xp(profile.xp)
            if profile.level == expected:
                continue
            # apply_xp with a zero delta re-derives the level
            engine.profiles.apply_xp(profile.id, 0)
            print(f"  {profile.username}: level {profile.level} -> {expected} (xp={profile.xp})", flush=True)
            fixed += 1

        print(f"\n✅ Recompute complete! {fixed} profile(s) updated.", flush=True)

    except Exception as e:
        db.rollback()
        print(f"❌ Error during recompute: {e}", flush=True)
        raise
    finally:
        db.close()


if __name__ == "__main__":
    recompute_levels()
