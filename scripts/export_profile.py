"""
Export one profile with its score events and story progress.

Usage:
    python scripts/export_profile.py <username> [out.json]

Without an output path the document is printed to stdout.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from faithverse.core.container import ProgressEngine
from faithverse.db.base import SessionLocal
from faithverse.storage.adapter import SqlKeyValueStore


def export_profile(username: str, out_path: str | None = None) -> int:
    db = SessionLocal()

    try:
        engine = ProgressEngine(SqlKeyValueStore(db))
        profile = engine.profiles.find_by_username(username)
        if profile is None:
            print(f"❌ No profile with username '{username}'", file=sys.stderr, flush=True)
            return 1

        payload = engine.transfer.export_json(profile.id)
        if out_path:
            Path(out_path).write_text(payload, encoding="utf-8")
            print(f"✅ Exported '{profile.username}' to {out_path}", flush=True)
        else:
            print(payload, flush=True)
        return 0

    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3):
        print(__doc__, flush=True)
        sys.exit(2)
    sys.exit(export_profile(sys.argv[1], sys.argv[2] if len(sys.argv) == 3 else None))
