"""
Master Seeding Script
Populates the demo-mode local storage with the demo organisation
"""

import logging
import sys

from app.config.settings import settings
from app.services.local_storage import FileStorage
from app.store import RelationalStore

# Import demo data
from demo_users import DEMO_USERS
from demo_teams import DEMO_COMPETENCIES, DEMO_DEPARTMENTS, DEMO_TEAMS


def build_seed():
    """Raw collections of the demo organisation, keyed like the store's storage"""
    return {
        "departments": [dict(department) for department in DEMO_DEPARTMENTS],
        "teams": [dict(team, member_ids=list(team["member_ids"])) for team in DEMO_TEAMS],
        "users": [dict(user) for user in DEMO_USERS],
        "competencies": [dict(competency) for competency in DEMO_COMPETENCIES],
        "pdis": [],
    }


def seed_storage(storage_dir=None, reset=False):
    """Write the demo organisation to the storage directory; returns the loaded store"""
    storage = FileStorage(storage_dir or settings.STORAGE_DIR)

    if reset:
        print("[RESET] Clearing existing local storage...")
        storage.clear()
    elif storage.get_item("users") is not None:
        print(f"[SKIP] Local storage in {storage.directory} already holds data, skipping...")
        return RelationalStore.load(storage)

    store = RelationalStore.load(storage, seed=build_seed())

    violations = store.check_invariants()
    if violations:
        for violation in violations:
            print(f"[ERROR] {violation}")
        raise RuntimeError("Demo data breaks relationship invariants")

    print(f"[SUCCESS] Created {len(store.departments)} departments")
    print(f"[SUCCESS] Created {len(store.teams)} teams")
    print(f"[SUCCESS] Created {len(store.users)} users")
    print(f"[SUCCESS] Created {len(store.list_competencies())} organizational competencies")
    return store


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)

    print(f"\n{'='*60}")
    print(f"🚀 Seeding Demo Organisation")
    print(f"{'='*60}")

    reset = "--reset" in sys.argv[1:]
    try:
        seed_storage(reset=reset)
    except Exception as e:
        print(f"[ERROR] Error seeding demo data: {e}")
        return 1

    print(f"\n[SUCCESS] Demo data ready in {settings.STORAGE_DIR}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
