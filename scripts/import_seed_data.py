#!/usr/bin/env python3
"""
Import seed data into local database for testing.

Usage:
    python scripts/import_seed_data.py [path/to/seed_data.json]

Reads from data/seed_data.json (by default) and imports into local database.
Requires DATABASE_URL to be set in .env file.
"""

import json
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from config import DATA_DIR
from constants import NUMBER_OF_GROUPS_DEFAULT
from database import get_db, init_db


def import_rows(cursor, data: dict) -> dict:
    """Upsert players, outings and memberships; returns counts per table."""
    players = data.get("players", [])
    for player in players:
        cursor.execute("""
            INSERT INTO players (id, name, name_lower, skill)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE SET
                name = EXCLUDED.name,
                name_lower = EXCLUDED.name_lower,
                skill = EXCLUDED.skill
        """, (player["id"], player["name"], player["name"].lower(), player["skill"]))

    outings = data.get("outings", [])
    for outing in outings:
        cursor.execute("""
            INSERT INTO outings (id, name, number_of_groups)
            VALUES (%s, %s, %s)
            ON CONFLICT (id) DO UPDATE SET
                name = EXCLUDED.name,
                number_of_groups = EXCLUDED.number_of_groups
        """, (outing["id"], outing["name"], outing.get("number_of_groups", NUMBER_OF_GROUPS_DEFAULT)))

    memberships = data.get("outing_players", [])
    for membership in memberships:
        cursor.execute("""
            INSERT INTO outing_players (outing_id, player_id)
            VALUES (%s, %s)
            ON CONFLICT (outing_id, player_id) DO NOTHING
        """, (membership["outing_id"], membership["player_id"]))

    return {"players": len(players), "outings": len(outings), "outing_players": len(memberships)}


def import_data(seed_file: Path):
    """Import seed data from JSON file."""
    if not seed_file.exists():
        print(f"Error: {seed_file} not found")
        print("Run export_prod_data.py first to create seed data")
        sys.exit(1)

    with open(seed_file) as f:
        data = json.load(f)

    print(f"Loading seed data from {seed_file}")

    # Initialize database schema
    print("\nInitializing database schema...")
    init_db()

    with get_db() as conn:
        counts = import_rows(conn.cursor(), data)

    for table, count in counts.items():
        print(f"Imported {count} {table}")
    print("\nSeed data imported successfully!")


if __name__ == "__main__":
    seed_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DATA_DIR / "seed_data.json"
    import_data(seed_path)
