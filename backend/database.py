import logging
import psycopg2
from psycopg2.extras import RealDictCursor
from contextlib import contextmanager
from config import get_db_config
from constants import SKILL_MIN, SKILL_MAX, NUMBER_OF_GROUPS_DEFAULT, NUMBER_OF_GROUPS_MIN, NUMBER_OF_GROUPS_MAX

logger = logging.getLogger(__name__)


@contextmanager
def get_db():
    """Get a database connection with automatic commit/rollback."""
    config = get_db_config()
    conn = psycopg2.connect(
        host=config["host"],
        port=config["port"],
        database=config["database"],
        user=config["user"],
        password=config["password"],
        cursor_factory=RealDictCursor
    )
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    """Initialize database schema."""
    with get_db() as conn:
        cursor = conn.cursor()

        # name_lower carries the case-insensitive uniqueness of player names
        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_lower TEXT NOT NULL UNIQUE,
                skill INTEGER NOT NULL CHECK (skill >= {SKILL_MIN} AND skill <= {SKILL_MAX}),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute(f"""
            CREATE TABLE IF NOT EXISTS outings (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                number_of_groups INTEGER NOT NULL DEFAULT {NUMBER_OF_GROUPS_DEFAULT}
                    CHECK (number_of_groups >= {NUMBER_OF_GROUPS_MIN} AND number_of_groups <= {NUMBER_OF_GROUPS_MAX}),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS outing_players (
                outing_id TEXT NOT NULL REFERENCES outings(id) ON DELETE CASCADE,
                player_id TEXT NOT NULL REFERENCES players(id) ON DELETE CASCADE,
                PRIMARY KEY (outing_id, player_id)
            )
        """)

        conn.commit()
    logger.info("Database schema ready")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
    print("Database initialized successfully")
