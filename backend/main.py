import logging
import uuid
from typing import Optional
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from psycopg2 import errors as pg_errors
from config import CORS_ORIGINS, PORT, HOST, DEBUG, LOG_LEVEL
from database import get_db, init_db
from grouping import InvalidGroupCountError, generate_groups, skill_spread
from models import (
    PlayerCreate, PlayerUpdate, PlayerResponse,
    OutingCreate, OutingUpdate, OutingResponse,
    MembershipCreate, GroupsResponse, GroupingMode, MessageResponse
)
from constants import (
    GOLF_GROUP_NAMES, SKILL_MIN, SKILL_MAX,
    NUMBER_OF_GROUPS_DEFAULT, NUMBER_OF_GROUPS_MIN, NUMBER_OF_GROUPS_MAX, NO_PLAYERS_MESSAGE
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Golf Outing Grouper API",
    version="1.0.0",
    docs_url="/api/docs" if DEBUG else None,
    redoc_url="/api/redoc" if DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(request: Request, status_code: int, message) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "status_code": status_code, "message": message, "path": str(request.url.path)}
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(request, exc.status_code, exc.detail)


@app.exception_handler(InvalidGroupCountError)
async def invalid_group_count_handler(request: Request, exc: InvalidGroupCountError):
    return error_response(request, 422, str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s: %s", request.url.path, exc)
    return error_response(request, 500, "Internal server error")


@app.on_event("startup")
def startup():
    init_db()


def generate_id() -> str:
    return str(uuid.uuid4())


# ============ PLAYERS ============

@app.get("/api/players", response_model=list[PlayerResponse])
def list_players():
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, skill FROM players ORDER BY name_lower ASC")
        rows = cursor.fetchall()
        return [PlayerResponse(**dict(row)) for row in rows]


@app.post("/api/players", response_model=PlayerResponse, status_code=201)
def create_player(player: PlayerCreate):
    player_id = generate_id()

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute("SELECT id FROM players WHERE name_lower = %s", (player.name.lower(),))
        if cursor.fetchone():
            raise HTTPException(status_code=409, detail=f'Player with name "{player.name}" already exists')

        try:
            cursor.execute(
                "INSERT INTO players (id, name, name_lower, skill) VALUES (%s, %s, %s, %s) RETURNING id, name, skill",
                (player_id, player.name, player.name.lower(), player.skill)
            )
        except pg_errors.UniqueViolation:
            raise HTTPException(status_code=409, detail=f'Player with name "{player.name}" already exists')

        row = cursor.fetchone()
        logger.info("Created player %s (%s)", row["id"], row["name"])
        return PlayerResponse(**dict(row))


@app.get("/api/players/{player_id}", response_model=PlayerResponse)
def get_player(player_id: str):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, skill FROM players WHERE id = %s", (player_id,))
        row = cursor.fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="Player not found")
        return PlayerResponse(**dict(row))


@app.put("/api/players/{player_id}", response_model=PlayerResponse)
def update_player(player_id: str, update: PlayerUpdate):
    if update.name is None and update.skill is None:
        raise HTTPException(status_code=400, detail="Either name or skill must be provided for an update")

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute("SELECT id, name, skill FROM players WHERE id = %s", (player_id,))
        existing = cursor.fetchone()
        if not existing:
            raise HTTPException(status_code=404, detail="Player not found")

        if update.name is not None:
            cursor.execute(
                "SELECT id FROM players WHERE name_lower = %s AND id != %s",
                (update.name.lower(), player_id)
            )
            if cursor.fetchone():
                raise HTTPException(status_code=409, detail=f'Another player with name "{update.name}" already exists')

        name = update.name if update.name is not None else existing["name"]
        skill = update.skill if update.skill is not None else existing["skill"]

        try:
            cursor.execute(
                "UPDATE players SET name = %s, name_lower = %s, skill = %s WHERE id = %s RETURNING id, name, skill",
                (name, name.lower(), skill, player_id)
            )
        except pg_errors.UniqueViolation:
            raise HTTPException(status_code=409, detail=f'Another player with name "{name}" already exists')

        row = cursor.fetchone()
        logger.info("Updated player %s", player_id)
        return PlayerResponse(**dict(row))


@app.delete("/api/players/{player_id}", response_model=MessageResponse)
def delete_player(player_id: str):
    with get_db() as conn:
        cursor = conn.cursor()
        # Memberships go with it (ON DELETE CASCADE)
        cursor.execute("DELETE FROM players WHERE id = %s", (player_id,))
        if cursor.rowcount == 0:
            raise HTTPException(status_code=404, detail="Player not found")
        logger.info("Deleted player %s", player_id)
        return {"message": "Player deleted"}


# ============ OUTINGS ============

@app.get("/api/outings", response_model=list[OutingResponse])
def list_outings():
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, number_of_groups FROM outings ORDER BY name ASC")
        rows = cursor.fetchall()
        return [OutingResponse(**dict(row)) for row in rows]


@app.post("/api/outings", response_model=OutingResponse, status_code=201)
def create_outing(outing: OutingCreate):
    outing_id = generate_id()

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "INSERT INTO outings (id, name, number_of_groups) VALUES (%s, %s, %s) RETURNING id, name, number_of_groups",
            (outing_id, outing.name, outing.number_of_groups)
        )
        row = cursor.fetchone()
        logger.info("Created outing %s (%s, %d groups)", row["id"], row["name"], row["number_of_groups"])
        return OutingResponse(**dict(row))


@app.get("/api/outings/{outing_id}", response_model=OutingResponse)
def get_outing(outing_id: str):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, number_of_groups FROM outings WHERE id = %s", (outing_id,))
        row = cursor.fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="Outing not found")
        return OutingResponse(**dict(row))


@app.put("/api/outings/{outing_id}", response_model=OutingResponse)
def update_outing(outing_id: str, update: OutingUpdate):
    if update.name is None and update.number_of_groups is None:
        raise HTTPException(status_code=400, detail="Either name or numberOfGroups must be provided for an update")

    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("""
            UPDATE outings
            SET name = COALESCE(%s, name), number_of_groups = COALESCE(%s, number_of_groups)
            WHERE id = %s
            RETURNING id, name, number_of_groups
        """, (update.name, update.number_of_groups, outing_id))
        row = cursor.fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="Outing not found")
        logger.info("Updated outing %s", outing_id)
        return OutingResponse(**dict(row))


@app.delete("/api/outings/{outing_id}", response_model=MessageResponse)
def delete_outing(outing_id: str):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM outings WHERE id = %s", (outing_id,))
        if cursor.rowcount == 0:
            raise HTTPException(status_code=404, detail="Outing not found")
        logger.info("Deleted outing %s", outing_id)
        return {"message": "Outing deleted"}


# ============ OUTING PLAYERS ============

MEMBERS_QUERY = """
    SELECT p.id, p.name, p.skill
    FROM players p
    JOIN outing_players op ON p.id = op.player_id
    WHERE op.outing_id = %s
    ORDER BY p.name_lower ASC
"""


@app.get("/api/outings/{outing_id}/players", response_model=list[PlayerResponse])
def get_outing_players(outing_id: str):
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute("SELECT id FROM outings WHERE id = %s", (outing_id,))
        if not cursor.fetchone():
            raise HTTPException(status_code=404, detail="Outing not found")

        cursor.execute(MEMBERS_QUERY, (outing_id,))
        rows = cursor.fetchall()
        return [PlayerResponse(**dict(row)) for row in rows]


@app.post("/api/outings/{outing_id}/players", response_model=MessageResponse, status_code=201)
def add_outing_player(outing_id: str, membership: MembershipCreate):
    player_id = membership.player_id

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute("SELECT id FROM outings WHERE id = %s", (outing_id,))
        if not cursor.fetchone():
            raise HTTPException(status_code=404, detail=f"Outing with ID {outing_id} not found")

        cursor.execute("SELECT id FROM players WHERE id = %s", (player_id,))
        if not cursor.fetchone():
            raise HTTPException(status_code=404, detail=f"Player with ID {player_id} not found")

        cursor.execute(
            "SELECT player_id FROM outing_players WHERE outing_id = %s AND player_id = %s",
            (outing_id, player_id)
        )
        if cursor.fetchone():
            raise HTTPException(status_code=409, detail="Player is already in this outing")

        try:
            cursor.execute(
                "INSERT INTO outing_players (outing_id, player_id) VALUES (%s, %s)",
                (outing_id, player_id)
            )
        except pg_errors.ForeignKeyViolation:
            raise HTTPException(status_code=404, detail="Outing or player not found")
        except pg_errors.UniqueViolation:
            raise HTTPException(status_code=409, detail="Player is already in this outing")

        logger.info("Added player %s to outing %s", player_id, outing_id)
        return {"message": "Player added to outing"}


@app.delete("/api/outings/{outing_id}/players/{player_id}", response_model=MessageResponse)
def remove_outing_player(outing_id: str, player_id: str):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            "DELETE FROM outing_players WHERE outing_id = %s AND player_id = %s",
            (outing_id, player_id)
        )
        if cursor.rowcount == 0:
            raise HTTPException(status_code=404, detail="Player not found in this outing")
        logger.info("Removed player %s from outing %s", player_id, outing_id)
        return {"message": "Player removed from outing"}


# ============ GROUPS ============

@app.get(
    "/api/outings/{outing_id}/groups",
    response_model=GroupsResponse,
    response_model_exclude_none=True,
)
def get_outing_groups(outing_id: str, shuffle: bool = False, mode: Optional[GroupingMode] = None):
    if mode is None:
        mode = GroupingMode.RANDOMIZED if shuffle else GroupingMode.BALANCED

    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute("SELECT id, name, number_of_groups FROM outings WHERE id = %s", (outing_id,))
        outing = cursor.fetchone()
        if not outing:
            raise HTTPException(status_code=404, detail="Outing not found")

        cursor.execute(MEMBERS_QUERY, (outing_id,))
        players = [PlayerResponse(**dict(row)) for row in cursor.fetchall()]

    if not players:
        return GroupsResponse(outing_name=outing["name"], groups=[], message=NO_PLAYERS_MESSAGE)

    number_of_groups = outing["number_of_groups"]
    groups = generate_groups(number_of_groups, players, mode)
    logger.info(
        "Generated %d %s groups for outing %s (skill spread %s)",
        number_of_groups, mode.value, outing_id, skill_spread(groups)
    )
    return GroupsResponse(outing_name=outing["name"], number_of_groups=number_of_groups, groups=groups)


# ============ CONFIGURATION ============

@app.get("/api/config")
def get_config():
    return {
        "group_names": list(GOLF_GROUP_NAMES),
        "skill": {"min": SKILL_MIN, "max": SKILL_MAX},
        "number_of_groups": {"default": NUMBER_OF_GROUPS_DEFAULT, "min": NUMBER_OF_GROUPS_MIN, "max": NUMBER_OF_GROUPS_MAX},
        "modes": [m.value for m in GroupingMode],
    }


# ============ HEALTH CHECK ============

@app.get("/api/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT, reload=DEBUG)
