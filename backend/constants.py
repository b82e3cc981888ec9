# backend/constants.py
"""Application constants - single source of truth for configuration values."""

# Themed group names, assigned in order and cycled with a " (n)" suffix
# once an outing asks for more groups than there are names.
GOLF_GROUP_NAMES = (
    "The Fairway Fanatics", "The Driving Divas/Dudes", "The Bogey Brigade", "The Ace Alliance",
    "The Bunker Busters", "The Caddy Crew", "The Eagle Enforcers", "The Fore Horsemen",
    "The Green Guardians", "The Hazard Heroes", "The Iron Masters", "The Julep Jubilees",
    "The Mulligan Monarchs", "The Niblick Ninjas", "The On-Course Originals", "The Pin Seekers",
    "The Quagmire Conquerors", "The Rough Riders", "The Sand Trappers", "The Tee Time Titans",
    "The Under Par Unicorns", "The Victory Vardon", "The Wedge Wizards", "The X-Factor",
    "The Yardage Yetis", "The Zany Zephyrs",
)

SKILL_MIN = 1
SKILL_MAX = 10

NUMBER_OF_GROUPS_DEFAULT = 3
NUMBER_OF_GROUPS_MIN = 1
NUMBER_OF_GROUPS_MAX = 100

PLAYER_NAME_MAX_LENGTH = 50
OUTING_NAME_MAX_LENGTH = 100

NO_PLAYERS_MESSAGE = "No players in this outing to form groups."
