"""Global constants for the xfive application."""

# Firestore layout
DEFAULT_APP_ID = "xfive-battle"
FIRESTORE_BATCH_LIMIT = 400

ARTIFACTS_COLLECTION = "artifacts"
PUBLIC_COLLECTION = "public"
DATA_DOCUMENT = "data"
PLAYERS_COLLECTION = "players"
WHEEL_MODES_COLLECTION = "wheelModes"
SETTINGS_COLLECTION = "settings"
CONFIG_DOCUMENT = "config"

# Rooms
QUALIFIER_ROOMS = ["1", "2", "3", "4", "5", "6"]
SEMIFINAL_ROOMS = ["A", "B"]
FINAL_ROOM = "FINAL"
ROOMS = QUALIFIER_ROOMS + SEMIFINAL_ROOMS + [FINAL_ROOM]

# Qualifier rooms feeding semifinal room A; the rest feed room B
ROOM_A_FEEDERS = {"1", "2", "3"}

# Stages
STAGE_QUALIFIERS_D1 = "QUALIFIERS_D1"
STAGE_QUALIFIERS_D2 = "QUALIFIERS_D2"
STAGE_SEMIFINALS = "SEMIFINALS"
STAGE_FINALS = "FINALS"
STAGES = [
    STAGE_QUALIFIERS_D1,
    STAGE_QUALIFIERS_D2,
    STAGE_SEMIFINALS,
    STAGE_FINALS,
]
DAY_ROOMS = {
    STAGE_QUALIFIERS_D1: ["1", "2", "3"],
    STAGE_QUALIFIERS_D2: ["4", "5", "6"],
}

# Player status
STATUS_ACTIVE = "active"
STATUS_QUALIFIED = "qualified"
STATUS_ELIMINATED = "eliminated"
STATUSES = [STATUS_ACTIVE, STATUS_QUALIFIED, STATUS_ELIMINATED]

# Advancement cut lines
QUALIFIER_ADVANCE_COUNT = 2
SEMIFINAL_ADVANCE_COUNT = 3
CHAMPION_COUNT = 1

# Score entry
MAX_GAMES = 5

# Wheel effects
EFFECT_REVERSE = "REVERSE"
EFFECT_DOUBLE = "DOUBLE"
EFFECT_BOOM = "BOOM"
WHEEL_CATEGORIES = [EFFECT_DOUBLE, EFFECT_BOOM]
BOOM_POSITIVE_CHANCE = 0.6

# Demo seeding
DEMO_PLAYERS_PER_ROOM = 4
