"""Global constants for the pickabracket application."""

# Database-related constants
FIRESTORE_BATCH_LIMIT = 400

# Collection names
TOURNAMENTS_COLLECTION = "tournaments"
PARTICIPANTS_COLLECTION = "tournament_participants"
FIXTURES_COLLECTION = "tournament_fixtures"

DEFAULT_TOURNAMENT_ID = "default"

# Tournament phases
PHASE_SETUP = "setup"
PHASE_ACTIVE = "active"
PHASE_COMPLETED = "completed"

# Tournament formats
FORMAT_KNOCKOUT = "knockout"
FORMAT_LEAGUE = "league"
FORMATS = (FORMAT_KNOCKOUT, FORMAT_LEAGUE)

# Fixture statuses
STATUS_SCHEDULED = "scheduled"
STATUS_COMPLETED = "completed"

# Fixture slot markers
BYE = "BYE"
BYE_SCORE = "BYE"

MIN_PARTICIPANTS = 2
MAX_NAME_LENGTH = 80
UNKNOWN_CHAMPION = "Unknown"
