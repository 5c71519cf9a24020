"""Collection keys of the persistent store"""

USERS = "gropact_users"
SESSION = "gropact_session"
PACTS = "gropact_pacts"
ROOMS = "gropact_rooms"
SUPPORTER_ACTIVITY = "gropact_supporter_activity"
INITIALIZED = "gropact_initialized"

ALL_KEYS = [USERS, SESSION, PACTS, ROOMS, SUPPORTER_ACTIVITY, INITIALIZED]
