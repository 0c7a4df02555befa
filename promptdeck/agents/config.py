"""
Configuration settings for the agents package.
"""

#==============================================================================
# DECK GENERATION MODELS
#==============================================================================

DECK_GENERATION_MODEL = "gpt-4o"
DECK_GENERATION_TEMPERATURE = 0.7
DECK_GENERATION_MAX_TOKENS = 4000

# API key that switches generation to the local fallback synthesizer
DEMO_API_KEY = "demo-key"
OPENAI_KEY_PREFIX = "sk-"

#==============================================================================
# DEADLINES (seconds)
#==============================================================================

GENERATION_TIMEOUT_SECONDS = 45.0
API_KEY_VALIDATION_TIMEOUT_SECONDS = 10.0
PRIMARY_WRITE_TIMEOUT_SECONDS = 15.0
PRIMARY_READ_TIMEOUT_SECONDS = 10.0
COUNTER_UPDATE_TIMEOUT_SECONDS = 5.0

#==============================================================================
# STORAGE
#==============================================================================

PROJECTS_TABLE = "projects"
USERS_TABLE = "users"

# Durable-local tier keeps a single list under this key
LOCAL_PROJECTS_KEY = "local_projects"
LOCAL_ID_PREFIX = "local_"

# Ephemeral tier keeps one entry per pending deck
TEMP_ID_PREFIX = "temp_"
TEMP_PROJECT_KEY_PREFIX = "temp_project_"

LOCAL_STORE_DIR = ".promptdeck/local_store"

#==============================================================================
# FALLBACK CONTENT
#==============================================================================

STOCK_PHOTO_URL = "https://images.unsplash.com/1600x900/?{query}"
