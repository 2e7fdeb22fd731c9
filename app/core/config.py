import os

# Appwrite Connection
# Defaults point at Appwrite Cloud; project and key must come from the environment
APPWRITE_ENDPOINT = os.getenv("APPWRITE_ENDPOINT", "https://cloud.appwrite.io/v1")
APPWRITE_PROJECT_ID = os.getenv("APPWRITE_PROJECT_ID", "")
APPWRITE_API_KEY = os.getenv("APPWRITE_API_KEY", "")

# Database and Storage Identifiers
DATABASE_ID = os.getenv("APPWRITE_DATABASE_ID", "food_ordering")
BUCKET_ID = os.getenv("APPWRITE_BUCKET_ID", "assets")
CATEGORIES_COLLECTION_ID = os.getenv("CATEGORIES_COLLECTION_ID", "categories")
CUSTOMIZATIONS_COLLECTION_ID = os.getenv("CUSTOMIZATIONS_COLLECTION_ID", "customizations")
MENU_COLLECTION_ID = os.getenv("MENU_COLLECTION_ID", "menu")
MENU_CUSTOMIZATIONS_COLLECTION_ID = os.getenv("MENU_CUSTOMIZATIONS_COLLECTION_ID", "menu_customizations")

# Application Metadata
PROJECT_NAME = "Menu Seeder"
VERSION = "1.0.0"

# Seeder Configuration
CREATE_DELAY_MS = int(os.getenv("CREATE_DELAY_MS", 200)) # Pause after every document create (rate limit)
UPLOAD_DELAY_MS = int(os.getenv("UPLOAD_DELAY_MS", 300)) # Pause after every file upload
LIST_PAGE_SIZE = int(os.getenv("LIST_PAGE_SIZE", 100)) # Documents/files fetched per list call during reset
IMAGE_FETCH_TIMEOUT = float(os.getenv("IMAGE_FETCH_TIMEOUT", 15))
SEED_DATA_PATH = os.getenv("SEED_DATA_PATH") # Optional JSON dataset replacing the built-in demo data
ABORT_ON_RESET_FAILURE = os.getenv("ABORT_ON_RESET_FAILURE", "false").lower() in ("1", "true", "yes")
