import os

# Environment
APP_ENV = os.getenv("APP_ENV", "development")

# JWT
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Pagination
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
COMMENTS_PAGE_SIZE = int(os.getenv("COMMENTS_PAGE_SIZE", "20"))

# Blog field bounds
TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 200
CONTENT_MIN_LENGTH = 100
CATEGORY_MAX_LENGTH = 50
MAX_TAGS = 10
REJECTION_REASON_MIN_LENGTH = 10
REJECTION_REASON_MAX_LENGTH = 500
ADMIN_NOTES_MAX_LENGTH = 1000
FEATURED_IMAGE_PATTERN = r"^https?://.+\.(jpg|jpeg|png|gif|webp)$"

# Comments
COMMENT_MIN_LENGTH = 1
COMMENT_MAX_LENGTH = 500
MAX_COMMENT_DEPTH = 3
DEFAULT_REPORT_REASON = "Inappropriate content"

# Dashboard
ANALYTICS_WINDOW_DAYS = 7
LEADERBOARD_SIZE = 5
