import os

ENV = os.getenv("ENV", "production")
AWS_REGION = os.getenv("AWS_REGION", "us-west-2")

# Content REST API consumed by the panel
API_URL = os.getenv("API_URL", "http://localhost:3000/v1")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "30"))

STORAGE_TABLE = os.getenv("DYNAMODB_STORAGE_TABLE", "admin-storage")
S3_BUCKET = os.getenv("S3_BUCKET", "dignemi-content-assets")

DYNAMODB_ENDPOINT = os.getenv("DYNAMODB_ENDPOINT")  # local only (http://localhost:8002)

# Optional: when set, magic-link tokens are signature-checked (HS256)
AUTH_TOKEN_SECRET = os.getenv("AUTH_TOKEN_SECRET", "")

SESSION_NAMESPACE = os.getenv("SESSION_NAMESPACE", "dignemi-auth-storage")
TOKEN_STORAGE_KEY = os.getenv("TOKEN_STORAGE_KEY", "auth_token")
LOGIN_PATH = "/login"

# Injected into boto3 calls when running locally
DYNAMODB_KWARGS: dict = {}
if ENV == "local" and DYNAMODB_ENDPOINT:
    DYNAMODB_KWARGS["endpoint_url"] = DYNAMODB_ENDPOINT

# Unsaved builder drafts kept in memory
DRAFT_TTL_SECONDS = float(os.getenv("DRAFT_TTL_SECONDS", "86400"))
MAX_DRAFTS = int(os.getenv("MAX_DRAFTS", "200"))
