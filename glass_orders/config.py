import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Notion Configuration
NOTION_API_KEY = os.getenv("NOTION_API_KEY")
# Data source endpoints (/v1/data_sources/...) need 2025-09-03 or later
NOTION_VERSION = os.getenv("NOTION_VERSION", "2025-09-03")
NOTION_API_URL = os.getenv("NOTION_API_URL", "https://api.notion.com/v1")

NOTION_ORDERS_DB_ID = os.getenv("NOTION_ORDERS_DB_ID")
NOTION_CLIENTS_DB_ID = os.getenv("NOTION_CLIENTS_DB_ID")
NOTION_TRUCK_MODELS_DB_ID = os.getenv("NOTION_TRUCK_MODELS_DB_ID")
NOTION_CREWS_DB_ID = os.getenv("NOTION_CREWS_DB_ID")
NOTION_PRICING_DB_ID = os.getenv("NOTION_PRICING_DB_ID")

# Cloudinary Configuration
CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
CLOUDINARY_UPLOAD_PRESET = os.getenv("CLOUDINARY_UPLOAD_PRESET")
# When both are set uploads are signed, otherwise the unsigned preset is used
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

# Clerk Configuration
CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
CLERK_API_URL = os.getenv("CLERK_API_URL", "https://api.clerk.com/v1")
CLERK_ISSUER = os.getenv("CLERK_ISSUER")  # e.g. https://your-app.clerk.accounts.dev
CLERK_JWKS_URL = os.getenv("CLERK_JWKS_URL") or (
    f"{CLERK_ISSUER.rstrip('/')}/.well-known/jwks.json" if CLERK_ISSUER else None
)
CLERK_AUTHORIZED_PARTIES = [
    party.strip()
    for party in os.getenv("CLERK_AUTHORIZED_PARTIES", "").split(",")
    if party.strip()
]

# Twilio WhatsApp Configuration
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_WHATSAPP_NUMBER = os.getenv("TWILIO_WHATSAPP_NUMBER")  # e.g. whatsapp:+14155238886

# Timeout applied to every outbound REST call (seconds)
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30"))

# Invoice branding
INVOICE_COMPANY_NAME = os.getenv("INVOICE_COMPANY_NAME", "Glass Installation Services")
INVOICE_CURRENCY = os.getenv("INVOICE_CURRENCY", "MXN")

# CORS
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,http://localhost:5173",
).split(",")
