"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real integrations
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("VERIFY_VOTE_TRANSACTIONS", "false")
os.environ.setdefault("CONTEST_SCHEDULER_ENABLED", "false")
os.environ.setdefault("PRINTFUL_API_KEY", "")
os.environ.setdefault("PRINTFUL_WEBHOOK_SECRET", "")
os.environ.setdefault("R2_ACCOUNT_ID", "")
os.environ.setdefault("ADMIN_EMAILS", "admin@samu.test")
os.environ.setdefault(
    "TREASURY_WALLET_ADDRESS", "Treasury111111111111111111111111111111111",
)
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("BULK_SYNC_DELAY_SECONDS", "0")
