"""Global pytest configuration."""

import os

# Keep tests offline and deterministic before any app imports
os.environ.setdefault("DESTINATION_LOOKUP", "0")
os.environ.setdefault("SLOT_EXTRACTOR", "rules")
os.environ.setdefault("DEBUG", "0")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test")
