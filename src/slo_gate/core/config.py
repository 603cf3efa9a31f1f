"""
Application configuration management.
Loads settings from environment variables (via .env if present).
"""

import os
from dotenv import load_dotenv

# Load .env once at import time (real OS env still wins if set)
load_dotenv(override=False)


class Settings:
    # Application environment
    APP_ENV: str = os.getenv("APP_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Report output
    SLO_REPORTS_DIR: str = os.getenv("SLO_REPORTS_DIR", "REPORTS")
    SLO_COLOR: bool = os.getenv("SLO_COLOR", "true").lower() == "true"

    # Snapshot file with live readings; built-in readings are used when unset
    SLO_METRICS_FILE: str = os.getenv("SLO_METRICS_FILE", "")

    # Error budget classification (percent consumed)
    SLO_BUDGET_CRITICAL_PCT: float = float(os.getenv("SLO_BUDGET_CRITICAL_PCT", "80"))
    SLO_BUDGET_WARNING_PCT: float = float(os.getenv("SLO_BUDGET_WARNING_PCT", "50"))

    # Metrics configuration
    METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    METRICS_NAMESPACE: str = os.getenv("METRICS_NAMESPACE", "slo_gate")

    # ---- Convenience helpers ----
    @property
    def metrics_file(self) -> str | None:
        """Snapshot path, or None when the built-in readings should be used."""
        return self.SLO_METRICS_FILE.strip() or None


settings = Settings()
