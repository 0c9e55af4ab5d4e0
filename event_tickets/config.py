"""
Event constants and environment-driven settings.
"""

import os
from dataclasses import dataclass

# Single event instance
EVENT_NAME = "The Ultimate Sacrifice On Golgotha"
EVENT_SHORT_NAME = "SPC Easter 2026"
EVENT_DATE = "2026-04-04"
EVENT_LOCATION = "Sharon Event Center, 940 Barnes Bridge Rd, Mesquite, TX 75150"

# Google Wallet event ticket class suffix
EVENT_CLASS_ID = "spc-easter-2026-event"

TERMS_TEXT = "Please bring this ticket (digital or printed) to the event"

# Pass colors
PASS_FOREGROUND_COLOR = "rgb(255, 255, 255)"
PASS_BACKGROUND_COLOR = "rgb(60, 65, 76)"
PASS_LABEL_COLOR = "rgb(255, 255, 255)"
GOOGLE_HEX_BACKGROUND_COLOR = "#3C414C"


@dataclass
class Settings:
    """Runtime settings read from the environment"""

    organization: str = EVENT_SHORT_NAME
    pass_type_id: str = "pass.com.spc.easter2026"
    team_id: str = "YOUR_TEAM_ID"
    google_issuer_id: str = "YOUR_ISSUER_ID"
    google_service_account_email: str = ""
    rate_limit_requests: int = 5
    rate_limit_window: int = 300

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from WALLET_* / GOOGLE_WALLET_* / RATE_LIMIT_* variables"""
        defaults = cls()
        return cls(
            organization=os.getenv("WALLET_ORGANIZATION", defaults.organization),
            pass_type_id=os.getenv("WALLET_PASS_TYPE_ID", defaults.pass_type_id),
            team_id=os.getenv("WALLET_TEAM_ID", defaults.team_id),
            google_issuer_id=os.getenv("GOOGLE_WALLET_ISSUER_ID", defaults.google_issuer_id),
            google_service_account_email=os.getenv(
                "GOOGLE_SERVICE_ACCOUNT_EMAIL", defaults.google_service_account_email
            ),
            rate_limit_requests=int(os.getenv("RATE_LIMIT_REQUESTS", defaults.rate_limit_requests)),
            rate_limit_window=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", defaults.rate_limit_window)),
        )

    @property
    def google_configured(self) -> bool:
        return bool(self.google_issuer_id) and self.google_issuer_id != "YOUR_ISSUER_ID"
