from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class ClickEventModel:
    id: str                         # Unique event identifier (UUID4 string)
    link_id: str                    # Back-reference to the clicked link (may outlive it)
    timestamp: datetime             # Time the click was recorded (UTC)
    referrer: str | None = None     # Referer header of the redirect request
    user_agent: str | None = None   # User-Agent header of the redirect request
# fmt: on
