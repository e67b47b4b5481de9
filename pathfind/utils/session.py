from __future__ import annotations

import time
import uuid


def generate_session_token() -> str:
    """Opaque id grouping the keystrokes of one search session for provider billing."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"
