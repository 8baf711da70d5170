"""Device fingerprinter using the user-agents library.

Reduces a User-Agent header to a coarse "<browser> on <os>" label. Versions
are left out on purpose so a browser update does not look like a new device.
"""

import structlog
from user_agents import parse as parse_user_agent  # type: ignore[import-untyped]

logger = structlog.get_logger(__name__)

UNKNOWN = "Other"


class UserAgentDeviceFingerprinter:
    """Implements DeviceFingerprintProtocol (structural typing).

    Behavior:
        - Pure string parsing, no I/O
        - Unparseable agents fall back to "Other on Other"
    """

    def fingerprint(self, user_agent: str | None) -> str | None:
        """Parse a User-Agent into "<browser> on <os>".

        Args:
            user_agent: Raw User-Agent header.

        Returns:
            str | None: Device label, or None without a User-Agent.
        """
        if not user_agent or not user_agent.strip():
            return None

        try:
            ua = parse_user_agent(user_agent)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(
                "user_agent_parse_failed",
                user_agent=user_agent[:100],
                error=str(e),
            )
            return f"{UNKNOWN} on {UNKNOWN}"

        browser = ua.browser.family or UNKNOWN
        os_name = ua.os.family or UNKNOWN
        return f"{browser} on {os_name}"
