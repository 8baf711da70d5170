"""Device fingerprint protocol (port)."""

from typing import Protocol


class DeviceFingerprintProtocol(Protocol):
    """Turns a User-Agent header into a coarse device label.

    Example:
        >>> fingerprinter.fingerprint("Mozilla/5.0 (Windows NT 10.0; ...")
        'Chrome on Windows'
    """

    def fingerprint(self, user_agent: str | None) -> str | None:
        """Return "<browser> on <os>", or None when there is no User-Agent."""
        ...
