import logging
import threading
from dataclasses import dataclass

from avatar_studio.errors import ProviderUnavailable

logger = logging.getLogger(__name__)


@dataclass
class Credential:
    key: str
    quota: int
    usage_count: int = 0

    def __repr__(self) -> str:
        return f"Credential(usage_count={self.usage_count}, quota={self.quota})"


class CredentialPool:
    """Round-robin over provider API keys, each allowed ``quota`` uses.

    When every key is at quota the whole pool resets and the first key is handed
    out again. Counters only live in memory, so a restart also resets them.
    """

    def __init__(self, keys: list[str], quota: int = 10) -> None:
        if quota <= 0:
            raise ValueError("quota must be > 0")
        self._credentials = [Credential(key=k, quota=quota) for k in keys]
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._credentials)

    def acquire(self) -> Credential:
        with self._lock:
            if not self._credentials:
                raise ProviderUnavailable("No API keys available")

            for i, cred in enumerate(self._credentials, start=1):
                if cred.usage_count < cred.quota:
                    cred.usage_count += 1
                    logger.info("using key %d, usage: %d/%d", i, cred.usage_count, cred.quota)
                    return cred

            logger.warning("all %d keys exhausted, resetting counters", len(self._credentials))
            for cred in self._credentials:
                cred.usage_count = 0
            first = self._credentials[0]
            first.usage_count = 1
            return first

    def usage(self) -> list[dict]:
        with self._lock:
            return [
                {"key": i, "usage": cred.usage_count, "quota": cred.quota}
                for i, cred in enumerate(self._credentials, start=1)
            ]
