"""
Key/value stores for rate-limit counters and other short-lived client data.

InMemoryStore is the default backend (tests, single process). EncryptedStore
wraps any store and keeps values AES-256-GCM encrypted with optional expiry.
"""

import base64
import binascii
import copy
import json
import logging
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import Settings
from .exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
KEY_SIZE = 32


class KeyValueStore(Protocol):
    """Anything the rate limiter can keep its timestamp lists in"""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStore:
    """Thread-safe dict store with optional per-entry TTL"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._data: Dict[str, Any] = {}
        self._expires_at: Dict[str, float] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            if key not in self._data:
                return None

            expires_at = self._expires_at.get(key)
            if expires_at is not None and self._clock() >= expires_at:
                self._remove(key)
                logger.debug(f"🔄 Store entry expired: {key}")
                return None

            # callers must not mutate stored state in place
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)
            if ttl_seconds is not None:
                self._expires_at[key] = self._clock() + ttl_seconds
            else:
                self._expires_at.pop(key, None)

    def delete(self, key: str) -> None:
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._expires_at.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())

    def _remove(self, key: str) -> None:
        self._data.pop(key, None)
        self._expires_at.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def decode_key(raw: Union[str, bytes]) -> bytes:
    """Accept raw 32 bytes or a urlsafe base64 string of them"""
    if isinstance(raw, bytes) and len(raw) == KEY_SIZE:
        return raw
    try:
        key = base64.urlsafe_b64decode(raw)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError("Storage key is not valid base64") from e
    if len(key) != KEY_SIZE:
        raise ConfigurationError(f"Storage key must be {KEY_SIZE} bytes, got {len(key)}")
    return key


class EncryptedStore:
    """
    Encrypting wrapper around another store.

    Values are JSON-serialized together with their write time and expiry,
    then encrypted with AES-256-GCM and a random nonce per write. An entry is
    expired once now >= write time + expiry, the same boundary InMemoryStore
    uses. Entries that cannot be decrypted are treated as missing.
    """

    prefix = "__secure_"

    def __init__(
        self,
        inner: Optional[KeyValueStore] = None,
        key: Union[str, bytes, None] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.inner = inner if inner is not None else InMemoryStore(clock=clock)
        if key:
            self._aesgcm = AESGCM(decode_key(key))
        else:
            logger.warning("⚠️ No storage key configured, using a per-process random key")
            self._aesgcm = AESGCM(os.urandom(KEY_SIZE))
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, inner: Optional[KeyValueStore] = None) -> "EncryptedStore":
        return cls(inner=inner, key=settings.storage_encryption_key or None)

    def get(self, key: str) -> Optional[Any]:
        token = self.inner.get(self.prefix + key)
        if token is None:
            return None

        try:
            payload = json.loads(self._decrypt(token))
        except (InvalidTag, binascii.Error, ValueError, TypeError, AttributeError) as e:
            logger.error(f"❌ Could not decrypt stored entry '{key}': {type(e).__name__}")
            return None

        expiry = payload.get("expiry")
        if expiry is not None and self._clock() >= payload["timestamp"] + expiry:
            self.delete(key)
            return None

        return payload["data"]

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        payload = {"data": value, "timestamp": self._clock(), "expiry": ttl_seconds}
        try:
            serialized = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for '{key}' is not JSON serializable", context={"key": key}) from e
        self.inner.set(self.prefix + key, self._encrypt(serialized), ttl_seconds)

    def delete(self, key: str) -> None:
        self.inner.delete(self.prefix + key)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def keys(self) -> List[str]:
        """Keys written through this wrapper (needs an inner store with keys())"""
        return [k[len(self.prefix):] for k in self.inner.keys() if k.startswith(self.prefix)]

    def clear(self) -> None:
        """Remove every entry written through this wrapper, leave other keys alone"""
        for key in self.keys():
            self.delete(key)

    def set_session_item(self, key: str, value: Any, expire_minutes: int = 30) -> None:
        """Session data, 30 minutes by default"""
        self.set(key, value, ttl_seconds=expire_minutes * 60)

    def set_temp_item(self, key: str, value: Any, expire_minutes: int = 5) -> None:
        """Temporary data, 5 minutes by default"""
        self.set(key, value, ttl_seconds=expire_minutes * 60)

    def _encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.urlsafe_b64encode(nonce + ciphertext).decode("utf-8")

    def _decrypt(self, token: str) -> str:
        raw = base64.urlsafe_b64decode(token.encode("utf-8"))
        nonce, ciphertext = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        return self._aesgcm.decrypt(nonce, ciphertext, None).decode("utf-8")
