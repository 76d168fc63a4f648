"""
Encrypted envelope store on top of a localStorage-style key-value backend.

Payloads are wrapped with `timestamp`/`expiresAt` metadata, serialized to JSON
and sealed with AES-256-GCM. The key is exported as a JWK and kept in the SAME
storage as the data, so this only stops casual reading or editing of the stored
answers. It also enforces the 7-day retention policy.
"""

import base64
import json
import logging
import secrets
import time

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from savings_engine.storage import StorageError
from savings_engine.utils import (
    ASSESSMENT_STORAGE_KEY,
    DATA_EXPIRY_MS,
    ENCRYPTION_KEY_NAME,
    RECOGNIZED_KEY_PREFIXES,
    iso_timestamp,
    is_diagnostic_mode,
    now_ms,
)

store_logger = logging.getLogger('secure_store')

NONCE_SIZE = 12  # 96-bit nonce for GCM
KEY_SIZE = 32  # AES-256
ENVELOPE_METADATA_KEYS = ("timestamp", "expiresAt")


class EncryptionError(Exception):
    """Raised when a payload cannot be sealed."""
    pass


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def export_jwk(key: bytes) -> dict:
    return {
        "kty": "oct",
        "k": _b64url_encode(key),
        "alg": "A256GCM",
        "ext": True,
        "key_ops": ["encrypt", "decrypt"],
    }


def import_jwk(jwk) -> bytes:
    """Returns the raw key bytes, or raises ValueError if the JWK is not an AES-256 key."""
    if not isinstance(jwk, dict) or jwk.get("kty") != "oct" or not isinstance(jwk.get("k"), str):
        raise ValueError("Not a symmetric JWK.")
    key = _b64url_decode(jwk["k"])
    if len(key) != KEY_SIZE:
        raise ValueError(f"Expected a {KEY_SIZE}-byte key, got {len(key)} bytes.")
    return key


class SecureStore:

    def __init__(self, storage, clock=time.time):
        self.storage = storage
        self.clock = clock

    # --- Key Management ---
    def _get_or_create_key(self) -> bytes:
        key_data = self.storage.get(ENCRYPTION_KEY_NAME)
        if key_data:
            try:
                return import_jwk(json.loads(key_data))
            except ValueError:
                # json.JSONDecodeError and binascii.Error are both ValueErrors
                if is_diagnostic_mode():
                    store_logger.warning("Failed to import existing key, generating new one.")

        key = AESGCM.generate_key(bit_length=256)
        self.storage.set(ENCRYPTION_KEY_NAME, json.dumps(export_jwk(key)))
        return key

    def _encrypt(self, plaintext: str) -> str:
        try:
            key = self._get_or_create_key()
            nonce = secrets.token_bytes(NONCE_SIZE)
            ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
            return base64.b64encode(nonce + ciphertext).decode("ascii")
        except Exception as e:
            if is_diagnostic_mode():
                store_logger.error(f"Encryption failed: {type(e).__name__}")
            raise EncryptionError("Failed to encrypt data") from e

    def _decode(self, stored: str):
        """
        Returns the envelope dict for a stored value, or None if it cannot be read.
        Plain JSON objects come from the unencrypted fallback in save().
        """
        if stored.lstrip().startswith("{"):
            try:
                body = json.loads(stored)
            except ValueError:
                return None
            return body if isinstance(body, dict) else None

        try:
            combined = base64.b64decode(stored, validate=True)
            if len(combined) <= NONCE_SIZE:
                return None
            key = self._get_or_create_key()
            plaintext = AESGCM(key).decrypt(combined[:NONCE_SIZE], combined[NONCE_SIZE:], None)
            body = json.loads(plaintext.decode("utf-8"))
        except Exception as e:
            # InvalidTag, bad base64, bad UTF-8 and bad JSON all mean "not ours"
            if is_diagnostic_mode():
                store_logger.warning(f"Decryption failed: {type(e).__name__}")
            return None
        return body if isinstance(body, dict) else None

    # --- Public Operations ---
    def save(self, key, payload) -> dict:
        """
        Seals `payload` (a dict) under `key` with a 7-day expiry.

        Returns {"saved": bool, "encrypted": bool, "error": str | None}. When
        encryption fails the envelope is written as plain JSON instead, so the
        user can still resume later.
        """
        timestamp_ms = now_ms(self.clock)
        body = dict(payload)
        body["timestamp"] = iso_timestamp(timestamp_ms)
        body["expiresAt"] = timestamp_ms + DATA_EXPIRY_MS

        try:
            serialized = json.dumps(body)
        except (TypeError, ValueError) as e:
            store_logger.error(f"Payload for '{key}' is not JSON-serializable: {type(e).__name__}")
            return {"saved": False, "encrypted": False, "error": str(e)}

        try:
            self.storage.set(key, self._encrypt(serialized))
            return {"saved": True, "encrypted": True, "error": None}
        except EncryptionError as e:
            store_logger.warning("Encryption unavailable, saving progress without encryption.")
            encryption_error = str(e)
        except StorageError as e:
            store_logger.error(f"Could not save '{key}': {e}")
            return {"saved": False, "encrypted": False, "error": str(e)}

        try:
            self.storage.set(key, serialized)
            return {"saved": True, "encrypted": False, "error": encryption_error}
        except StorageError as e:
            store_logger.error(f"Unencrypted fallback save for '{key}' failed: {e}")
            return {"saved": False, "encrypted": False, "error": str(e)}

    def load(self, key):
        """
        Returns the payload saved under `key` (metadata stripped), or None.
        Expired, corrupted and foreign records are deleted on the way out.
        """
        try:
            stored = self.storage.get(key)
        except StorageError as e:
            store_logger.error(f"Could not read '{key}': {e}")
            return None
        if stored is None:
            return None

        body = self._decode(stored)
        expires_at = body.get("expiresAt") if body else None
        if not isinstance(expires_at, (int, float)) or isinstance(expires_at, bool):
            if is_diagnostic_mode():
                store_logger.warning(f"Discarding unreadable record under '{key}'.")
            self.delete(key)
            return None

        if now_ms(self.clock) > expires_at:
            store_logger.info(f"Record under '{key}' has expired; removing it.")
            self.delete(key)
            return None

        return {k: v for k, v in body.items() if k not in ENVELOPE_METADATA_KEYS}

    def delete(self, key):
        try:
            self.storage.delete(key)
        except StorageError as e:
            store_logger.error(f"Could not delete '{key}': {e}")

    def purge_expired(self) -> int:
        """
        Scans keys under the recognized prefixes and removes expired or malformed JSON records.
        Returns how many keys were removed.
        """
        removed = 0
        current_ms = now_ms(self.clock)
        try:
            keys = [k for k in self.storage.keys() if k.startswith(RECOGNIZED_KEY_PREFIXES)]
        except StorageError as e:
            store_logger.error(f"Could not list storage keys: {e}")
            return 0

        for key in keys:
            try:
                record = json.loads(self.storage.get(key) or "{}")
            except ValueError:
                self.delete(key)
                removed += 1
                continue
            except StorageError as e:
                store_logger.error(f"Could not read '{key}' during purge: {e}")
                continue

            expires_at = record.get("expiresAt") if isinstance(record, dict) else None
            if isinstance(expires_at, (int, float)) and current_ms > expires_at:
                self.delete(key)
                removed += 1

        if removed:
            store_logger.info(f"Purged {removed} expired record(s).")
        return removed

    def secure_data_cleanup(self) -> int:
        """Removes the saved assessment and the encryption key, then purges expired records."""
        self.delete(ASSESSMENT_STORAGE_KEY)
        self.delete(ENCRYPTION_KEY_NAME)
        return self.purge_expired()
