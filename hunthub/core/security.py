"""Creator bearer tokens (HMAC-signed) and play session id checks."""
import base64
import hmac
import hashlib
import re
import time
import uuid

from hunthub.core.config import get_settings

SESSION_ID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE
)


def _secret() -> bytes:
    settings = get_settings()
    key = settings.secret_key
    return key.encode("utf-8") if isinstance(key, str) else key


# Token: base64(user_id:timestamp).hmac
def _sign_payload(payload: bytes) -> str:
    sig = hmac.new(_secret(), payload, hashlib.sha256).hexdigest()
    return base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=") + "." + sig


def _verify_sig(payload: bytes, sig: str) -> bool:
    expected = hmac.new(_secret(), payload, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, sig)


def create_access_token(user_id: str) -> str:
    """Create a signed bearer token for a creator."""
    ts = int(time.time())
    payload = f"{user_id}:{ts}".encode("utf-8")
    return _sign_payload(payload)


def verify_access_token(token: str) -> str | None:
    """Verify signed token and return user_id if valid; None otherwise."""
    if not token or "." not in token:
        return None
    try:
        encoded, sig = token.rsplit(".", 1)
        pad = 4 - len(encoded) % 4
        if pad != 4:
            encoded += "=" * pad
        payload = base64.urlsafe_b64decode(encoded)
        if not _verify_sig(payload, sig):
            return None
        user_id, ts = payload.decode("utf-8").rsplit(":", 1)
        if not user_id:
            return None
        if abs(time.time() - int(ts)) > get_settings().auth_token_max_age:
            return None
        return user_id
    except (ValueError, UnicodeDecodeError):
        return None


def generate_session_id() -> str:
    return str(uuid.uuid4())


def is_valid_session_id(value: str) -> bool:
    return bool(value) and SESSION_ID_RE.match(value) is not None
