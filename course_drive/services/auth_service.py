"""Firebase ID token helpers."""

import re

BEARER_RE = re.compile(r'^Bearer\s+(.+)$', re.IGNORECASE)


def extract_bearer_token(request):
    match = BEARER_RE.match(str(request.headers.get('Authorization', '') or '').strip())
    if not match:
        return ''
    return match.group(1).strip()


def verify_firebase_token(request, auth_module, logger):
    """Return decoded Firebase token dict, or None when invalid, missing or unverifiable."""
    token = extract_bearer_token(request)
    if not token or auth_module is None:
        return None
    try:
        return auth_module.verify_id_token(token)
    except Exception as exc:
        if logger is not None:
            logger.info(f"Token verification failed: {exc}")
        return None
