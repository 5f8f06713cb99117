"""ID generation utility."""

import secrets


def gen_id(prefix: str) -> str:
    """Generate prefixed IDs: msg_xxx, prt_xxx, run_xxx, ses_xxx"""
    return f"{prefix}{secrets.token_urlsafe(12)}"
