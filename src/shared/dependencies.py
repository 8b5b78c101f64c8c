from fastapi import Header, HTTPException


def current_actor(x_user_id: str | None = Header(None)) -> str:
    """The acting user, as established by the session layer in front of this API."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id
