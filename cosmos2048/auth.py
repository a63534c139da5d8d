from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, jsonify, request

ALGORITHM = "HS256"


class AuthError(Exception):
    pass


def sign_token(payload: dict, secret: str, ttl_days: int = 7) -> str:
    now = datetime.now(timezone.utc)
    claims = {**payload, "iat": now, "exp": now + timedelta(days=ttl_days)}
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str) -> dict:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise AuthError(str(e)) from e


def require_auth(view):
    """Reject requests without a valid bearer token; the claims land in `g.user`."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization")
        if not header:
            return jsonify({"error": "No token provided"}), 401

        token = header.strip()
        if token == "Bearer":
            token = ""
        elif token.startswith("Bearer "):
            token = token[len("Bearer "):].strip()
        if not token:
            return jsonify({"error": "Invalid token format"}), 401

        try:
            g.user = verify_token(token, current_app.config["JWT_SECRET"])
        except AuthError as e:
            current_app.logger.info("rejected token: %s", e)
            return jsonify({"error": "Invalid token"}), 401
        if not isinstance(g.user.get("address"), str) or not g.user["address"]:
            current_app.logger.info("rejected token without address claim")
            return jsonify({"error": "Invalid token"}), 401
        return view(*args, **kwargs)

    return wrapper
