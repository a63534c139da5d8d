import logging
import math
import random
import string
from dataclasses import asdict
from datetime import datetime, timezone

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from cosmos2048.auth import require_auth, sign_token
from cosmos2048.config import Settings
from cosmos2048.rewards import (
    MINT_BADGE,
    BadgeMinter,
    MintError,
    MintRequest,
    MintResult,
    StubMinter,
    prize_by_id,
    spin_outcome,
)
from cosmos2048.store import MemoryStore
from cosmos2048.tokens import tile_rarity

logger = logging.getLogger(__name__)

SERVICE_NAME = "cosmos-2048-api"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _mint_json(result: MintResult) -> dict:
    return {
        "ok": result.ok,
        "txHash": result.tx_hash,
        "tokenId": result.token_id,
        "recipient": result.recipient,
        "minter": result.minter,
        "timestamp": result.timestamp,
    }


def create_app(
    settings: Settings | None = None,
    store: MemoryStore | None = None,
    minter: BadgeMinter | None = None,
    rng: random.Random | None = None,
) -> Flask:
    settings = settings or Settings.from_env()
    store = store or MemoryStore()
    minter = minter or StubMinter()
    rng = rng or random.Random()

    app = Flask(__name__)
    app.config.from_mapping(
        JWT_SECRET=settings.jwt_secret,
        JWT_TTL_DAYS=settings.jwt_ttl_days,
        BADGE_CHANCE=settings.badge_chance,
        LEADERBOARD_DEFAULT=settings.leaderboard_default,
        LEADERBOARD_MAX=settings.leaderboard_max,
    )

    def issue(address: str) -> str:
        return sign_token(
            {"address": address}, app.config["JWT_SECRET"], app.config["JWT_TTL_DAYS"]
        )

    @app.after_request
    def allow_cross_origin(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        return response

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        message = "Route not found" if e.code == 404 else e.description
        return jsonify({"error": message}), e.code

    @app.errorhandler(Exception)
    def server_error(e: Exception):
        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500

    @app.get("/health")
    def health():
        return jsonify({"ok": True, "timestamp": _timestamp(), "service": SERVICE_NAME})

    @app.post("/auth/guest")
    def auth_guest():
        alphabet = string.ascii_lowercase + string.digits
        address = "guest#" + "".join(rng.choice(alphabet) for _ in range(6))
        user = store.upsert_user(address)
        return jsonify({"token": issue(user.address), "address": user.address}), 201

    @app.post("/auth/wallet")
    def auth_wallet():
        address = _body().get("address")
        if not isinstance(address, str) or not address.strip():
            return jsonify({"error": "Address is required"}), 400
        user = store.upsert_user(address)
        return jsonify({"token": issue(user.address), "address": user.address})

    @app.post("/scores")
    @require_auth
    def submit_score():
        body = _body()
        score = body.get("score")
        if not _is_number(score) or score < 0:
            return jsonify({"error": "Valid score is required"}), 400

        run_id = body.get("runId")
        commit = body.get("commit")
        doc = store.add_score(
            g.user["address"],
            score,
            run_id=None if run_id is None else str(run_id),
            commit=None if commit is None else str(commit),
        )
        app.logger.info("score %s saved for %s", doc.score, doc.address)
        return (
            jsonify(
                {
                    "message": "Score saved successfully",
                    "score": {
                        "address": doc.address,
                        "score": doc.score,
                        "createdAt": doc.created_at.isoformat(),
                    },
                }
            ),
            201,
        )

    @app.get("/leaderboard")
    def leaderboard():
        try:
            limit = int(request.args.get("limit", ""))
        except ValueError:
            limit = 0
        if limit <= 0:
            limit = app.config["LEADERBOARD_DEFAULT"]
        limit = min(limit, app.config["LEADERBOARD_MAX"])

        entries = [
            {
                "rank": e.rank,
                "address": e.address,
                "bestScore": e.best_score,
                "at": e.at.isoformat(),
            }
            for e in store.leaderboard(limit)
        ]
        return jsonify({"leaderboard": entries, "total": len(entries)})

    @app.post("/wheel/spin")
    @require_auth
    def wheel_spin():
        seed = _body().get("seed")
        if seed is not None and not _is_number(seed):
            return jsonify({"error": "Seed must be a number"}), 400

        outcome = spin_outcome(seed, app.config["BADGE_CHANCE"], rng)
        won = outcome == MINT_BADGE
        return jsonify(
            {
                "outcome": outcome,
                "player": g.user["address"],
                "timestamp": _timestamp(),
                "message": (
                    "Congratulations! You won a badge!"
                    if won
                    else "Better luck next time!"
                ),
            }
        )

    @app.post("/mint/badge")
    @require_auth
    def mint_badge():
        body = _body()
        address = g.user["address"]
        recipient = body.get("recipient") or address
        if not isinstance(recipient, str) or not recipient.strip():
            return jsonify({"error": "Recipient address is required"}), 400

        score = body.get("score", 0)
        max_tile = body.get("maxTile", 0)
        if not _is_number(score) or not _is_number(max_tile):
            return jsonify({"error": "score and maxTile must be numbers"}), 400

        prize_id = body.get("prize") or f"{tile_rarity(int(max_tile))}_badge"
        prize = prize_by_id(prize_id)
        if prize is None:
            return jsonify({"error": f"Unknown prize: {prize_id}"}), 400

        try:
            result = minter.mint(
                MintRequest(
                    recipient=recipient.strip(),
                    minter=address,
                    prize=prize,
                    score=int(score),
                    max_tile=int(max_tile),
                )
            )
        except MintError as e:
            return jsonify({"error": str(e)}), 400

        payload = _mint_json(result)
        payload["message"] = "Badge minted successfully (stub response)"
        return jsonify(payload)

    @app.get("/mint/badges/<path:address>")
    def owned_badges(address: str):
        badges = [
            {**_mint_json(b), "metadata": b.metadata}
            for b in minter.owned_badges(address)
        ]
        return jsonify({"address": address, "badges": badges, "total": len(badges)})

    logger.debug("app created with settings %s", {**asdict(settings), "jwt_secret": "***"})
    return app
