import os
import secrets
from dataclasses import dataclass


@dataclass
class Settings:
    jwt_secret: str
    jwt_ttl_days: int = 7
    host: str = "0.0.0.0"
    port: int = 5017
    log_level: str = "INFO"
    api_url: str = "http://127.0.0.1:5017"
    badge_chance: float = 0.1
    leaderboard_default: int = 50
    leaderboard_max: int = 200

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> "Settings":
        """
        Read settings from COSMOS2048_* environment variables.

        Without COSMOS2048_JWT_SECRET a random secret is generated, so tokens
        do not survive a restart.
        """

        env = os.environ if env is None else env
        return cls(
            jwt_secret=env.get("COSMOS2048_JWT_SECRET") or secrets.token_hex(32),
            jwt_ttl_days=int(env.get("COSMOS2048_JWT_TTL_DAYS", "7")),
            host=env.get("COSMOS2048_HOST", "0.0.0.0"),
            port=int(env.get("COSMOS2048_PORT", "5017")),
            log_level=env.get("COSMOS2048_LOG_LEVEL", "INFO").upper(),
            api_url=env.get("COSMOS2048_API_URL", "http://127.0.0.1:5017"),
            badge_chance=float(env.get("COSMOS2048_BADGE_CHANCE", "0.1")),
            leaderboard_default=int(env.get("COSMOS2048_LEADERBOARD_DEFAULT", "50")),
            leaderboard_max=int(env.get("COSMOS2048_LEADERBOARD_MAX", "200")),
        )
