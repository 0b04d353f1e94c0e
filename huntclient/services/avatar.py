from __future__ import annotations
import secrets, string
from urllib.parse import urlencode
from huntclient.config import Settings, settings as default_settings
from huntclient.gateway import ApiGateway

ALPHABET = string.ascii_lowercase + string.digits

def avatar_choices(count: int = 8) -> list[str]:
    return [f"avatar-{i}-{''.join(secrets.choice(ALPHABET) for _ in range(13))}" for i in range(count)]

def avatar_url(seed: str | None, size: int = 60, cfg: Settings | None = None) -> str:
    cfg = cfg or default_settings
    query = urlencode({"seed": seed or "default", "size": size})
    return f"{cfg.avatar_base_url}?{query}"

async def update_avatar(gateway: ApiGateway, seed: str) -> dict:
    if not seed.strip():
        raise ValueError("avatar seed must not be empty")
    return await gateway.put("/team/avatar", json={"avatarSeed": seed})
