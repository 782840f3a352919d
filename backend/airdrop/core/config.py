from pydantic_settings import BaseSettings
from typing import List
import json


class Settings(BaseSettings):
    # Application
    app_name: str = "Airdrop Claims API"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    # Airdrop instance (immutable once the engine is built)
    merkle_root: str = "0x" + "00" * 32
    trusted_signer: str = ""
    # Privileged caller allowed to disable signature claims
    owner_address: str = ""
    # EIP-712 domain: chain id + this instance's own address bind signatures to one deployment
    chain_id: int = 1337
    airdrop_address: str = ""
    eip712_name: str = "Airdrop"
    eip712_version: str = "v1"

    # Payout pool
    payout_token_symbol: str = "SHIP"
    # Initial pool funding in smallest units (in-process vault)
    payout_pool_balance: int = 0

    # When true, signature claims must pay out to the caller itself
    require_signature_recipient_match: bool = False
    # Address a Merkle claim is recorded against: "caller" or "recipient"
    merkle_claim_key: str = "caller"

    # Caller authentication challenges expire after this many minutes
    auth_message_ttl_minutes: int = 5

    # Database (Tortoise ORM format)
    database_url: str = "sqlite://db.sqlite3"

    @property
    def cleaned_database_url(self) -> str:
        """Strip problematic query parameters like sslmode from database_url."""
        url = self.database_url
        if "?" in url:
            base, query = url.split("?", 1)
            params = query.split("&")
            filtered_params = [p for p in params if not p.startswith(("sslmode=", "ssl_mode="))]
            if filtered_params:
                return f"{base}?{'&'.join(filtered_params)}"
            return base
        return url

    @property
    def tortoise_config(self) -> dict:
        """Tortoise ORM configuration."""
        return {
            "connections": {
                "default": self.cleaned_database_url,
            },
            "apps": {
                "models": {
                    "models": ["airdrop.models.claims"],
                    "default_connection": "default",
                },
            },
        }

    # CORS
    cors_origins: str = '["http://localhost:3000","http://localhost:8080"]'

    @property
    def cors_origins_list(self) -> List[str]:
        return json.loads(self.cors_origins)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


settings = Settings()
