import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .exceptions import ConfigError

# Load environment variables from .env file
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # API Keys
    helius_api_key: str

    # API URLs
    helius_rpc_url: str = "https://mainnet.helius-rpc.com/"
    helius_api_url: str = "https://api-mainnet.helius-rpc.com/v0"

    # Analysis settings
    default_limit: int = 50
    max_pages: int = 15
    page_size: int = 100  # fixed provider page size, not read from the environment
    oversample_factor: int = 8  # raw transfer events collected per wanted wallet
    enrich_concurrency: int = 5

    # Output settings
    output_format: str = "table"  # table, json

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        helius_key = os.getenv("HELIUS_API_KEY")
        if not helius_key:
            raise ConfigError("Missing HELIUS_API_KEY env var.")

        try:
            return cls(
                helius_api_key=helius_key,
                helius_rpc_url=os.getenv(
                    "HELIUS_RPC_URL", "https://mainnet.helius-rpc.com/"),
                helius_api_url=os.getenv(
                    "HELIUS_API_URL", "https://api-mainnet.helius-rpc.com/v0"),
                default_limit=int(os.getenv("DEFAULT_LIMIT", "50")),
                max_pages=int(os.getenv("MAX_PAGES", "15")),
                oversample_factor=int(os.getenv("OVERSAMPLE_FACTOR", "8")),
                enrich_concurrency=int(os.getenv("ENRICH_CONCURRENCY", "5")),
                output_format=os.getenv("OUTPUT_FORMAT", "table"),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e
