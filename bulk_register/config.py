"""
Configuration for bulk domain registration.

`Settings` loads environment variables (and `.env`) via Pydantic Settings. It is the
only object that touches ambient state: `build_run_config` validates it once at
startup and produces an immutable `RunConfig` that is passed explicitly to every
component afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bulk_register.errors import ConfigError
from bulk_register.utils.logging import get_logger

log = get_logger(__name__)


class Settings(BaseSettings):
    # Network
    network: str = Field("localhost", alias="NETWORK")
    rpc_url: Optional[str] = Field(None, alias="RPC_URL")
    infura_api_key: Optional[str] = Field(None, alias="INFURA_API_KEY")

    # Signers
    deployer_private_key: Optional[str] = Field(None, alias="DEPLOYER_PRIVATE_KEY")
    owner_private_key: Optional[str] = Field(None, alias="OWNER_PRIVATE_KEY")

    # Naming
    base_domain: Optional[str] = Field(None, alias="BASE_DOMAIN")

    # Files
    deployments_dir: Path = Field(Path("deployments"), alias="DEPLOYMENTS_DIR")
    csv_path: Path = Field(Path("domains.csv"), alias="DOMAINS_CSV")
    progress_path: Path = Field(Path("progress.json"), alias="PROGRESS_FILE")

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    # Registration policy
    max_attempts: int = Field(1, alias="REGISTER_MAX_ATTEMPTS")
    retry_backoff_seconds: float = Field(2.0, alias="REGISTER_RETRY_BACKOFF")
    confirmation_timeout: float = Field(120.0, alias="CONFIRMATION_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


@dataclass(frozen=True)
class NetworkProfile:
    """Where a network's deployments live and how to reach its RPC endpoint."""

    name: str
    deployment_dirname: str
    rpc_template: str
    local: bool = False

    @property
    def needs_api_key(self) -> bool:
        return "{api_key}" in self.rpc_template

    def rpc_url(self, api_key: Optional[str]) -> str:
        return self.rpc_template.format(api_key=api_key or "")


LOCALHOST = NetworkProfile(
    name="localhost",
    deployment_dirname="localhost",
    rpc_template="http://localhost:8545",
    local=True,
)

NETWORKS: Dict[str, NetworkProfile] = {
    "lineaSepolia": NetworkProfile(
        name="lineaSepolia",
        deployment_dirname="LineaSepolia",
        rpc_template="https://linea-sepolia.infura.io/v3/{api_key}",
    ),
    "mainnet": NetworkProfile(
        name="mainnet",
        deployment_dirname="mainnet",
        rpc_template="https://linea-mainnet.infura.io/v3/{api_key}",
    ),
    "localhost": LOCALHOST,
}


def resolve_network(name: str) -> NetworkProfile:
    """
    Map a network name to its profile.

    Unknown names reuse the localhost deployments and RPC endpoint, but only the
    literal `localhost` network signs with the node's unlocked accounts.
    """
    profile = NETWORKS.get(name)
    if profile is None:
        log.warning(
            f"Unknown network '{name}', using localhost deployments and RPC",
            extra={"network": name},
        )
        return replace(LOCALHOST, name=name, local=False)
    return profile


@dataclass(frozen=True)
class RunConfig:
    """Validated, immutable configuration for one registration run."""

    network: NetworkProfile
    rpc_url: str
    base_domain: str
    deployer_private_key: Optional[str]
    owner_private_key: Optional[str]
    deployments_dir: Path
    csv_path: Path
    progress_path: Path
    max_attempts: int = 1
    retry_backoff_seconds: float = 2.0
    confirmation_timeout: float = 120.0

    @property
    def registrar_deployment(self) -> Path:
        return self.deployments_dir / self.network.deployment_dirname / "ETHRegistrarController.json"

    @property
    def resolver_deployment(self) -> Path:
        return self.deployments_dir / self.network.deployment_dirname / "PublicResolver.json"


def _require(value: Optional[str], key: str) -> str:
    if not value:
        raise ConfigError(f"Environment variable {key} is not set.")
    return value


def build_run_config(settings: Settings) -> RunConfig:
    """
    Validate settings and freeze them into a `RunConfig`.

    Raises
    ------
    ConfigError
        If a value required for the selected network is missing or invalid.
    """
    network = resolve_network(settings.network)
    base_domain = _require(settings.base_domain, "BASE_DOMAIN")

    if settings.rpc_url:
        rpc_url = settings.rpc_url
    elif network.needs_api_key:
        rpc_url = network.rpc_url(_require(settings.infura_api_key, "INFURA_API_KEY"))
    else:
        rpc_url = network.rpc_url(None)

    deployer_key = settings.deployer_private_key
    owner_key = settings.owner_private_key
    if not network.local:
        deployer_key = _require(deployer_key, "DEPLOYER_PRIVATE_KEY")
        owner_key = _require(owner_key, "OWNER_PRIVATE_KEY")

    if settings.max_attempts < 1:
        raise ConfigError("REGISTER_MAX_ATTEMPTS must be at least 1.")

    return RunConfig(
        network=network,
        rpc_url=rpc_url,
        base_domain=base_domain,
        deployer_private_key=deployer_key,
        owner_private_key=owner_key,
        deployments_dir=settings.deployments_dir,
        csv_path=settings.csv_path,
        progress_path=settings.progress_path,
        max_attempts=settings.max_attempts,
        retry_backoff_seconds=settings.retry_backoff_seconds,
        confirmation_timeout=settings.confirmation_timeout,
    )


__all__ = [
    "Settings",
    "get_settings",
    "NetworkProfile",
    "NETWORKS",
    "resolve_network",
    "RunConfig",
    "build_run_config",
]
