import tomllib
from pathlib import Path

import tomlkit
from pydantic import BaseModel, HttpUrl, PositiveFloat, WebsocketUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from poolforge.logging import logger
from poolforge.types.aliases import ChainId

CONFIG_DIR = Path.home() / ".config" / "poolforge"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class DeploymentSettings(BaseModel):
    # Seconds that fetched fee parameters stay valid before a read triggers a new fetch
    fee_cache_ttl: PositiveFloat = 15.0

    # Seconds to wait for a transaction receipt. Unset means wait indefinitely.
    receipt_timeout: PositiveFloat | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POOLFORGE_", env_nested_delimiter="__")

    deployment: DeploymentSettings = DeploymentSettings()
    rpc: dict[
        ChainId,
        HttpUrl | WebsocketUrl | Path,
    ] = {}

    @field_validator("rpc", mode="after")
    def validate_paths(
        cls,  # noqa: N805
        rpc_dict: dict[ChainId, HttpUrl | WebsocketUrl | Path],
    ) -> dict[ChainId, HttpUrl | WebsocketUrl | Path]:
        """
        Validate the endpoints.

        This will convert all file paths to an absolute reference, leaving HTTP and WS URLs as-is.
        """

        return {
            chain_id: endpoint.expanduser().absolute() if isinstance(endpoint, Path) else endpoint
            for chain_id, endpoint in rpc_dict.items()
        }


def load_config_from_file(config_path: Path) -> Settings:
    return Settings.model_validate(
        tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings) -> None:
    CONFIG_FILE.write_text(
        tomlkit.dumps(
            config.model_dump(mode="json", exclude_none=True),
        ),
    )


if not CONFIG_DIR.exists():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Created a configuration directory at {CONFIG_DIR}.")

if CONFIG_FILE.exists():
    settings = load_config_from_file(CONFIG_FILE)
else:
    settings = Settings()
    save_config_to_file(settings)
    logger.info(f"Created a configuration file at {CONFIG_FILE}.")
