from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Class to store all the settings of the library."""

    LOG_LEVEL: str = "WARNING"
    FILE_ENCODING: str = "utf-8"
    OVERALL_KEY: str = "Overall"

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_prefix="INCREMENTAL_TREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise the settings sources order.

        Order: initialization, environment variables, dotenv, then file secrets.
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )


settings = Settings()  # type: ignore
