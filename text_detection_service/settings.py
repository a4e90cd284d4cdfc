from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", validate_assignment=True)

    TEXT_DETECTION_SERVICE_VERSION: str = Field(
        "dev",
        min_length=1,
        validation_alias=AliasChoices("TEXT_DETECTION_SERVICE_VERSION", "TEXT_DETECTION_SERVICE_IMAGE_RELEASE_VERSION"),
    )
    TEXT_DETECTION_SERVICE_LOG_LEVEL: int = Field(20, ge=0, le=50)
    TEXT_DETECTION_SERVICE_DEBUG_MODE: bool = Field(False)

    TEXT_DETECTION_SERVICE_PORT: int = Field(
        8081,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("TEXT_DETECTION_SERVICE_PORT", "PORT", "port"),
    )

    TEXT_DETECTION_SERVICE_UPLOAD_DIR: str | None = None
    TEXT_DETECTION_SERVICE_UPLOAD_CHUNK_SIZE: int = Field(1024 * 1024, gt=0)

    # seconds to wait on the detection provider before giving up on the request
    TEXT_DETECTION_SERVICE_PROVIDER_TIMEOUT: float = Field(30.0, gt=0)

    TEXT_DETECTION_AWS_ACCESS_KEY_ID: str | None = Field(
        None,
        validation_alias=AliasChoices("TEXT_DETECTION_AWS_ACCESS_KEY_ID", "AWS_ACCESS_KEY_ID"),
    )
    TEXT_DETECTION_AWS_SECRET_ACCESS_KEY: SecretStr | None = Field(
        None,
        validation_alias=AliasChoices("TEXT_DETECTION_AWS_SECRET_ACCESS_KEY", "AWS_SECRET_ACCESS_KEY"),
    )
    TEXT_DETECTION_AWS_REGION: str = Field(
        "us-east-1",
        min_length=1,
        validation_alias=AliasChoices("TEXT_DETECTION_AWS_REGION", "AWS_REGION", "AWS_DEFAULT_REGION"),
    )

    @field_validator("TEXT_DETECTION_AWS_ACCESS_KEY_ID", "TEXT_DETECTION_SERVICE_UPLOAD_DIR", mode="before")
    @classmethod
    def empty_str_to_none(cls, value: str | None) -> str | None:
        if value is not None and not str(value).strip():
            return None
        return value

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LOG_LEVEL(self) -> int:
        # 50 - CRITICAL, 40 - ERROR, 30 - WARNING, 20 - INFO, 10 - DEBUG, 0 - NOTSET
        return self.TEXT_DETECTION_SERVICE_LOG_LEVEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DEBUG_MODE(self) -> bool:
        return self.TEXT_DETECTION_SERVICE_DEBUG_MODE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def PORT(self) -> int:
        return self.TEXT_DETECTION_SERVICE_PORT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ROOT_DIR(self) -> str:
        return str(Path(__file__).resolve().parents[1])

    @computed_field  # type: ignore[prop-decorator]
    @property
    def UPLOAD_DIR(self) -> str:
        return self.TEXT_DETECTION_SERVICE_UPLOAD_DIR or str(Path(self.ROOT_DIR) / "images")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def UPLOAD_CHUNK_SIZE(self) -> int:
        return self.TEXT_DETECTION_SERVICE_UPLOAD_CHUNK_SIZE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def PROVIDER_TIMEOUT(self) -> float:
        return self.TEXT_DETECTION_SERVICE_PROVIDER_TIMEOUT

    @computed_field  # type: ignore[prop-decorator]
    @property
    def AWS_REGION(self) -> str:
        return self.TEXT_DETECTION_AWS_REGION


settings = Settings() # type: ignore[call-arg]
