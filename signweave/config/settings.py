from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsConfig(BaseSettings):
    """Shared AWS credentials"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"

    model_config = SettingsConfigDict(
        env_prefix="AWS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PollyConfig(BaseSettings):
    """Amazon Polly configuration for the speech stage."""

    region: str = "us-east-1"
    voice_id: str = "Joanna"
    engine: str = "neural"
    sample_rate: int = Field(
        default=16000,
        description="Polly only emits raw PCM at 8000 or 16000 Hz.",
    )

    model_config = SettingsConfigDict(
        env_prefix="POLLY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    text_model_id: str = Field(
        default="amazon.nova-lite-v1:0",
        validation_alias="BEDROCK_TEXT_MODEL_ID",
    )
    image_model_id: str = Field(
        default="amazon.nova-canvas-v1:0",
        validation_alias="BEDROCK_IMAGE_MODEL_ID",
    )
    max_tokens: int = Field(
        default=1024,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=4096,
    )
    temperature: float = Field(
        default=0.2,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    image_width: int = Field(default=512, validation_alias="BEDROCK_IMAGE_WIDTH")
    image_height: int = Field(default=512, validation_alias="BEDROCK_IMAGE_HEIGHT")
    image_cfg_scale: float = Field(
        default=8.0,
        validation_alias="BEDROCK_IMAGE_CFG_SCALE",
        ge=1.1,
        le=10.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranslationConfig(BaseSettings):
    """Input limits and pipeline switches for the translation flows."""

    max_text_length: int = Field(default=500, ge=1)
    video_mime_type: str = "video/webm"
    refine_frame_prompt: bool = Field(
        default=True,
        description="Ask the text model for a frame prompt before generating the image.",
    )

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATION_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "SignWeave Translation Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/translation_pipeline.log"

    # AWS
    aws: AwsConfig = Field(default_factory=AwsConfig)

    # Polly
    polly: PollyConfig = Field(default_factory=PollyConfig)

    # Bedrock
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)

    # Translation
    translation: TranslationConfig = Field(default_factory=TranslationConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
