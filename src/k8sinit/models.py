"""Base Pydantic models for configuration elements.

This module defines the foundational model classes used by all
configuration structures. Models are immutable and reject unknown
fields unless validated in lenient mode.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

#: Validation context key switching models to lenient decoding.
LENIENT_CONTEXT = 'lenient'


class SchemaModel(BaseModel):
    """Base immutable model for all configuration elements.

    Design principles enforced by this model:
        - Immutability: parsed configuration cannot be modified after
          creation, so every consumer sees the same values.
        - Strict schema validation: unknown or extra fields are rejected
          to surface typos, unless the validation context enables the
          lenient mode, in which case they are silently dropped.

    All configuration models must inherit from this class.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )

    @model_validator(mode='before')
    @classmethod
    def _drop_unknown_fields(cls, data: Any, info: ValidationInfo) -> Any:  # noqa: ANN401
        """Drop fields unknown to the model in lenient mode.

        Args:
            data: Raw input of the model.
            info: Validation info carrying the validation context.

        Returns:
            The input, without unknown keys if lenient mode is enabled.
        """
        if not isinstance(data, dict) or not (info.context or {}).get(LENIENT_CONTEXT):
            return data

        known = {
            field.alias or name
            for name, field in cls.model_fields.items()
        }

        return {
            key: value
            for key, value in data.items()
            if key in known
        }


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored,
          so unrelated environment variables never break resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
