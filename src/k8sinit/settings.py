"""Parser settings resolved from arguments and the environment."""

from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from k8sinit.errors import VersionParseError
from k8sinit.models import SettingsModel
from k8sinit.versions import MAXIMUM_VERSION_SUPPORTED, MINIMUM_VERSION_REQUIRED, VersionWindow


class ParserSettings(SettingsModel):
    """Settings of a configuration parser.

    Values may be provided explicitly or through `K8SINIT_*`
    environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix='K8SINIT_',
    )

    minimum_version: str = Field(
        default=MINIMUM_VERSION_REQUIRED,
        title='Minimum version',
        description='Lowest configuration file version accepted.',
    )

    maximum_version: str = Field(
        default=MAXIMUM_VERSION_SUPPORTED,
        title='Maximum version',
        description='Highest configuration file version accepted.',
    )

    @model_validator(mode='after')
    def _check_window(self) -> Self:
        """Ensure both boundaries parse and form a non-empty window."""
        try:
            self.version_window()

        except VersionParseError as base:
            raise ValueError(base.message) from base

        return self

    def version_window(self) -> VersionWindow:
        """Build the supported version window.

        Returns:
            Window between the minimum and maximum versions.
        """
        return VersionWindow.from_strings(self.minimum_version, self.maximum_version)
