"""Configuration document models.

A configuration document describes addons to enable or disable, extra
arguments of the local kubelet and kube-apiserver, and extra Subject
Alternative Names of the API server certificate. A stream of documents
forms a multi-part configuration applied in order.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from k8sinit.models import SchemaModel


def _null_as(empty: Any) -> BeforeValidator:  # noqa: ANN401
    """Build a validator replacing `null` with a zero value."""
    return BeforeValidator(lambda value: empty if value is None else value)


#: String where `null` is the empty string. Plain YAML scalars are read
#: as written, so `--max-pods: 110` holds the string `110`.
type ScalarString = Annotated[str, _null_as('')]

#: String or `null`, where `null` is kept as a distinct value.
type OptionalString = str | None

#: Extra arguments of a cluster component, where `null` removes the argument.
type Arguments = Annotated[dict[ScalarString, OptionalString], _null_as({})]


class AddonConfiguration(SchemaModel):
    """An addon to be enabled or disabled."""

    name: ScalarString = Field(
        default='',
        title='Addon name',
        description='Name of the addon to configure.',
    )

    disable: Annotated[bool, _null_as(False)] = Field(
        default=False,
        title='Disable',
        description='Disable the addon instead of enabling it.',
    )

    arguments: Annotated[tuple[ScalarString, ...], _null_as(())] = Field(
        default=(),
        alias='args',
        title='Arguments',
        description='Optional arguments passed to the addon enable or disable operation.',
    )


class Configuration(SchemaModel):
    """Top-level definition of a configuration document."""

    version: ScalarString = Field(
        default='',
        title='Version',
        description='Semantic version of the configuration file format.',
        examples=['0.1.0'],
    )

    addons: Annotated[tuple[AddonConfiguration, ...], _null_as(())] = Field(
        default=(),
        title='Addons',
        description='Addons to enable and/or disable, applied in order.',
    )

    extra_kubelet_args: Arguments = Field(
        default_factory=dict,
        alias='extraKubeletArgs',
        title='Extra kubelet arguments',
        description=(
            'Extra arguments to add to the local node kubelet.\n'
            'Set a value to null to remove it from the arguments.'
        ),
    )

    extra_kube_apiserver_args: Arguments = Field(
        default_factory=dict,
        alias='extraKubeAPIServerArgs',
        title='Extra kube-apiserver arguments',
        description=(
            'Extra arguments to add to the local node kube-apiserver.\n'
            'Set a value to null to remove it from the arguments.'
        ),
    )

    extra_sans: Annotated[tuple[ScalarString, ...], _null_as(())] = Field(
        default=(),
        alias='extraSANs',
        title='Extra SANs',
        description='Extra Subject Alternative Names to add to the local API server.',
    )

    def is_empty(self) -> bool:
        """Check whether all configuration values are zero or empty."""
        return not (
            self.version
            or self.addons
            or self.extra_kubelet_args
            or self.extra_kube_apiserver_args
            or self.extra_sans
        )


class MultiPartConfiguration(SchemaModel):
    """A configuration split into multiple parts."""

    parts: tuple[Configuration, ...] = Field(
        default=(),
        title='Parts',
        description='Configuration objects that are meant to be applied in order.',
    )

    def __len__(self) -> int:
        """Number of parts."""
        return len(self.parts)
