"""CLI utilities for k8sinit configuration files.

Configuration files are validated the same way the bootstrapping
process reads them: as streams of documents applied in order.
"""

import warnings
from json import dumps
from typing import IO, TYPE_CHECKING

from click import File, argument, echo, group, option
from pydantic import ValidationError

from k8sinit.core import ConfigurationParser
from k8sinit.errors import ConfigurationError, ConfigurationWarning
from k8sinit.jsonschema import SchemaGenerator
from k8sinit.settings import ParserSettings

if TYPE_CHECKING:
    from k8sinit.schema import MultiPartConfiguration

InputFile = File('rb')


@group(help='Command-line utilities for k8sinit configuration files.')
def cli() -> None:
    """Root CLI group for k8sinit tools."""
    return None


@cli.command(
    name='schema',
    help='Print the configuration JSON Schema to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(SchemaGenerator.make_schema())


def _dump_parts(config: 'MultiPartConfiguration') -> str:
    """Serialize configuration parts using wire keys.

    Args:
        config: Parsed multi-part configuration.

    Returns:
        JSON list with a mapping per part.
    """
    return dumps(
        [part.model_dump(mode='json', by_alias=True) for part in config.parts],
        ensure_ascii=False,
        indent=4,
    )


@cli.command(
    name='validate',
    help=(
        'Validate configuration files. Each file may hold several '
        'YAML documents; empty documents are skipped.'
    ),
)
@option(
    '--dump',
    is_flag=True,
    help='Print parsed parts of each file as JSON.',
)
@option(
    '--minimum-version',
    help='Override the minimum supported configuration file version.',
)
@option(
    '--maximum-version',
    help='Override the maximum supported configuration file version.',
)
@argument(
    'files',
    type=InputFile,
    nargs=-1,
)
def validate(files: tuple[IO[bytes], ...], dump: bool,
             minimum_version: str | None, maximum_version: str | None) -> None:
    """Validate configuration files.

    Args:
        files: Configuration files, standard input when empty.
        dump: Whether to print parsed parts.
        minimum_version: Optional minimum version override.
        maximum_version: Optional maximum version override.
    """
    overrides = {
        key: value
        for key, value in (
            ('minimum_version', minimum_version),
            ('maximum_version', maximum_version),
        )
        if value is not None
    }

    try:
        parser = ConfigurationParser(ParserSettings(**overrides))

    except ValidationError as error:
        echo(f'Invalid settings: {error}', err=True)
        raise SystemExit(2) from error

    failed = False
    for stream in files or (InputFile.convert('-', None, None),):
        name = getattr(stream, 'name', '-')

        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always', ConfigurationWarning)
                config = parser.parse_multipart(stream)

        except ConfigurationError as error:
            echo(f'{name}: {error}', err=True)
            failed = True
            continue

        for item in caught:
            echo(f'{name}: WARNING: {item.message}', err=True)

        echo(f'{name}: OK ({len(config)} parts)')
        if dump:
            echo(_dump_parts(config))

    if failed:
        raise SystemExit(1)


if __name__ == '__main__':
    cli()
