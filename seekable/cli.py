import asyncio
import json
import mimetypes
import pathlib
from enum import Enum
from typing import Any, Callable, Optional, Type, TypeVar, Union

import click
from granian.constants import Interfaces as ServerInterfaces
from granian.errors import ConfigurationError as ServerConfigurationError, FatalError
from granian.log import LogLevels as ServerLogLevels
from granian.server.embed import Server

from . import asgi, rsgi
from .constants import CHUNK_SIZE, Interfaces, MultiRangePolicies
from .errors import SeekableError
from .log import LogLevels, configure_logging, logger


_AnyCallable = Callable[..., Any]
FC = TypeVar('FC', bound=Union[_AnyCallable, click.Command])

APPS = {Interfaces.ASGI: asgi.SeekableApp, Interfaces.RSGI: rsgi.SeekableApp}


class EnumType(click.Choice):
    def __init__(self, enum: Enum, case_sensitive=False) -> None:
        self.__enum = enum
        super().__init__(choices=[item.value for item in enum], case_sensitive=case_sensitive)

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> Enum:
        if value is None or isinstance(value, Enum):
            return value

        converted_str = super().convert(value, param, ctx)
        return self.__enum(converted_str)


def _pretty_print_default(value: Optional[bool]) -> Optional[str]:
    if isinstance(value, bool):
        return 'enabled' if value else 'disabled'
    if isinstance(value, Enum):
        return value.value
    return value


def option(*param_decls: str, cls: Optional[Type[click.Option]] = None, **attrs: Any) -> Callable[[FC], FC]:
    attrs['show_envvar'] = True
    if 'default' in attrs:
        attrs['show_default'] = _pretty_print_default(attrs['default'])
    return click.option(*param_decls, cls=cls, **attrs)


def build_app(
    path: pathlib.Path,
    interface: Interfaces,
    content_type: Optional[str] = None,
    multi_range: MultiRangePolicies = MultiRangePolicies.reject,
    chunk_size: int = CHUNK_SIZE,
):
    content_type = content_type or mimetypes.guess_type(path.name)[0] or 'application/octet-stream'
    return APPS[interface](path, content_type=content_type, multi_range=multi_range, chunk_size=chunk_size)


@click.command(
    context_settings={'show_default': True},
    help='PATH  File to serve with byte-range support.  [required]',
)
@click.argument(
    'path',
    required=True,
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=pathlib.Path),
)
@option('--host', default='127.0.0.1', help='Host address to bind to')
@option('--port', type=int, default=8000, help='Port to bind to.')
@option(
    '--interface',
    type=EnumType(Interfaces),
    default=Interfaces.RSGI,
    help='Application interface type',
)
@option('--content-type', help='Content type to advertise (guessed from the file name when missing)')
@option(
    '--multi-range',
    type=EnumType(MultiRangePolicies),
    default=MultiRangePolicies.reject,
    help='How to answer requests asking for multiple ranges (416 or full content)',
)
@option('--chunk-size', type=click.IntRange(1024), default=CHUNK_SIZE, help='Read size (in bytes) for streamed bodies')
@option('--log/--no-log', 'log_enabled', default=True, help='Enable logging')
@option('--log-level', type=EnumType(LogLevels), default=LogLevels.info, help='Log level')
@option(
    '--log-config',
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=pathlib.Path),
    help='Logging configuration file (json)',
)
@option('--access-log/--no-access-log', 'log_access_enabled', default=False, help='Enable access log')
@click.version_option(message='%(prog)s %(version)s')
def cli(
    path: pathlib.Path,
    host: str,
    port: int,
    interface: Interfaces,
    content_type: Optional[str],
    multi_range: MultiRangePolicies,
    chunk_size: int,
    log_enabled: bool,
    log_level: LogLevels,
    log_config: Optional[pathlib.Path],
    log_access_enabled: bool,
) -> None:
    log_dictconfig = None
    if log_config:
        with log_config.open() as log_config_file:
            try:
                log_dictconfig = json.loads(log_config_file.read())
            except Exception:
                print('Unable to parse provided logging config.')
                raise click.exceptions.Exit(1)

    configure_logging(log_level, log_dictconfig, enabled=log_enabled)

    try:
        app = build_app(path, interface, content_type, multi_range, chunk_size)
    except SeekableError as exc:
        logger.error(str(exc))
        raise click.exceptions.Exit(1)

    logger.info(f'Serving {path} ({app.source.length} bytes, {app.content_type}) on {host}:{port}')

    server = Server(
        app,
        address=host,
        port=port,
        interface=ServerInterfaces(interface.value),
        websockets=False,
        log_enabled=log_enabled,
        log_level=ServerLogLevels(log_level.value),
        log_access=log_access_enabled,
    )

    try:
        asyncio.run(server.serve())
    except (FatalError, ServerConfigurationError):
        raise click.exceptions.Exit(1)


def entrypoint():
    cli(auto_envvar_prefix='SEEKABLE')
