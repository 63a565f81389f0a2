import asyncio
import sys

from dataclasses import dataclass
from typing import Annotated

import cappa
import granian

from cappa.output import error_format
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from watchfiles import PythonFilter

from smartbid import __version__
from smartbid.core.conf import settings
from smartbid.database.firestore import close_firestore_client, create_firestore_client
from smartbid.src.billing.usage import FirestoreUsageStore, UsageService

output_help = '\nFor more information, try "[cyan]--help[/]"'

console = Console()


class CustomReloadFilter(PythonFilter):
    """Custom reload filter"""

    def __init__(self) -> None:
        super().__init__(extra_extensions=['.json', '.yaml', '.yml'])


def run(host: str, port: int, reload: bool, workers: int) -> None:  # noqa: FBT001
    url = f'http://{host}:{port}'

    panel_content = Text()
    panel_content.append('Python version: ', style='bold cyan')
    panel_content.append(f'{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}', style='white')

    panel_content.append('\nAPI request address: ', style='bold cyan')
    panel_content.append(f'{url}{settings.FASTAPI_API_PATH}', style='blue')

    panel_content.append('\n\nEnvironment mode: ', style='bold green')
    env_style = 'yellow' if settings.ENVIRONMENT == 'dev' else 'green'
    panel_content.append(f'{settings.ENVIRONMENT.upper()}', style=env_style)

    panel_content.append('\nDocument store: ', style='bold green')
    if settings.firestore_configured:
        panel_content.append(f'Firestore (artifacts/{settings.APP_ID})', style='white')
    else:
        panel_content.append('in-memory' if settings.ENVIRONMENT == 'dev' else 'NOT CONFIGURED', style='yellow')

    panel_content.append('\nStripe: ', style='bold green')
    panel_content.append('configured' if settings.stripe_configured else 'missing key', style='white')
    panel_content.append('\nGemini: ', style='bold green')
    panel_content.append(settings.GEMINI_MODEL if settings.llm_configured else 'missing key', style='white')

    if settings.ENVIRONMENT == 'dev' and settings.FASTAPI_DOCS_URL:
        panel_content.append(f'\n\n📖 Swagger docs: {url}{settings.FASTAPI_DOCS_URL}', style='bold magenta')

    console.print(Panel(panel_content, title=f'smartbid v{__version__}', border_style='purple', padding=(1, 2)))
    granian.Granian(
        target='smartbid.main:app',
        interface='asgi',
        address=host,
        port=port,
        reload=not reload,
        reload_filter=CustomReloadFilter,
        workers=workers,
    ).serve()


async def show_usage(user_id: str) -> None:
    client = create_firestore_client()
    if client is None:
        raise cappa.Exit('FIREBASE_SERVICE_ACCOUNT is not set', code=1)

    try:
        store = FirestoreUsageStore(client, settings.APP_ID)
        service = UsageService(store, limit=settings.BILLING_FREE_TRIAL_LIMIT)
        summary = service.summarize(await service.get_usage(user_id))
    finally:
        await close_firestore_client(client)

    table = Table(title=f'Usage of {user_id}')
    table.add_column('Field', style='cyan')
    table.add_column('Value')
    for key, value in summary.items():
        table.add_row(key, str(value))
    console.print(table)


@cappa.command(help='Run API service', default_long=True)
@dataclass
class Run:
    host: Annotated[
        str,
        cappa.Arg(
            default='127.0.0.1',
            help='Host address; use `0.0.0.0` to serve outside this machine',
        ),
    ]
    port: Annotated[
        int,
        cappa.Arg(default=8000, help='Port to serve on'),
    ]
    no_reload: Annotated[
        bool,
        cappa.Arg(default=False, help='Disable reloading the server on code changes'),
    ]
    workers: Annotated[
        int,
        cappa.Arg(default=1, help='Number of worker processes, requires `--no-reload`'),
    ]

    def __call__(self) -> None:
        run(host=self.host, port=self.port, reload=self.no_reload, workers=self.workers)


@cappa.command(help="Show a user's usage counters and gate state", default_long=True)
@dataclass
class Usage:
    user_id: Annotated[str, cappa.Arg(help='User id the usage record is stored under')]

    async def __call__(self) -> None:
        await show_usage(self.user_id)


@cappa.command(help='SmartBid backend command line interface', default_long=True)
@dataclass
class SmartBidCli:
    subcmd: cappa.Subcommands[Run | Usage | None] = None

    async def __call__(self) -> None:
        if self.subcmd is None:
            console.print('Try [bold cyan]smartbid run[/bold cyan] to start the service')


def main() -> None:
    output = cappa.Output(error_format=f'{error_format}\n{output_help}')
    asyncio.run(cappa.invoke_async(SmartBidCli, version=__version__, output=output))
