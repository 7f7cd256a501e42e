# cli.py
import asyncio
import logging
import click
from pydantic import ValidationError
from relay.client.config import ClientSettings
from relay.client.models import UploadItem, UploadStatus
from relay.client.targets import DirectTarget, RelayTarget
from relay.client.widget import UploadWidget

logger = logging.getLogger(__name__)

def _mask(value: str) -> str:
    return "*" * 8 if value else "(not set)"

@click.group()
def cli():
    """Upload relay server and client commands"""
    pass

@cli.command()
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(reload):
    """Run the relay server (PORT must be set)"""
    import uvicorn
    from relay.core.config import settings

    logging.basicConfig(level=settings.LOG_LEVEL)
    logger.info(f"Server is started at {settings.PORT}")
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)

@cli.command()
def show_config():
    """Show current configuration"""
    client_settings = ClientSettings()

    click.echo("Client Configuration:")
    click.echo(f"  Cloud Name: {client_settings.CLOUD_NAME or '(not set)'}")
    click.echo(f"  Upload Preset: {client_settings.UPLOAD_PRESET or '(not set)'}")
    click.echo(f"  Provider API: {client_settings.PROVIDER_API_BASE}")
    click.echo(f"  Relay URL: {client_settings.RELAY_URL}")

    try:
        from relay.core.config import settings
    except ValidationError as e:
        click.echo(f"Server Configuration unavailable: {e}")
        return

    click.echo("Server Configuration:")
    click.echo(f"  Listen: {settings.HOST}:{settings.PORT}")
    click.echo(f"  Cloud Name: {settings.CLOUD_NAME or '(not set)'}")
    click.echo(f"  API Key: {_mask(settings.API_KEY)}")
    click.echo(f"  API Secret: {_mask(settings.API_SECRET)}")
    click.echo(f"  Upload Dir: {settings.UPLOAD_DIR}")
    click.echo(f"  Max Upload Bytes: {settings.MAX_UPLOAD_BYTES or 'unlimited'}")

@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--via",
              type=click.Choice(["direct", "relay"]),
              default="direct",
              help="Upload straight to the provider or through the relay")
@click.option("--relay-url", default=None, help="Relay base URL")
@click.option("--cloud-name", default=None, help="Provider account name")
@click.option("--preset", default=None, help="Unsigned upload preset")
def upload(paths, via, relay_url, cloud_name, preset):
    """Upload files and report per-file progress"""
    client_settings = ClientSettings()

    if via == "relay":
        target = RelayTarget(relay_url or client_settings.RELAY_URL)
    else:
        cloud_name = cloud_name or client_settings.CLOUD_NAME
        preset = preset or client_settings.UPLOAD_PRESET
        if not cloud_name or not preset:
            raise click.UsageError("Direct uploads need --cloud-name and --preset (or CLOUD_NAME and UPLOAD_PRESET)")
        target = DirectTarget(cloud_name, preset, client_settings.PROVIDER_API_BASE)

    result = asyncio.run(_run_upload(target, paths, client_settings.CLIENT_TIMEOUT_SECONDS))
    if not result.ok:
        raise SystemExit(1)

class _ProgressPrinter:
    """Prints a line per item only when its progress or status changes."""

    def __init__(self):
        self._last = {}

    def __call__(self, item: UploadItem):
        state = (item.status, item.progress)
        if self._last.get(item.id) == state:
            return
        self._last[item.id] = state

        if item.status is UploadStatus.UPLOADING:
            click.echo(f"  {item.name}: {item.progress}% {item.est}".rstrip())
        elif item.status is UploadStatus.SUCCESS:
            click.echo(f"  {item.name}: Success! {item.remote_url or ''}".rstrip())
        elif item.status is UploadStatus.ERROR:
            click.echo(f"  {item.name}: Error")

async def _run_upload(target, paths, timeout):
    def notify(message):
        click.echo(message, err=True)

    async with UploadWidget(target, notify=notify, on_update=_ProgressPrinter(), timeout=timeout) as widget:
        items = widget.add_files(paths)
        for item in items:
            click.echo(f"  {item.name} ({item.size_mb})")
        count = len(items)
        click.echo(f"Uploading {count} {'File' if count == 1 else 'Files'}...")
        return await widget.upload_all()

if __name__ == "__main__":
    cli()
