"""
Serve command: run the AI HTTP API.
"""
import logging
from pathlib import Path

import click

from gtd.constants import ConfigManager, get_data_dir
from gtd.services.ai_service import AIService
from gtd.web import create_app

logger = logging.getLogger(__name__)


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=5000, show_default=True, type=int, help="Port to listen on.")
@click.option("--debug", is_flag=True, help="Run Flask in debug mode.")
@click.pass_context
def serve(ctx, host: str, port: int, debug: bool):
    """Serve POST /api/ai/advice and POST /api/ai/chat."""
    obj = ctx.find_root().obj or {}
    data_dir = Path(obj.get("data_dir") or get_data_dir())
    app = create_app(AIService(config=ConfigManager(data_dir=data_dir)))
    logger.info(f"Starting GTD AI API on {host}:{port} with data in {data_dir}")
    click.echo(f"Serving GTD AI API on http://{host}:{port}/api/ai")
    app.run(host=host, port=port, debug=debug)
