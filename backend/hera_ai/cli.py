"""
HERA AI Router CLI

Terminal front-end for the AI request router:
- ask: route a single prompt and show the response envelope
- stream: route a prompt through the streaming path
- providers: list configured providers with live status
- serve: run the HTTP API with uvicorn
"""

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from hera_ai.core.config import get_settings
from hera_ai.core.logging import setup_logging
from hera_ai.services.ai_service import get_ai_router
from hera_ai.services.routing import AIRequest, AIResponse, StreamEvent, TaskType

console = Console()

TASK_CHOICES = [task.value for task in TaskType]


def _build_request(prompt: str, task: str, smart_code: Optional[str], provider: Optional[str], no_fallback: bool) -> AIRequest:
    return AIRequest(
        smart_code=smart_code or f"HERA.AI.CLI.{task.upper()}.v1",
        task_type=TaskType(task),
        prompt=prompt,
        preferred_provider=provider,
        fallback_enabled=not no_fallback,
    )


def display_response(response: AIResponse, show_content: bool = True):
    """Render a response envelope as a table."""
    table = Table(title="AI Response", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green" if response.success else "red")

    table.add_row("Success", str(response.success))
    table.add_row("Provider", response.provider_used)
    table.add_row("Model", response.model_used or "-")
    table.add_row("Confidence", f"{response.confidence_score:.2f}" if response.confidence_score is not None else "-")
    table.add_row("Tokens", str(response.tokens_used) if response.tokens_used is not None else "-")
    table.add_row("Cost", f"${response.cost_estimate:.6f}" if response.cost_estimate is not None else "-")
    table.add_row("Latency", f"{response.processing_time_ms}ms" if response.processing_time_ms is not None else "-")
    table.add_row("Fallback", f"{response.fallback_used} ({response.fallback_attempts} failed attempts)")
    table.add_row("Provider status", response.provider_status.value)

    console.print(table)

    if not response.success:
        console.print(f"\n[bold red]Error:[/bold red] {response.error}")
    elif show_content:
        console.print(Panel(response.response or "", title=response.smart_code, border_style="cyan"))


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def main(log_level: Optional[str]):
    """Route AI requests across OpenAI, Claude, DeepSeek and Ollama."""
    setup_logging("hera_ai", level=log_level or get_settings().LOG_LEVEL)


@main.command()
@click.argument("prompt")
@click.option("--task", type=click.Choice(TASK_CHOICES), default=TaskType.CHAT.value, help="Task type")
@click.option("--smart-code", default=None, help="Smart code (default: HERA.AI.CLI.<TASK>.v1)")
@click.option("--provider", default=None, help="Preferred provider id or 'auto'")
@click.option("--no-fallback", is_flag=True, help="Fail instead of trying other providers")
def ask(prompt: str, task: str, smart_code: Optional[str], provider: Optional[str], no_fallback: bool):
    """Route one prompt and print the response."""
    request = _build_request(prompt, task, smart_code, provider, no_fallback)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console
    ) as progress:
        progress.add_task("Routing request...", total=None)
        response = asyncio.run(get_ai_router().process_request(request))

    display_response(response)


@main.command()
@click.argument("prompt")
@click.option("--task", type=click.Choice(TASK_CHOICES), default=TaskType.CHAT.value, help="Task type")
@click.option("--smart-code", default=None, help="Smart code (default: HERA.AI.CLI.<TASK>.v1)")
@click.option("--provider", default=None, help="Preferred provider id or 'auto'")
@click.option("--no-fallback", is_flag=True, help="Fail instead of trying other providers")
def stream(prompt: str, task: str, smart_code: Optional[str], provider: Optional[str], no_fallback: bool):
    """Stream one prompt, printing text as it arrives."""
    request = _build_request(prompt, task, smart_code, provider, no_fallback)

    async def run() -> Optional[AIResponse]:
        final = None
        async for event in get_ai_router().process_stream(request):
            if event.event == StreamEvent.CHUNK:
                console.print(event.content, end="", soft_wrap=True, highlight=False)
            else:
                final = event.response
        console.print()
        return final

    response = asyncio.run(run())
    if response is not None:
        display_response(response, show_content=False)


@main.command()
def providers():
    """List configured providers."""
    table = Table(title="AI Providers", show_header=True)
    table.add_column("Provider", style="cyan")
    table.add_column("Model")
    table.add_column("Adapter")
    table.add_column("Available")
    table.add_column("Status")
    table.add_column("Cost/token", justify="right")

    for info in get_ai_router().registry.get_provider_info():
        table.add_row(
            info["name"],
            info["model"] or "-",
            info["adapter"],
            "yes" if info["available"] else "[red]no[/red]",
            info["status"],
            f"{info['cost_per_token']:.8f}",
        )

    console.print(table)


@main.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option("--reload/--no-reload", default=False, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("hera_ai.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
