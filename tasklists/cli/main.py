"""CLI commands for task list aggregation."""

import asyncio
import json
import logging
from typing import Optional

import click

from ..container import get_container
from ..domain.exceptions import AggregateDocumentError, NotADocumentError


def setup_container(root: Optional[str] = None):
    """Set up container with default configuration."""
    from ..repositories.filesystem import FilesystemDocumentStore

    container = get_container()

    if root:
        settings = container.task_lists_settings.model_copy(update={"root_dir": root})
        container.configure_task_lists_settings(settings)

    # Check if already configured
    try:
        _ = container.document_store
        return  # Already configured
    except RuntimeError:
        pass

    settings = container.task_lists_settings
    container.configure_document_store(
        lambda: FilesystemDocumentStore(
            settings.root_dir,
            extension=settings.document_extension,
        )
    )


def setup_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else get_container().settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_async(coro):
    """Run async coroutine in sync context."""
    return asyncio.run(coro)


def run_or_exit(coro):
    """Run a coroutine, turning fatal run errors into exit status 1."""
    try:
        return run_async(coro)
    except (AggregateDocumentError, NotADocumentError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@click.group()
@click.version_option(version="1.0.0")
@click.option("--root", "-r", type=click.Path(file_okay=False), help="Vault root directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(root: Optional[str], verbose: bool):
    """Collect checkbox tasks from a notes vault into one TODO document."""
    setup_logging(verbose)
    setup_container(root)


@cli.command("aggregate")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def aggregate(output_json: bool):
    """Rebuild the aggregate TODO document."""
    service = get_container().todo_service
    result = run_or_exit(service.update_todos())

    if output_json:
        click.echo(json.dumps(
            {
                "documents_scanned": result.documents_scanned,
                "groups": result.groups,
                "todos": result.todos,
                "changed": result.changed,
            },
            indent=2,
        ))
        return

    status = "updated" if result.changed else "unchanged"
    click.echo(
        f"✅ {service.aggregate_path} {status}: {result.todos} task(s) "
        f"from {result.groups} document(s) ({result.documents_scanned} scanned)"
    )


@cli.command("sync")
@click.option("--no-aggregate", is_flag=True, help="Do not rebuild the aggregate afterwards")
def sync(no_aggregate: bool):
    """Sync status edits in the TODO document back to their documents."""
    service = get_container().todo_service

    result = run_or_exit(service.sync_todos())
    click.echo(
        f"🔄 Patched {result.lines_patched} line(s) in "
        f"{result.documents_patched} document(s)"
    )
    for path in result.skipped_paths:
        click.echo(f"  ⏭️ Skipped missing document: {path}")

    if not no_aggregate:
        aggregate_result = run_or_exit(service.update_todos())
        click.echo(f"✅ Rebuilt {service.aggregate_path}: {aggregate_result.todos} task(s)")


@cli.command("parse")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def parse(file, output_json: bool):
    """Show the task lines found in FILE."""
    from ..parsers.todo_parser import parse_todos

    todos = parse_todos(file.read())

    if output_json:
        output = [
            {
                "marker": t.marker,
                "task": t.task.name.lower() if t.task else None,
                "text": t.text,
                "line_number": t.line_number,
                "depth": len(t.indentation) // 4,
            }
            for t in todos
        ]
        click.echo(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not todos:
        click.echo("No tasks found.")
        return

    for todo in todos:
        click.echo(f"{todo.line_number + 1:>5}: {todo.indentation}- [{todo.marker}] {todo.text}")


@cli.command("show")
def show():
    """Show the tasks currently listed in the TODO document."""
    service = get_container().todo_service
    aggregate = run_or_exit(service.read_aggregate())

    if not aggregate.groups:
        click.echo("No tasks found.")
        return

    click.echo(f"Found {aggregate.todo_count} task(s) in {len(aggregate.groups)} document(s):\n")
    for group in aggregate.groups:
        click.echo(f"📄 {group.label} ({group.path})")
        for todo in group.todos:
            click.echo(f"   {todo.indentation}[{todo.marker}] {todo.text}")


@cli.command("run-job")
@click.argument("job_name")
def run_job(job_name: str):
    """Run a scheduled job immediately."""
    from ..scheduler.jobs import JobRegistry, create_default_jobs

    container = get_container()
    registry = JobRegistry()
    create_default_jobs(registry, container)

    job = registry.get(job_name)
    if not job:
        click.echo(f"Job not found: {job_name}", err=True)
        click.echo("Available jobs:")
        for j in registry.list_jobs():
            click.echo(f"  - {j.name}: {j.description}")
        raise SystemExit(1)

    click.echo(f"Running job: {job_name}...")
    result = run_or_exit(registry.run_job(job_name))
    click.echo(f"✅ Job completed: {result}")


@cli.command("jobs")
def list_jobs():
    """List all scheduled jobs."""
    from ..scheduler.jobs import JobRegistry, create_default_jobs

    registry = JobRegistry()
    create_default_jobs(registry, get_container())

    click.echo("Scheduled jobs:\n")
    for job in registry.list_jobs():
        status = "✅" if job.enabled else "⏸️"
        click.echo(f"{status} {job.name}")
        click.echo(f"   Cron: {job.cron}")
        click.echo(f"   Description: {job.description}")
        click.echo()


async def _watch(container) -> None:
    from ..domain.models import DocumentEvent, EventKind
    from ..scheduler.jobs import JobRegistry, create_default_jobs
    from ..scheduler.scheduler import JobScheduler

    scheduler_settings = container.settings.scheduler
    queue = container.event_queue
    queue.start()

    file_watcher = None
    try:
        file_watcher = container.file_watcher
    except RuntimeError:
        # Stores without a directory are polled instead
        await container.watcher.poll()
    else:
        file_watcher.start()
    queue.submit(DocumentEvent(kind=EventKind.REFRESH, path=""))

    scheduler = None
    if scheduler_settings.enabled:
        registry = JobRegistry()
        create_default_jobs(registry, container)
        if file_watcher is not None:
            registry.unregister("poll_documents")
        scheduler = JobScheduler(registry, timezone=scheduler_settings.timezone)
        scheduler.start()

    try:
        await asyncio.Event().wait()
    finally:
        if scheduler:
            scheduler.stop()
        if file_watcher is not None:
            file_watcher.stop()
        await queue.stop()


@cli.command("watch")
def watch():
    """Keep the TODO document up to date until interrupted."""
    container = get_container()
    click.echo(f"👀 Watching {container.task_lists_settings.root_dir}")
    click.echo("Press Ctrl+C to stop")
    try:
        run_async(_watch(container))
    except KeyboardInterrupt:
        click.echo("Stopped.")


@cli.command("serve")
@click.option("--host", "-h", default=None, help="Host to bind to")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the API server."""
    import uvicorn

    settings = get_container().settings
    host = host or settings.host
    port = port or settings.port

    click.echo(f"Starting server at http://{host}:{port}")
    click.echo("Press Ctrl+C to stop")

    uvicorn.run(
        "tasklists.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
