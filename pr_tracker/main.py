"""PR Tracker main entry point."""

import asyncio
import signal
import sys

from pr_tracker.core.config import get_settings
from pr_tracker.core.logging import get_logger, setup_logging
from pr_tracker.github.client import GitHubClient
from pr_tracker.nixpkgs.repository import NixpkgsRepository
from pr_tracker.shared.exceptions import ConfigError, RepositoryError
from pr_tracker.web.server import TrackerServer

logger = get_logger(__name__)

# Module-level variables for lifecycle management
github_client: GitHubClient | None = None
tracker_server: TrackerServer | None = None
fetch_task: asyncio.Task[None] | None = None


async def fetch_loop(repository: NixpkgsRepository, interval_minutes: int) -> None:
    """Keep the nixpkgs remote-tracking branches current.

    A failed fetch is logged and retried on the next round; lookups keep
    using the branches from the last successful fetch.
    """
    while True:
        try:
            await repository.fetch()
        except RepositoryError as e:
            logger.warning("nixpkgs.fetch.failed", error=str(e))
        await asyncio.sleep(interval_minutes * 60)


async def startup() -> None:
    """Open the GitHub session, start fetching nixpkgs and start serving."""
    global github_client, tracker_server, fetch_task

    settings = get_settings()

    logger.info(
        "application.lifecycle.started",
        environment=settings.environment,
        repo=settings.github_repo,
    )

    logger.info(
        "application.config.loaded",
        log_level=settings.log_level,
        nixpkgs_path=settings.nixpkgs_path,
        nixpkgs_remote=settings.nixpkgs_remote,
        fetch_interval_minutes=settings.nixpkgs_fetch_interval_minutes,
    )

    github_client = GitHubClient(settings.github_token, settings.github_repo)
    await github_client.__aenter__()
    logger.info("github.client.initialized")

    repository = NixpkgsRepository(settings.nixpkgs_path, settings.nixpkgs_remote)
    fetch_task = asyncio.create_task(
        fetch_loop(repository, settings.nixpkgs_fetch_interval_minutes)
    )

    tracker_server = TrackerServer(
        host=settings.host,
        port=settings.port,
        github_client=github_client,
        oracle=repository,
    )
    await tracker_server.start()


async def shutdown() -> None:
    """Cleanup on application shutdown."""
    global github_client, tracker_server, fetch_task

    logger.info("application.shutdown.started")

    if fetch_task:
        fetch_task.cancel()
        try:
            await fetch_task
        except asyncio.CancelledError:
            pass
        fetch_task = None

    if tracker_server:
        await tracker_server.stop()
        tracker_server = None

    if github_client:
        await github_client.__aexit__(None, None, None)
        github_client = None

    logger.info("application.shutdown.completed")


async def main() -> None:
    """Serve until SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def signal_handler(sig: int) -> None:
        logger.info("application.signal.received", signal=signal.Signals(sig).name)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):

        def make_handler(s: int = sig) -> None:
            signal_handler(s)

        loop.add_signal_handler(sig, make_handler)

    try:
        await startup()
        await stop_event.wait()
    except Exception as e:
        logger.error("application.error.fatal", error=str(e), exc_info=True)
        raise
    finally:
        await shutdown()


def run() -> None:
    """Entry point for running the tracker."""
    try:
        settings = get_settings()

        setup_logging(log_level=settings.log_level, json_output=settings.log_json)

        asyncio.run(main())

    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
