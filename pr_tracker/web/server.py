"""HTTP front end: look up a pull request and show where it has landed."""

import uuid
from typing import TYPE_CHECKING

from aiohttp import web

from pr_tracker.branches.tree import make_tree
from pr_tracker.core.logging import get_logger, set_correlation_id
from pr_tracker.shared.exceptions import GitHubAPIError, PullRequestNotFoundError
from pr_tracker.shared.models import BranchNode, PullRequest
from pr_tracker.web.render import render_text, tree_to_dict

if TYPE_CHECKING:
    from pr_tracker.github.client import GitHubClient
    from pr_tracker.nixpkgs.repository import AncestryOracle

logger = get_logger(__name__)


class TrackerServer:
    """Async HTTP server for pull request propagation lookups.

    Provides endpoints for:
    - GET /health: Health check endpoint
    - GET /api/pulls/{number}: Pull request and annotated tree as JSON
    - GET /pulls/{number}: Annotated tree as plain text

    Attributes:
        host: Server host address
        port: Server port
        github_client: Source of pull request merge status
        oracle: Source of branch ancestry
    """

    def __init__(
        self,
        host: str,
        port: int,
        github_client: "GitHubClient",
        oracle: "AncestryOracle",
    ) -> None:
        """Initialize tracker server.

        Args:
            host: Host address to bind to
            port: Port to listen on
            github_client: Open GitHub client for the tracked repository
            oracle: Branch ancestry oracle (usually a NixpkgsRepository)
        """
        self.host = host
        self.port = port
        self.github_client = github_client
        self.oracle = oracle
        self.app: web.Application | None = None
        self.runner: web.AppRunner | None = None
        self.site: web.TCPSite | None = None
        self._running = False

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes registered."""
        app = web.Application()
        app.router.add_get("/health", self._handle_health)
        app.router.add_get("/api/pulls/{number}", self._handle_pull_json)
        app.router.add_get("/pulls/{number}", self._handle_pull_text)
        return app

    async def start(self) -> None:
        """Start serving on host:port."""
        self.app = self.create_app()

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        self.site = web.TCPSite(self.runner, self.host, self.port)
        await self.site.start()

        self._running = True
        logger.info("web.server.started", host=self.host, port=self.port)

    async def stop(self) -> None:
        """Stop the server gracefully."""
        self._running = False

        if self.site:
            await self.site.stop()

        if self.runner:
            await self.runner.cleanup()

        logger.info("web.server.stopped")

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "healthy", "service": "pr-tracker"})

    async def _lookup(self, request: web.Request) -> tuple[PullRequest, BranchNode]:
        """Resolve the pull request in the URL to an annotated tree.

        Raises:
            web.HTTPBadRequest: If the number is not a positive integer
            web.HTTPNotFound: If GitHub has no such pull request
            web.HTTPBadGateway: If GitHub could not be queried
        """
        set_correlation_id(uuid.uuid4().hex[:12])

        raw_number = request.match_info["number"]
        if not (raw_number.isascii() and raw_number.isdigit()) or int(raw_number) == 0:
            raise web.HTTPBadRequest(text=f"Invalid pull request number: {raw_number}\n")
        number = int(raw_number)

        logger.info("web.request.started", number=number)

        try:
            pull = await self.github_client.get_pull_request(number)
        except PullRequestNotFoundError as e:
            raise web.HTTPNotFound(text=f"{e}\n") from e
        except GitHubAPIError as e:
            logger.error("web.github.failed", number=number, error=str(e))
            raise web.HTTPBadGateway(text="Could not fetch pull request from GitHub\n") from e

        tree = await make_tree(pull.base_branch, pull.status, self.oracle)

        logger.info(
            "web.request.completed",
            number=number,
            base_branch=pull.base_branch,
            state=pull.status.state.value,
        )
        return pull, tree

    async def _handle_pull_json(self, request: web.Request) -> web.Response:
        pull, tree = await self._lookup(request)
        return web.json_response(
            {
                "number": pull.number,
                "title": pull.title,
                "base_branch": pull.base_branch,
                "status": pull.status.model_dump(mode="json"),
                "tree": tree_to_dict(tree),
            }
        )

    async def _handle_pull_text(self, request: web.Request) -> web.Response:
        pull, tree = await self._lookup(request)
        header = f"#{pull.number}: {pull.title}\n\n"
        return web.Response(text=header + render_text(tree))
