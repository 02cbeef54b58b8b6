"""HTTP host that executes registered commands"""

import hmac
from typing import Optional

from aiohttp import web

from command_router.actions.base import CommandContext
from command_router.actions.registry import ActionRegistry
from command_router.util.logging import Logger


class CommandServer:
    """Exposes the command table over HTTP.

    GET  /commands          list registered commands
    POST /commands          {"text": "/GE hello"}
    POST /commands/{name}   {"args": "hello"}
    """

    def __init__(self, action_registry: ActionRegistry, token: Optional[str] = None, host: str = "0.0.0.0"):
        self.logger = Logger("CommandServer")
        self.action_registry = action_registry
        self.token = token
        self.host = host
        self.port = 8080
        self.runner = None
        self.app = self.build_app()

    def build_app(self) -> web.Application:
        app = web.Application(middlewares=[self.log_middleware])
        app.router.add_get("/commands", self._list_commands)
        app.router.add_post("/commands", self._execute_text)
        app.router.add_post("/commands/{name}", self._execute_named)
        return app

    def is_authorized(self, request: web.Request) -> bool:
        if not self.token:
            return False
        header = request.headers.get("Authorization", "")
        scheme, _, supplied = header.partition(" ")
        if scheme.lower() != "bearer":
            return False
        return hmac.compare_digest(supplied.strip(), self.token)

    async def _list_commands(self, request: web.Request) -> web.Response:
        commands = [
            {
                "name": name,
                "description": spec.description,
                "accepts_args": spec.accepts_args,
                "require_auth": spec.require_auth,
            }
            for name, (_, spec) in sorted(self.action_registry.get_commands().items())
        ]
        return web.json_response({"commands": commands})

    async def _execute_text(self, request: web.Request) -> web.Response:
        body = await self._read_body(request)
        if body is None or not isinstance(body.get("text"), str):
            return web.json_response({"error": "Expected JSON body with a 'text' field"}, status=400)
        return await self._execute(request, body["text"])

    async def _execute_named(self, request: web.Request) -> web.Response:
        body = await self._read_body(request) if request.can_read_body else {}
        if body is None:
            return web.json_response({"error": "Expected a JSON object body"}, status=400)

        args = body.get("args") or ""
        if not isinstance(args, str):
            return web.json_response({"error": "'args' must be a string"}, status=400)

        name = request.match_info["name"]
        if not name or any(char.isspace() for char in name):
            return web.json_response({"error": f"Invalid command name: {name!r}"}, status=400)

        text = f"/{name} {args}" if args else f"/{name}"
        return await self._execute(request, text)

    async def _execute(self, request: web.Request, text: str) -> web.Response:
        context = CommandContext(sender_id=request.remote, channel="http", authorized=self.is_authorized(request))

        try:
            result = await self.action_registry.execute(text, context)
        except Exception as e:
            self.logger.error(f"Error executing command: {e}")
            return web.json_response({"error": f"Error executing command: {e}"}, status=500)

        if result is None:
            command = text.split(None, 1)[0] if text.strip() else text
            return web.json_response({"error": f"Unknown command: {command}"}, status=404)

        status = 403 if result.is_error and result.error == "Not authorized" else 200
        return web.json_response(result.to_dict(), status=status)

    @staticmethod
    async def _read_body(request: web.Request) -> Optional[dict]:
        try:
            body = await request.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    async def start(self, port: int = 8080) -> None:
        """Start the HTTP server"""
        if self.runner:
            self.logger.warning("Command server already running")
            return

        self.port = port
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()

        self.logger.info(f"Command server listening on port {self.port}")
        if not self.token:
            self.logger.warning("No webhook token configured, commands requiring auth will be refused")

    async def stop(self) -> None:
        """Stop the HTTP server"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None

    @web.middleware
    async def log_middleware(self, request: web.Request, handler):
        """Log middleware to track request/response cycle"""
        self.logger.debug("Incoming request", extra_data={"method": request.method, "path": request.path})
        response = await handler(request)
        self.logger.debug("Outgoing response", extra_data={"status": response.status})
        return response
