"""
FastAPI Server for Tube Relay.

This module builds the HTTP application: video routes, client shell,
health endpoint and the JSON error body format shared by every route.
"""

import contextlib
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from ..core.config import Config
from ..core.errors import TubeRelayError
from ..core.logging_config import get_error_tracker
from ..video.integration import VideoModule
from .models import HealthResponse

STATIC_DIR = Path(__file__).parent / "static"


class APIServer:
    """FastAPI server for Tube Relay"""

    def __init__(self, config: Config, video_module: VideoModule):
        self.config = config
        self.video_module = video_module
        self.logger = logging.getLogger(__name__)
        self.error_tracker = get_error_tracker("api")

        self.app = FastAPI(title="Tube Relay API", description="Metadata lookup and range-aware stream proxy for external videos", version="1.0.0", lifespan=self._lifespan)

        # Server state
        self.server_start_time = datetime.now()
        self.running = False
        self._server: Optional[uvicorn.Server] = None
        self._server_thread: Optional[threading.Thread] = None

        if self.config.system.enable_cors:
            self.app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["*"], expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"])

        self._setup_exception_handlers()
        self._setup_routes()

    @contextlib.asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Release pooled upstream connections on shutdown"""
        yield
        await self.video_module.cleanup()

    def _setup_exception_handlers(self):
        """Render every error as an {"error": ...} body"""

        @self.app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=getattr(exc, "headers", None))

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(status_code=400, content={"error": "Invalid request"})

        @self.app.exception_handler(TubeRelayError)
        async def relay_exception_handler(request: Request, exc: TubeRelayError):
            self.error_tracker.log_error(exc, request.url.path, exc_info=False)
            return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    def _setup_routes(self):
        """Setup API routes"""

        @self.app.get("/", include_in_schema=False)
        async def client_shell():
            return FileResponse(STATIC_DIR / "index.html", media_type="text/html")

        @self.app.get("/health", response_model=HealthResponse)
        async def health_check():
            return HealthResponse(
                status="healthy",
                timestamp=datetime.now().isoformat(),
                uptime_seconds=(datetime.now() - self.server_start_time).total_seconds(),
                video_module=self.video_module.get_module_status(),
                errors={
                    "api": self.error_tracker.get_error_stats(),
                    "video_info": self.video_module.video_info_controller.error_tracker.get_error_stats(),
                    "stream_proxy": self.video_module.streaming_controller.error_tracker.get_error_stats(),
                },
            )

        self.app.include_router(self.video_module.get_api_routes())
        self.app.include_router(self.video_module.get_admin_routes())

    def start(self) -> bool:
        """Start the API server"""
        if self.running:
            self.logger.warning("API server is already running")
            return True

        if not self.config.system.enable_api:
            self.logger.info("API server disabled in configuration")
            return False

        try:
            self.logger.info(f"Starting API server on {self.config.system.api_host}:{self.config.system.api_port}")
            self.running = True

            self._server_thread = threading.Thread(target=self._run_server, daemon=True)
            self._server_thread.start()

            return True

        except Exception as e:
            self.logger.error(f"Error starting API server: {e}")
            self.running = False
            return False

    def stop(self) -> None:
        """Stop the API server"""
        if not self.running:
            return

        self.logger.info("Stopping API server...")
        self.running = False

        if self._server:
            self._server.should_exit = True
        if self._server_thread and self._server_thread.is_alive():
            self._server_thread.join(timeout=10)

        self.logger.info("API server stopped")

    def _run_server(self) -> None:
        """Run the uvicorn server"""
        try:
            server_config = uvicorn.Config(self.app, host=self.config.system.api_host, port=self.config.system.api_port, log_level=self.config.system.log_level.lower())
            self._server = uvicorn.Server(server_config)
            self._server.run()
        except Exception as e:
            self.logger.error(f"Error running API server: {e}")
        finally:
            self.running = False
            self._server = None

    def is_running(self) -> bool:
        """Check if API server is running"""
        return self.running

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information"""
        return {"running": self.running, "host": self.config.system.api_host, "port": self.config.system.api_port, "start_time": self.server_start_time.isoformat(), "uptime_seconds": (datetime.now() - self.server_start_time).total_seconds()}
