"""FastAPI application serving the password-protected gallery."""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Form, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response

from photo_gallery import __version__
from photo_gallery.core.config import Config, get_config
from photo_gallery.core.exceptions import AuthMismatch, ValidationError
from photo_gallery.core.logger import audit_log, get_logger
from photo_gallery.web.auth import SessionAuthenticator, SharedPasswordAuthenticator
from photo_gallery.web.gate import (
    AccessGateMiddleware,
    PathTraversalError,
    content_type_for,
    redirect,
    resolve_static_path,
)

logger = get_logger(__name__)

DEFAULT_LOGIN_TEMPLATE = Path(__file__).parent / "templates" / "login.html"
ERROR_PLACEHOLDER = "{{ERROR_MESSAGE}}"
BLANK_MESSAGE = "&nbsp;"
INCORRECT_PASSWORD_MESSAGE = "Incorrect password. Please try again."


def load_login_template(site_root: Path) -> str:
    """Prefer the site's own login.html, fall back to the bundled page."""
    site_template = site_root / "login.html"
    template_file = site_template if site_template.is_file() else DEFAULT_LOGIN_TEMPLATE
    return template_file.read_text(encoding="utf-8")


def create_app(config: Optional[Config] = None, authenticator: Optional[SessionAuthenticator] = None) -> FastAPI:
    """Build the gallery application.

    The expected session token is computed here, once; a missing password
    raises :class:`ConfigurationError` before the app exists.
    """
    config = config or get_config()
    authenticator = authenticator or SharedPasswordAuthenticator.from_config(config)
    site_root = Path(config.site_root)

    app = FastAPI(
        title=config.app_name,
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.authenticator = authenticator
    app.state.site_root = site_root
    app.state.login_template = load_login_template(site_root)

    app.add_middleware(AccessGateMiddleware, authenticator=authenticator)

    def render_login(message: str, status_code: int = 200) -> HTMLResponse:
        html = app.state.login_template.replace(ERROR_PLACEHOLDER, message or BLANK_MESSAGE)
        return HTMLResponse(html, status_code=status_code)

    def serve_file(path: Path) -> Response:
        if not path.is_file():
            return PlainTextResponse("Not Found", status_code=404)
        return FileResponse(path, media_type=content_type_for(path))

    def serve_static(request_path: str) -> Response:
        try:
            file_path = resolve_static_path(site_root, request_path)
        except PathTraversalError as e:
            logger.error(str(e))
            return PlainTextResponse("Forbidden", status_code=403)
        return serve_file(file_path)

    def serve_index() -> Response:
        return serve_file(site_root / "index.html")

    @app.get("/login")
    async def login_page(request: Request, error: Optional[str] = None):
        """Login form; ``?error=1`` shows the wrong-password message."""
        if request.state.authorized:
            return redirect("/")
        return render_login(INCORRECT_PASSWORD_MESSAGE if error == "1" else BLANK_MESSAGE)

    @app.post("/login")
    async def login_submit(request: Request, password: str = Form("")):
        """Check the submitted password and set the session cookie."""
        client = request.client.host if request.client else "unknown"
        try:
            token = authenticator.login(password)
        except ValidationError as e:
            return render_login(str(e), status_code=400)
        except AuthMismatch:
            audit_log("LOGIN_FAILED", client=client)
            return redirect("/login?error=1")

        audit_log("LOGIN_SUCCESS", client=client)
        response = redirect("/")
        response.set_cookie(
            authenticator.cookie_name,
            token,
            max_age=authenticator.max_age,
            path="/",
            httponly=True,
            samesite="strict",
        )
        return response

    @app.api_route("/logout", methods=["GET", "POST"])
    async def logout(request: Request):
        """Clear the session cookie."""
        audit_log("LOGOUT", client=request.client.host if request.client else "unknown")
        response = redirect("/login")
        response.set_cookie(
            authenticator.cookie_name,
            "",
            max_age=0,
            path="/",
            httponly=True,
            samesite="strict",
        )
        return response

    @app.get("/login.html")
    async def login_html(request: Request):
        if request.state.authorized:
            return redirect("/")
        return render_login(BLANK_MESSAGE)

    @app.get("/")
    @app.get("/index.html")
    async def index():
        return serve_index()

    @app.get("/styles.css")
    @app.get("/app.js")
    @app.get("/favicon.ico")
    async def root_asset(request: Request):
        return serve_static(request.url.path)

    @app.get("/assets/{asset_path:path}")
    @app.get("/scripts/{asset_path:path}")
    async def static_asset(request: Request, asset_path: str):
        return serve_static(request.url.path)

    @app.get("/{client_path:path}")
    async def client_route(client_path: str):
        """Anything else is a client-side route of the gallery page."""
        return serve_index()

    logger.info(f"Gallery application ready, serving {site_root}")
    return app
