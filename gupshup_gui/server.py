"""The HTTP server: application assembly and the command that starts it."""

from __future__ import annotations

import argparse
import logging
import sys

from flask import Flask

from .auth import AuthenticationError, LoginController, LoginService
from .partner import AppController, PartnerService, TemplateController
from .routes import create_apps_blueprint, create_auth_blueprint, register_not_found
from .template_routes import create_templates_blueprint
from .uploads import DEFAULT_UPLOAD_DIR

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


def create_app(
    login_controller=None,
    app_controller=None,
    template_controller=None,
    upload_dir=DEFAULT_UPLOAD_DIR,
) -> Flask:
    """Build the Flask application; missing controllers get default services."""
    if login_controller is None:
        login_controller = LoginController(LoginService())
    if app_controller is None:
        app_controller = AppController(PartnerService(LoginService()))
    if template_controller is None:
        template_controller = TemplateController(PartnerService(LoginService()))

    app = Flask(__name__)
    app.register_blueprint(create_auth_blueprint(login_controller))
    app.register_blueprint(create_apps_blueprint(app_controller))
    app.register_blueprint(create_templates_blueprint(template_controller, upload_dir))
    register_not_found(app)
    return app


def _parse_args(argv):
    parser = argparse.ArgumentParser(description="Partner API gateway server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--env-file", default=".env")
    parser.add_argument("--upload-dir", default=str(DEFAULT_UPLOAD_DIR))
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Log in to the partner account, then serve HTTP until interrupted."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    login_controller = LoginController(LoginService(), env_path=args.env_file)
    try:
        login_controller.handle_login()
    except AuthenticationError as exc:
        print(exc, file=sys.stderr)
        return 1

    app = create_app(login_controller=login_controller, upload_dir=args.upload_dir)
    app.run(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())