"""Flask application factory for the Clipmaker web UI."""

from flask import Flask, jsonify

from clipmaker.config import Settings
from clipmaker.upstream import UpstreamClient


def create_app(settings: Settings | None = None, client: UpstreamClient | None = None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()
    app.config["SETTINGS"] = settings
    app.config["UPSTREAM_CLIENT"] = client or UpstreamClient(settings)

    from clipmaker.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    return app
