"""Web UI routes: the index page plus relays to the upstream services."""

import logging

from flask import (
    Blueprint,
    Response,
    current_app,
    jsonify,
    render_template,
    request,
    stream_with_context,
)

from clipmaker.upstream import NetworkError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

bp = Blueprint("web", __name__, template_folder="templates")

GENERIC_ERROR = "Failed to process request"
CHUNK_SIZE = 64 * 1024

HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
}


def _client():
    return current_app.config["UPSTREAM_CLIENT"]


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _relay(call, *args):
    """Run an upstream call and mirror its JSON body and status."""
    try:
        resp = call(*args)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except UpstreamError:
        logger.exception("Relay to upstream failed")
        return jsonify({"error": GENERIC_ERROR}), 500
    return jsonify(resp.data), resp.status_code


def _stream(upstream, extra_headers: dict | None = None) -> Response:
    content_type = upstream.headers.get("content-type") or "application/octet-stream"
    # iter_content decodes the body, so encoded lengths no longer apply.
    encoded = any(name.lower() == "content-encoding" for name in upstream.headers)
    headers = {}
    for name, value in upstream.headers.items():
        key = name.lower()
        if key in HOP_BY_HOP_HEADERS or key in ("content-type", "content-encoding"):
            continue
        if key == "content-length" and encoded:
            continue
        headers[name] = value
    headers.update(extra_headers or {})

    def generate():
        try:
            yield from upstream.iter_content(CHUNK_SIZE)
        finally:
            upstream.close()

    return Response(stream_with_context(generate()), status=200, headers=headers, content_type=content_type)


@bp.route("/")
def index():
    return render_template("index.html")


@bp.route("/api/trim", methods=["POST"])
def trim():
    body = _json_body()
    return _relay(_client().trim_info, body.get("videoUrl"))


@bp.route("/api/download", methods=["POST"])
def download():
    body = _json_body()
    return _relay(_client().download, body)


@bp.route("/api/download", methods=["GET"])
def download_merged():
    job_id = request.args.get("id")
    if not job_id:
        return jsonify({"error": "Job id is required"}), 400

    client = _client()
    try:
        upstream = client.open_stream(client.settings.merged_download_url, params={"id": job_id})
    except NetworkError:
        logger.exception("Merged download for %s failed", job_id)
        return jsonify({"error": "Upstream fetch failed"}), 502
    return _stream(upstream)


@bp.route("/api/merge", methods=["POST"])
def start_merge():
    body = _json_body()
    return _relay(_client().start_merge, body.get("videos"))


@bp.route("/api/merge", methods=["GET"])
def merge_status():
    return _relay(_client().merge_status, request.args.get("id"))


@bp.route("/api/file-check")
def file_check():
    return _relay(_client().file_check, request.args.get("file"))


@bp.route("/api/proxy")
def proxy():
    url = request.args.get("url")
    if not url or not url.startswith("http"):
        return Response("Missing or invalid `url`", status=400)

    try:
        upstream = _client().open_stream(url)
    except NetworkError:
        return Response("Upstream fetch failed", status=502)
    except Exception:
        logger.exception("Proxy error for %s", url)
        return Response("Internal proxy error", status=500)

    return _stream(upstream, {"Access-Control-Allow-Origin": "*"})
