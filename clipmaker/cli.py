"""Thin CLI entry point: talks to the upstream services through the library."""

import argparse
import sys
from pathlib import Path

from clipmaker.config import Settings
from clipmaker.formats import build_download_payload, parse_formats, resolution_choices
from clipmaker.logging_config import setup_logging
from clipmaker.manifest import load_manifest
from clipmaker.poller import Completed, Failed, JobPoller, JobStatus, Processing
from clipmaker.ranges import ClipRange
from clipmaker.timecode import TimecodeError, from_display, to_display
from clipmaker.upstream import UpstreamClient, UpstreamError


def _fetch_formats(client: UpstreamClient, url: str):
    resp = client.trim_info(url)
    resp.raise_for_status("Failed to fetch formats")
    return parse_formats(resp.data if isinstance(resp.data, dict) else {})


def cmd_formats(client: UpstreamClient, args) -> int:
    formats = _fetch_formats(client, args.url)
    choices = resolution_choices(formats)
    if not choices:
        print("No mp4 formats available.")
        return 1
    for note in choices:
        print(note)
    return 0


def cmd_clip(client: UpstreamClient, args) -> int:
    try:
        start, end = from_display(args.start), from_display(args.end)
    except TimecodeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if end < start + 1:
        print("Error: end must be at least one second after start.", file=sys.stderr)
        return 1

    clip = ClipRange()
    clip.initialize(end)
    clip.commit_start(to_display(start))

    formats = _fetch_formats(client, args.url)
    resolution = args.resolution or next(iter(resolution_choices(formats)), None)
    if resolution is None:
        print("Error: no mp4 formats available.", file=sys.stderr)
        return 1

    payload = build_download_payload(args.url, formats, resolution, clip.start, clip.end)
    print(f"Requesting {resolution} clip {clip.raw_start} -> {clip.raw_end} ({clip.selected_display})")
    resp = client.download(payload)
    resp.raise_for_status("Download request failed")

    link = (resp.data.get("data") or {}).get("downloadable_url") if isinstance(resp.data, dict) else None
    if not link:
        print("Error: the service did not return a download link.", file=sys.stderr)
        return 1
    print(f"Done! Download: {link}")
    return 0


def cmd_merge(client: UpstreamClient, settings: Settings, args) -> int:
    sequence = load_manifest(args.manifest)

    def on_change(status: JobStatus) -> None:
        if isinstance(status, Processing):
            print(f"  [{status.progress:>3}%] {status.stage}")
        elif isinstance(status, Completed):
            print(f"Done! Output: {status.result_path}")
        elif isinstance(status, Failed):
            print(f"Failed ({status.stage}): {status.error_message}", file=sys.stderr)

    print(f"Merging {len(sequence)} clip(s)")
    poller = JobPoller(client, interval=settings.poll_interval, on_change=on_change)
    poller.start(sequence.merge_payload())
    try:
        status = poller.wait()
    except KeyboardInterrupt:
        poller.reset()
        return 130
    return 0 if isinstance(status, Completed) else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="clipmaker",
        description="Clipmaker: trim and merge YouTube clips via remote services.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    sub = parser.add_subparsers(dest="command")

    fmt = sub.add_parser("formats", help="List available resolutions for a video")
    fmt.add_argument("url", help="YouTube video URL")

    clip = sub.add_parser("clip", help="Request a trimmed clip")
    clip.add_argument("url", help="YouTube video URL")
    clip.add_argument("--start", "-s", default="00:00:00", help="Start time (HH:MM:SS)")
    clip.add_argument("--end", "-e", required=True, help="End time (HH:MM:SS)")
    clip.add_argument("--resolution", "-r", help="Resolution note, e.g. 720p (default: first available)")

    merge = sub.add_parser("merge", help="Merge clips listed in a JSON manifest")
    merge.add_argument("manifest", type=Path, help="Path to a JSON manifest file")

    serve = sub.add_parser("serve", help="Launch the web UI")
    serve.add_argument("--port", type=int, default=3000, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    setup_logging(args.log_level.upper())
    settings = Settings.from_env()

    if args.command == "serve":
        from clipmaker.web import create_app
        app = create_app(settings)
        print(f"Clipmaker web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    client = UpstreamClient(settings)
    try:
        if args.command == "formats":
            code = cmd_formats(client, args)
        elif args.command == "clip":
            code = cmd_clip(client, args)
        else:
            code = cmd_merge(client, settings, args)
    except (UpstreamError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
