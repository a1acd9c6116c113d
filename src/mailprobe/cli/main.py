# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""mailprobe CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..config import HttpSettings, ServiceConfig, load_email_settings, load_http_settings, load_service_config
from ..errors import PortInUseError
from ..http import create_default_http_client
from ..http.url import join_url, normalize
from ..log import setup_logging
from ..routes import RouteGroup, list_routes
from ..runtime import MailProbe
from ..scenario import SCENARIOS, build_scenario, print_report
from ..server import build_email_routes, default_sender, demo_directory, serve

CLI_TEXT_TRUNCATION_BYTES = 4096
URL_FIXTURES = (
    "https://ai-technical-interviewer-o7qo.onrender.com",
    "https://ai-technical-interviewer-o7qo.onrender.com/",
    "http://localhost:5000",
    "http://localhost:5000/",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verification harness for the candidate-session email API")
    parser.add_argument("--log-level", default=None, help="Logging level (default: MAILPROBE_LOG_LEVEL or WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    serve_parser = sub.add_parser("serve", help="Start the verification service")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--mount-prefix", default=None)
    serve_parser.add_argument(
        "--origin",
        action="append",
        dest="origins",
        help="Allowed CORS origin (repeatable; replaces MAILPROBE_ALLOWED_ORIGINS)",
    )

    run_parser = sub.add_parser("run", help="Run a probe scenario against a base URL")
    run_parser.add_argument("base_url", help="Service root, e.g. http://localhost:3333")
    run_parser.add_argument("--scenario", choices=sorted(SCENARIOS), default="email-api")
    run_parser.add_argument("--mount-prefix", default=None)
    run_parser.add_argument("--candidate-id", default=None)
    run_parser.add_argument("--timeout", type=float, default=None, help="Per-probe timeout in seconds")
    run_parser.add_argument("--json", action="store_true", help="Output JSON instead of a human-friendly summary")
    run_parser.add_argument("--strict", action="store_true", help="Exit 1 when any step does not pass")
    run_parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for self-signed staging hosts)",
    )

    routes_parser = sub.add_parser("routes", help="List the routes the service would expose")
    routes_parser.add_argument("--mount-prefix", default=None)

    url_parser = sub.add_parser("normalize-url", help="Show how base URLs are joined with an API path")
    url_parser.add_argument("urls", nargs="*", help="Base URLs (default: built-in fixtures)")
    url_parser.add_argument("--path", default="/api/health")
    return parser


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _truncate_for_cli(value: Any, *, max_bytes: int) -> Any:
    if isinstance(value, str):
        return _truncate_text_bytes(value, max_bytes)
    if isinstance(value, dict):
        return {k: _truncate_for_cli(v, max_bytes=max_bytes) for k, v in value.items()}
    if isinstance(value, list):
        return [_truncate_for_cli(v, max_bytes=max_bytes) for v in value]
    return value


def _print_json(data: Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(_truncate_for_cli(payload, max_bytes=CLI_TEXT_TRUNCATION_BYTES), sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _email_routes(mount_prefix: str) -> RouteGroup:
    settings = load_email_settings()
    return build_email_routes(demo_directory(), default_sender(settings), settings, mount_prefix=mount_prefix)


def _cmd_serve(args: argparse.Namespace) -> int:
    config = load_service_config()
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.mount_prefix is not None:
        config.mount_prefix = args.mount_prefix
    if args.origins:
        config.allowed_origins = frozenset(args.origins)

    routes = _email_routes(config.mount_prefix)
    print(f"[mailprobe] Email API verification service on http://{config.host}:{config.port}")
    for descriptor in list_routes(routes):
        print(f"  {descriptor.method.value} {join_url(config.mount_prefix, descriptor.path)}")
    try:
        serve(config, routes)
    except PortInUseError as exc:
        print(f"[mailprobe] {exc}", file=sys.stderr)
        return 2
    return 0


def _cmd_run(args: argparse.Namespace) -> int:
    settings: HttpSettings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.timeout is not None and args.timeout > 0:
        settings.timeout = args.timeout

    kwargs: dict[str, Any] = {}
    if args.mount_prefix is not None:
        kwargs["mount_prefix"] = args.mount_prefix
    if args.candidate_id is not None:
        kwargs["candidate_id"] = args.candidate_id
    scenario = build_scenario(args.scenario, args.base_url, **kwargs)

    with MailProbe(http_client=create_default_http_client(settings)) as harness:
        report = harness.run(scenario)

    if args.json:
        _print_json(report)
    else:
        print_report(report)

    if args.strict and not report.all_passed:
        return 1
    return 0


def _cmd_routes(args: argparse.Namespace) -> int:
    mount_prefix = args.mount_prefix or ServiceConfig().mount_prefix
    root = RouteGroup("root")
    root.include(_email_routes(mount_prefix), prefix=mount_prefix)
    print("Registered routes:")
    for descriptor in list_routes(root):
        print(f"{descriptor.method.value} {descriptor.path}")
    return 0


def _cmd_normalize_url(args: argparse.Namespace) -> int:
    for url in args.urls or URL_FIXTURES:
        cleaned = normalize(url)
        print(f'Original: "{url}" -> Cleaned: "{cleaned}" -> API URL: "{cleaned}{args.path}"')
    return 0


COMMANDS = {
    "serve": _cmd_serve,
    "run": _cmd_run,
    "routes": _cmd_routes,
    "normalize-url": _cmd_normalize_url,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
