from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any

from connect_samples.settings import settings


def _configure_logging() -> None:
    import logging

    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _parse_condition(text: str) -> tuple[str, Any]:
    key, sep, raw = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    try:
        value: Any = json.loads(raw)
    except ValueError:
        value = raw
    return key, value


def cmd_version() -> int:
    from connect_samples import __version__

    print(__version__)
    return 0


def cmd_services(args: argparse.Namespace) -> int:
    from connect_samples.connectors.registry import build_registry
    from connect_samples.services.models import RequestInformation, UserInformation

    registry = build_registry()
    info = RequestInformation(user=UserInformation(groups=tuple(args.group or ())))
    for entry in asyncio.run(registry.describe(info)):
        print(f"{entry['id']:<38} {entry['name']}")
    return 0


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    from connect_samples.api_models import SeedIn
    from connect_samples.asyncjobs import AsyncJob, JobState
    from connect_samples.connectors.registry import build_registry
    from connect_samples.services.models import RequestInformation, ServiceRequest, UserInformation

    registry = build_registry()
    seeds = ()
    if args.seeds:
        raw = json.loads(Path(args.seeds).read_text(encoding="utf-8"))
        seeds = tuple(SeedIn.model_validate(s).to_seed() for s in raw)

    token = args.token
    if token is None and args.api_key is not None:
        definition = registry.get(args.service_id)
        if definition.authenticator:
            token = registry.login(definition.authenticator, {"apikey": args.api_key})

    request = ServiceRequest(
        conditions=dict(args.condition or ()),
        seeds=seeds,
        token=token,
        request_info=RequestInformation(user=UserInformation(groups=tuple(args.group or ()))),
    )
    outcome = await registry.invoke(args.service_id, request)
    if isinstance(outcome, AsyncJob):
        interval = registry.get(args.service_id).async_polling_interval or 1
        seen = 0
        while outcome.poll() not in (JobState.COMPLETED, JobState.FAILED):
            for s in outcome.substatuses[seen:]:
                print(f"[{s.type}] {s.message}")
            seen = len(outcome.substatuses)
            await asyncio.sleep(interval)
        if outcome.error is not None:
            raise outcome.error
        assert outcome.result is not None
        return outcome.result.to_dict()
    return outcome.to_dict()


def cmd_run(args: argparse.Namespace) -> int:
    _configure_logging()
    from connect_samples.errors import ConnectorError

    try:
        out = asyncio.run(_run(args))
    except ConnectorError as e:
        print(json.dumps(e.to_problem(), indent=2))
        return 1
    print(json.dumps(out, indent=2))
    return 0


def cmd_serve(_args: argparse.Namespace) -> int:
    _configure_logging()
    from connect_samples.server import main

    main()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="connect-samples")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version").set_defaults(func=lambda _a: cmd_version())

    services = sub.add_parser("services", help="List the service table")
    services.add_argument("--group", action="append", help="User group for hidden services (repeatable)")
    services.set_defaults(func=cmd_services)

    run = sub.add_parser("run", help="Invoke one service and print its result graph as JSON")
    run.add_argument("service_id")
    run.add_argument("--condition", "-c", action="append", type=_parse_condition, help="KEY=VALUE (repeatable)")
    run.add_argument("--seeds", default=None, help="JSON file holding a list of seeds")
    run.add_argument("--token", default=None, help="Bearer token for authenticated services")
    run.add_argument("--api-key", default=None, help="Log in with this API key first")
    run.add_argument("--group", action="append", help="User group (repeatable)")
    run.set_defaults(func=cmd_run)

    sub.add_parser("serve", help="Run the HTTP gateway").set_defaults(func=cmd_serve)

    return p


def app() -> None:
    parser = build_parser()
    args = parser.parse_args()
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    app()
