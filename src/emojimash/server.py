"""aiohttp.web front end exposing ``/emoji``, ``/update`` and ``/status``.

Every outcome, errors included, is answered with HTTP 200 and a plain text
body describing it.
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import AsyncIterator, Sequence
from functools import partial
from pathlib import Path

from aiohttp import web

from emojimash._transport import HttpTransport, Transport
from emojimash.archive import DocumentArchive
from emojimash.config import EmojiMashConfig
from emojimash.exceptions import RefreshError
from emojimash.models.refresh import RefreshOutcome
from emojimash.refresh import RefreshCoordinator
from emojimash.service import ResolutionService
from emojimash.store import MappingStore

_logger = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("service", ResolutionService)

routes = web.RouteTableDef()


def build_service(config: EmojiMashConfig, transport: Transport) -> ResolutionService:
    """Wire store, archive and coordinator into a :class:`ResolutionService`."""
    store = MappingStore()
    coordinator = RefreshCoordinator(
        store,
        transport,
        DocumentArchive(config.archive_path),
        url=config.metadata_url,
        fetch_timeout=config.fetch_timeout,
    )
    return ResolutionService(store, coordinator, pair_separator=config.pair_separator)


def describe_outcome(outcome: RefreshOutcome) -> str:
    if not outcome.completed:
        return "An update is already in progress."
    return (
        f"Metadata updated from {outcome.source}: {outcome.record_count} records "
        f"({outcome.skipped_count} skipped, {outcome.duplicate_count} duplicates) "
        f"in {outcome.duration_s:.2f}s."
    )


@routes.get("/emoji")
async def handle_emoji(request: web.Request) -> web.Response:
    pair = request.query.get("pair")
    if pair is None:
        return web.Response(text="Missing 'pair' query parameter.")

    _logger.info("Lookup %s", pair)
    service = request.app[SERVICE_KEY]
    try:
        result = await service.resolve_pair(pair)
    except Exception as exc:
        _logger.exception("Lookup of %r failed", pair)
        return web.Response(text=f"Lookup failed: {exc}")
    return web.Response(text=result.message)


@routes.get("/update")
async def handle_update(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    try:
        outcome = await service.refresh()
    except RefreshError as exc:
        return web.Response(text=f"Update failed ({exc.stage} error): {exc}")
    except Exception as exc:
        _logger.exception("Update failed unexpectedly")
        return web.Response(text=f"Update failed: {exc}")
    return web.Response(text=describe_outcome(outcome))


def describe_status(service: ResolutionService) -> str:
    snapshot = service.store.snapshot
    coordinator = service.coordinator
    lines: list[str] = []
    if snapshot is None:
        lines.append("Mapping: not initialized.")
    else:
        lines.append(f"Mapping: {len(snapshot)} pairs, loaded at {snapshot.loaded_at.isoformat()}.")
    if coordinator.last_outcome is not None:
        lines.append(f"Last refresh: {describe_outcome(coordinator.last_outcome)}")
    if coordinator.last_error is not None:
        error = coordinator.last_error
        lines.append(f"Last error ({error.stage} error): {error}")
    lines.append(f"Refresh in progress: {'yes' if coordinator.in_progress else 'no'}.")
    return "\n".join(lines)


@routes.get("/status")
async def handle_status(request: web.Request) -> web.Response:
    return web.Response(text=describe_status(request.app[SERVICE_KEY]))


async def _lifecycle(
    app: web.Application,
    *,
    config: EmojiMashConfig,
    http_transport: HttpTransport | None,
) -> AsyncIterator[None]:
    if config.bootstrap_on_startup:
        await app[SERVICE_KEY].bootstrap()
    yield
    if http_transport is not None:
        await http_transport.close()


def create_app(config: EmojiMashConfig, *, transport: Transport | None = None) -> web.Application:
    """Build the web application.

    *transport* replaces the default aiohttp download, mainly for tests.
    """
    http_transport: HttpTransport | None = None
    if transport is None:
        http_transport = HttpTransport(timeout=config.fetch_timeout)
        transport = http_transport

    app = web.Application()
    app[SERVICE_KEY] = build_service(config, transport)
    app.add_routes(routes)
    app.cleanup_ctx.append(partial(_lifecycle, config=config, http_transport=http_transport))
    return app


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="emojimash", description="Serve emoji mash-up lookups.")
    parser.add_argument("--host", help="Interface to bind (default: EMOJIMASH_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: EMOJIMASH_PORT or 21387)")
    parser.add_argument("--data-dir", type=Path, help="Directory for the archived metadata document")
    parser.add_argument("--no-bootstrap", action="store_true", help="Do not load the mapping at startup")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.no_bootstrap:
        overrides["bootstrap_on_startup"] = False
    config = EmojiMashConfig.from_env(**overrides)

    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
