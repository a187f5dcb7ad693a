"""CLI entry point for the weather dashboard."""

import argparse
import asyncio
import logging

from pydantic import ValidationError

from weatherboard.config.defaults import API_KEY_ENV, DEFAULT_CONFIG
from weatherboard.config.loader import (
    get_config_value,
    load_config,
    require_api_key,
    save_config,
    set_config_value,
)
from weatherboard.config.schema import DashboardConfig
from weatherboard.controller import NOTICES, DashboardController
from weatherboard.daemon import WatchDaemon, watch_status
from weatherboard.errors import ConfigurationMissing
from weatherboard.ingest.owm_client import OpenWeatherMapClient
from weatherboard.ingest.weather_fetcher import WeatherFetcher
from weatherboard.models.common import UnitPreference
from weatherboard.reporting.formatters import format_dashboard_json, format_dashboard_text
from weatherboard.storage.kv_store import SqliteKeyValueStore
from weatherboard.storage.location_store import LocationStore, Rejected


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weatherboard",
        description="Multi-city weather dashboard",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=None, help="SQLite state DB path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="List tracked cities")

    add_p = sub.add_parser("add", help="Track a city")
    add_p.add_argument("name")

    rm_p = sub.add_parser("remove", help="Stop tracking a city")
    rm_p.add_argument("name")

    show_p = sub.add_parser("show", help="Fetch once and print the dashboard")
    show_p.add_argument("--fahrenheit", action="store_true")
    show_p.add_argument("--json", action="store_true", help="JSON output")

    watch_p = sub.add_parser("watch", help="Keep refreshing until interrupted")
    watch_p.add_argument("--interval", type=float, default=None, help="Seconds between refreshes")
    watch_p.add_argument("--fahrenheit", action="store_true")

    sub.add_parser("status", help="Show watch status")

    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.db:
        config = _override(config, "storage", db_path=args.db)

    if args.command == "list":
        return _cmd_list(config)
    elif args.command == "add":
        return _cmd_add(config, args)
    elif args.command == "remove":
        return _cmd_remove(config, args)
    elif args.command == "show":
        return _cmd_show(config, args)
    elif args.command == "watch":
        return _cmd_watch(config, args)
    elif args.command == "status":
        return watch_status()
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _override(config: DashboardConfig, section: str, **values) -> DashboardConfig:
    """Return a copy of config with one section updated, re-validated."""
    data = config.model_dump()
    data[section].update(values)
    return DashboardConfig.model_validate(data)


def _open_store(config: DashboardConfig) -> tuple[SqliteKeyValueStore, LocationStore]:
    kv = SqliteKeyValueStore(config.storage.db_path)
    return kv, LocationStore(kv, key=config.storage.key)


def _cmd_list(config: DashboardConfig) -> int:
    kv, store = _open_store(config)
    locations = store.load()
    kv.close()
    if not locations:
        print("No cities added yet.")
    for loc in locations:
        print(loc)
    return 0


def _cmd_add(config: DashboardConfig, args) -> int:
    kv, store = _open_store(config)
    try:
        outcome = store.add(store.load(), args.name)
        if isinstance(outcome, Rejected):
            print(NOTICES[outcome.reason])
            return 1
        store.save(outcome)
        print(f"Added {outcome[-1]}")
        return 0
    finally:
        kv.close()


def _cmd_remove(config: DashboardConfig, args) -> int:
    kv, store = _open_store(config)
    try:
        current = store.load()
        updated = store.remove(current, args.name)
        store.save(updated)
        if updated == current:
            print(f"{args.name} was not tracked")
        else:
            print(f"Removed {args.name.strip().lower()}")
        return 0
    finally:
        kv.close()


def _cmd_show(config: DashboardConfig, args) -> int:
    try:
        api_key = require_api_key(config)
    except ConfigurationMissing as e:
        print(f"Error: {e}")
        return 2
    if args.fahrenheit:
        config = _override(config, "display", unit=UnitPreference.FAHRENHEIT)
    state = asyncio.run(_fetch_once(config, api_key))
    print(format_dashboard_json(state) if args.json else format_dashboard_text(state))
    return 0


async def _fetch_once(config: DashboardConfig, api_key: str):
    kv, store = _open_store(config)
    client = OpenWeatherMapClient(
        api_key,
        forecast_url=config.provider.forecast_url,
        units=config.provider.units,
        timeout=config.provider.timeout_seconds,
    )
    controller = DashboardController(config, store, WeatherFetcher(client))
    try:
        controller.start()
        await controller.wait_idle()
        return controller.state()
    finally:
        await controller.dispose()
        await client.aclose()
        kv.close()


def _cmd_watch(config: DashboardConfig, args) -> int:
    if args.interval is not None:
        try:
            config = _override(config, "refresh", interval_seconds=args.interval)
        except ValidationError:
            print(f"Error: --interval must be a positive number of seconds, got {args.interval}")
            return 1
    if args.fahrenheit:
        config = _override(config, "display", unit=UnitPreference.FAHRENHEIT)
    try:
        return WatchDaemon(config).start()
    except ConfigurationMissing as e:
        print(f"Error: {e}")
        return 2


def _cmd_config(config: DashboardConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2, exclude={"provider": {"api_key"}}))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        if key.strip() == "provider.api_key":
            print(f"Error: the API key is not stored in the config file; set {API_KEY_ENV}")
            return 1
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
        except Exception as e:
            print(f"Error: {e}")
            return 1
        save_config(new_config, args.config)
        print(f"Set {key.strip()} = {get_config_value(new_config, key.strip())}")
        return 0
    else:
        print("Use: config show | config set key=value")
        return 1
