#!/usr/bin/env python3
"""
Command line interface for the indicator engine.

Usage:
    python -m chartengine indicator rsi --data data/NIFTY_5m.csv --period 7
    python -m chartengine tpo --data data/NIFTY_5m.csv --block-size 30m --timezone Asia/Kolkata
    python -m chartengine risk --capital 200000 --risk 1 --entry 100 --stop 95
"""

import argparse
import json
import logging
import sys
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from zoneinfo import ZoneInfoNotFoundError

from rich.console import Console
from rich.table import Table
from rich.text import Text

from chartengine.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from chartengine.core.models import IndicatorPoint
from chartengine.data import load_bars
from chartengine.indicators.registry import compute_indicator, config_for, list_indicators
from chartengine.indicators.tpo import (
    BLOCK_SIZE_OPTIONS,
    DEFAULT_TPO_CONFIG,
    MarketProfile,
    TPOConfig,
    calculate_tpo,
    get_tpo_stats,
)
from chartengine.risk import RiskParams, Side, auto_detect_side, size_position

logger = logging.getLogger(__name__)

console = Console()

# CLI flag -> indicator config field
INDICATOR_PARAMS = ("period", "fast", "slow", "signal", "std_dev", "multiplier")


def _format_time(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _series_columns(output) -> dict[str, list[IndicatorPoint]]:
    """Flatten an indicator result into named point series."""
    if isinstance(output, list):
        return {"value": output}
    if is_dataclass(output):
        return {f.name: getattr(output, f.name) for f in fields(output)}
    raise TypeError(f"Cannot display result of type {type(output).__name__}")


def _render_series(title: str, columns: dict[str, list[IndicatorPoint]], config: EngineConfig) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Time", style="dim")
    for name in columns:
        table.add_column(name, justify="right")

    # Align columns on bar time; shorter series leave blanks at the start
    by_time: dict[int, dict[str, IndicatorPoint]] = {}
    for name, points in columns.items():
        for point in points:
            by_time.setdefault(point.time, {})[name] = point

    times = sorted(by_time)[-config.display_rows :]
    for ts in times:
        row = [_format_time(ts)]
        for name in columns:
            point = by_time[ts].get(name)
            if point is None:
                row.append("")
                continue
            text = Text(f"{point.value:.{config.display_precision}f}")
            if point.color is not None:
                text.stylize(point.color.value)
            row.append(text)
        table.add_row(*row)
    return table


def _config_defaults(name: str, config: EngineConfig) -> dict:
    """Indicator parameters taken from the engine config for omitted flags."""
    key = name.lower().replace(" ", "_").replace("-", "_")
    defaults = {}
    period = getattr(config, f"{key}_period", None)
    if period is not None:
        defaults["period"] = period
    if key == "macd":
        defaults.update(fast=config.macd_fast, slow=config.macd_slow, signal=config.macd_signal)
    elif key == "bollinger":
        defaults["std_dev"] = config.bollinger_std_dev
    elif key == "supertrend":
        defaults["multiplier"] = config.supertrend_multiplier
    return defaults


def cmd_indicator(args: argparse.Namespace, config: EngineConfig) -> int:
    bars = load_bars(args.data)

    allowed = {f.name for f in fields(config_for(args.name))}
    params = {k: v for k, v in _config_defaults(args.name, config).items() if k in allowed}
    params.update(
        (key, getattr(args, key))
        for key in INDICATOR_PARAMS
        if getattr(args, key) is not None and key in allowed
    )
    indicator_config = config_for(args.name, **params)
    output = compute_indicator(bars, indicator_config)

    if isinstance(output, list) and output and isinstance(output[0], MarketProfile):
        return _print_profiles(output, args.json, config)

    columns = _series_columns(output)
    if args.json:
        print(json.dumps({name: [p.to_dict() for p in points] for name, points in columns.items()}, indent=2))
        return 0

    if not any(columns.values()):
        console.print(f"[yellow]Not enough bars ({len(bars)}) for {indicator_config}[/yellow]")
        return 0

    console.print(_render_series(f"{args.name.upper()} {indicator_config}", columns, config))
    return 0


def _print_profiles(profiles: list[MarketProfile], as_json: bool, config: EngineConfig) -> int:
    if as_json:
        print(json.dumps([p.to_dict() for p in profiles], indent=2))
        return 0

    if not profiles:
        console.print("[yellow]No sessions with bars in range[/yellow]")
        return 0

    precision = config.display_precision
    for profile in profiles:
        stats = get_tpo_stats(profile)
        table = Table(title=f"TPO {profile.session_key}", show_header=True, header_style="bold")
        table.add_column("Price", justify="right")
        table.add_column("TPOs", justify="right")
        table.add_column("Letters")

        for level in reversed(profile.get_sorted_levels()):
            style = ""
            if level.price == profile.poc:
                style = "bold yellow"
            elif profile.val <= level.price <= profile.vah:
                style = "cyan"
            table.add_row(
                f"{level.price:.{precision}f}",
                str(level.tpo_count),
                "".join(sorted(level.letters, key=lambda s: (len(s), s))),
                style=style,
            )
        console.print(table)

        summary = Table(show_header=False, box=None)
        summary.add_column("Stat", style="dim")
        summary.add_column("Value", justify="right")
        for key in ("poc", "vah", "val", "ib_high", "ib_low", "range_high", "range_low"):
            summary.add_row(key.upper(), f"{stats[key]:.{precision}f}")
        summary.add_row("TOTAL TPOS", str(stats["total_tpos"]))
        summary.add_row("ROTATION", str(stats["rotation_factor"]))
        summary.add_row("SINGLE PRINTS", str(stats["single_print_count"]))
        console.print(summary)
        console.print()
    return 0


def cmd_tpo(args: argparse.Namespace, config: EngineConfig) -> int:
    bars = load_bars(args.data)

    tick_size = "auto" if args.tick_size is None else args.tick_size
    tpo_config = TPOConfig(
        tick_size=tick_size,
        block_size=args.block_size,
        session_type=args.session_type,
        session_start=args.session_start,
        session_end=args.session_end,
        value_area_percent=args.value_area,
        all_hours=not args.session_only,
        interval=args.interval,
        timezone=args.timezone,
    )
    profiles = calculate_tpo(bars, tpo_config)
    return _print_profiles(profiles, args.json, config)


def cmd_risk(args: argparse.Namespace, config: EngineConfig) -> int:
    side = Side(args.side) if args.side else auto_detect_side(args.entry, args.stop)
    if side is None:
        console.print("[red]Cannot infer side: entry and stop loss must be positive and different[/red]")
        return 1

    params = RiskParams(
        capital=args.capital,
        risk_percent=args.risk,
        entry_price=args.entry,
        stop_loss_price=args.stop,
        side=side,
        target_price=args.target,
        risk_reward_ratio=args.rr,
    )
    outcome = size_position(params, currency=config.currency_symbol)

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
        return 0 if outcome.ok else 1

    if not outcome.ok:
        console.print(f"[red]{outcome.message}[/red]")
        return 1

    table = Table(title=f"Position Size ({side.value})", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value", justify="right")
    for key, value in outcome.formatted.items():
        table.add_row(key.replace("_", " ").title(), value)
    console.print(table)
    return 0


def build_parser(config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chartengine",
        description="Technical indicators, market profile and position sizing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Last RSI values
    %(prog)s indicator rsi --data data/NIFTY_5m.csv

    # MACD with custom periods, as JSON
    %(prog)s indicator macd --data bars.parquet --fast 8 --slow 21 --json

    # Daily TPO profiles in exchange time
    %(prog)s tpo --data data/NIFTY_5m.csv --timezone Asia/Kolkata --session-only

    # Size a long trade risking 1%% of 2 lakh
    %(prog)s risk --capital 200000 --risk 1 --entry 100 --stop 95
        """,
    )
    parser.add_argument("--log-level", default=config.log_level, help=f"Logging level (default: {config.log_level})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # indicator
    p_ind = subparsers.add_parser("indicator", help="Compute an indicator series")
    p_ind.add_argument("name", help=f"Indicator name: {', '.join(list_indicators())}")
    p_ind.add_argument("--data", "-d", type=Path, required=True, help="CSV or Parquet bar file")
    p_ind.add_argument(
        "--period", "-p", type=int, help="Lookback period (default: per indicator, from the engine config)"
    )
    p_ind.add_argument("--fast", type=int, help=f"MACD fast period (default: {config.macd_fast})")
    p_ind.add_argument("--slow", type=int, help=f"MACD slow period (default: {config.macd_slow})")
    p_ind.add_argument("--signal", type=int, help=f"MACD signal period (default: {config.macd_signal})")
    p_ind.add_argument(
        "--std-dev", type=float, help=f"Bollinger band width in SDs (default: {config.bollinger_std_dev})"
    )
    p_ind.add_argument(
        "--multiplier", type=float, help=f"Supertrend ATR multiplier (default: {config.supertrend_multiplier})"
    )
    p_ind.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p_ind.set_defaults(handler=cmd_indicator)

    # tpo
    tpo_defaults = DEFAULT_TPO_CONFIG
    p_tpo = subparsers.add_parser("tpo", help="Build market profiles per session")
    p_tpo.add_argument("--data", "-d", type=Path, required=True, help="CSV or Parquet bar file")
    p_tpo.add_argument("--tick-size", type=float, help="Price increment per row (default: auto)")
    p_tpo.add_argument(
        "--block-size",
        default=tpo_defaults.block_size,
        choices=BLOCK_SIZE_OPTIONS,
        help=f"Letter period (default: {tpo_defaults.block_size})",
    )
    p_tpo.add_argument("--session-type", default=tpo_defaults.session_type, choices=["daily", "weekly"])
    p_tpo.add_argument(
        "--session-start", default=tpo_defaults.session_start, help=f"Session open HH:MM (default: {tpo_defaults.session_start})"
    )
    p_tpo.add_argument(
        "--session-end", default=tpo_defaults.session_end, help=f"Session close HH:MM (default: {tpo_defaults.session_end})"
    )
    p_tpo.add_argument("--session-only", action="store_true", help="Drop bars outside the session window")
    p_tpo.add_argument(
        "--value-area",
        type=float,
        default=tpo_defaults.value_area_percent,
        help=f"Value area %% (default: {tpo_defaults.value_area_percent:g})",
    )
    p_tpo.add_argument("--interval", help="Chart interval, e.g. 15m or 1D (D/W/M builds one composite)")
    p_tpo.add_argument(
        "--timezone", "-z", default=tpo_defaults.timezone, help=f"IANA timezone for sessions (default: {tpo_defaults.timezone})"
    )
    p_tpo.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    p_tpo.set_defaults(handler=cmd_tpo)

    # risk
    p_risk = subparsers.add_parser("risk", help="Position size from capital and stop loss")
    p_risk.add_argument("--capital", "-c", type=float, required=True, help="Account capital")
    p_risk.add_argument("--risk", "-r", type=float, required=True, help="Risk per trade in %%")
    p_risk.add_argument("--entry", "-e", type=float, required=True, help="Entry price")
    p_risk.add_argument("--stop", "-s", type=float, required=True, help="Stop loss price")
    p_risk.add_argument("--target", "-t", type=float, help="Target price (default: derived from --rr)")
    p_risk.add_argument(
        "--rr", type=float, default=config.risk_reward_ratio, help=f"Risk:reward (default: {config.risk_reward_ratio})"
    )
    p_risk.add_argument("--side", choices=[s.value for s in Side], help="Trade side (default: inferred)")
    p_risk.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    p_risk.set_defaults(handler=cmd_risk)

    return parser


def main(argv: list[str] | None = None, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> int:
    parser = build_parser(config)
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format=config.log_format)

    try:
        return args.handler(args, config)
    except (FileNotFoundError, ValueError, TypeError, ZoneInfoNotFoundError) as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
