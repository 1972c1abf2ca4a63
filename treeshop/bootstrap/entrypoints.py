"""
bootstrap/entrypoints.py - Application entry points

Provides CLI and API entry points.
"""

from __future__ import annotations
from typing import Any, List, Optional
import argparse
import json
import logging
import sys

logger = logging.getLogger("bootstrap.entrypoints")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


# Handlers installed by setup_logging(), replaced on the next call
_installed_handlers: List[logging.Handler] = []


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, json_format: bool = False) -> None:
    """
    Configure application logging.

    Calling it again replaces the handlers from the previous call instead
    of stacking new ones on the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # Root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    while _installed_handlers:
        old = _installed_handlers.pop()
        root_logger.removeHandler(old)
        old.close()

    # Console handler (stderr, stdout carries command output)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def _emit(data: Any, as_json: bool, lines: List[str]) -> None:
    if as_json:
        print(json.dumps(data, indent=2, default=str))
    else:
        print("\n".join(lines))


def _cmd_equipment_rate(ctx, parsed) -> int:
    from ..cost import Equipment, EquipmentCategory, EquipmentCostModel

    if parsed.category:
        category = EquipmentCategory(parsed.category)
        items = [Equipment.from_defaults(category.label, category,
                                         fuel_price_per_gallon=ctx.config.pricing.fuel_price_per_gallon)]
    elif parsed.id:
        item = ctx.equipment.get(parsed.id)
        if item is None:
            print(f"Equipment not found: {parsed.id}", file=sys.stderr)
            return 1
        items = [item]
    else:
        items = ctx.equipment.all()

    model = EquipmentCostModel()
    results = []
    lines = []
    for item in items:
        breakdown = model.hourly_rate(item)
        results.append({"equipment_id": item.equipment_id, "name": item.name, **breakdown.to_dict()})
        lines.append(f"{item.name:<28} ${breakdown.hourly_rate:>8.2f}/hr")
        if parsed.detail:
            for key, value in breakdown.to_dict().items():
                if key != "hourly_rate":
                    lines.append(f"    {key:<14} {value:>10.4f}")

    _emit(results, parsed.json, lines)
    return 0


def _cmd_loadout_cost(ctx, parsed) -> int:
    if parsed.id:
        loadout = ctx.loadouts.get(parsed.id)
        if loadout is None:
            print(f"Loadout not found: {parsed.id}", file=sys.stderr)
            return 1
        loadouts = [loadout]
    else:
        loadouts = ctx.loadouts.all()

    markup = parsed.markup if parsed.markup is not None else ctx.config.pricing.default_markup
    results = []
    lines = []
    for loadout in loadouts:
        breakdown = ctx.loadout_cost(loadout)
        data = breakdown.to_dict()
        data["billable_rate"] = round(breakdown.with_markup(markup), 2)
        results.append(data)
        lines.append(
            f"{loadout.name:<28} cost ${breakdown.total_cost:>8.2f}/hr  "
            f"billable ${breakdown.with_markup(markup):>8.2f}/hr"
        )
        if not breakdown.is_complete:
            lines.append(
                f"    unresolved: {len(breakdown.missing_equipment_ids)} equipment, "
                f"{len(breakdown.missing_employee_ids)} employees"
            )

    _emit(results, parsed.json, lines)
    return 0


def _cmd_quote(ctx, parsed) -> int:
    from ..pricing import AFISSAssessment, EquipmentClass, PricingRequest, ServiceType, UrgencyTier

    request = PricingRequest(
        service_type=ServiceType(parsed.service),
        quantity=parsed.quantity,
        height=parsed.height,
        dbh=parsed.dbh,
        canopy_radius=parsed.canopy_radius,
        trim_percent=parsed.trim_percent,
        stump_diameter=parsed.stump_diameter,
        grind_depth=parsed.grind_depth,
        acres=parsed.acres,
        max_dbh=parsed.max_dbh,
        afiss=AFISSAssessment.from_names(parsed.factor or []),
        includes_cleanup=parsed.cleanup,
        includes_hauling=parsed.hauling,
        urgency=UrgencyTier(parsed.urgency),
        equipment_class=EquipmentClass(parsed.equipment) if parsed.equipment else None,
        crew_size=parsed.crew_size,
    )
    result = ctx.pricer.price(request)

    lines = [
        f"Service:        {result.service_type.value}",
        f"AF score:       {result.af_score} (x{result.afiss_multiplier:.2f})",
        f"Unit price:     ${result.unit_price:,.2f} {result.unit}",
        f"Total price:    ${result.total_price:,.2f}",
        f"Est. hours:     {result.estimated_hours:.1f}",
        f"Profit margin:  {result.profit_margin:.1%}",
    ]
    _emit(result.to_dict(), parsed.json, lines)
    return 0


def _cmd_proposals_stats(ctx, parsed) -> int:
    from ..proposals import compute_statistics

    stats = compute_statistics(ctx.proposals.all())
    lines = [
        f"Proposals:       {stats.total_count}",
        f"Total value:     ${stats.total_value:,.2f}",
        f"Average value:   ${stats.average_value:,.2f}",
        f"Conversion rate: {stats.conversion_rate:.1%}",
        f"Expired:         {stats.expired_count}",
    ]
    _emit(stats.to_dict(), parsed.json, lines)
    return 0


def build_parser() -> argparse.ArgumentParser:
    from ..cost import EquipmentCategory
    from ..pricing import EquipmentClass, ServiceType

    parser = argparse.ArgumentParser(
        description="TreeShop cost and pricing CLI",
        prog="treeshop",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    sub = parser.add_subparsers(dest="command")

    rate = sub.add_parser("equipment-rate", help="Hourly rate breakdown for equipment")
    rate.add_argument("--category", choices=[c.value for c in EquipmentCategory],
                      help="Use the defaults for an equipment category")
    rate.add_argument("--id", help="Stored equipment id")
    rate.add_argument("--detail", action="store_true", help="Show every cost component")

    cost = sub.add_parser("loadout-cost", help="Hourly cost of stored loadouts")
    cost.add_argument("--id", help="Stored loadout id")
    cost.add_argument("--markup", type=float, default=None, help="Markup multiplier")

    quote = sub.add_parser("quote", help="Price a single service request")
    quote.add_argument("service", choices=[s.value for s in ServiceType], help="Service type")
    quote.add_argument("--quantity", type=float, default=1.0)
    quote.add_argument("--height", type=float, default=0.0)
    quote.add_argument("--dbh", type=float, default=0.0)
    quote.add_argument("--canopy-radius", type=float, default=0.0)
    quote.add_argument("--trim-percent", type=float, default=100.0)
    quote.add_argument("--stump-diameter", type=float, default=0.0)
    quote.add_argument("--grind-depth", type=float, default=None)
    quote.add_argument("--acres", type=float, default=None)
    quote.add_argument("--max-dbh", type=float, default=None)
    quote.add_argument("--factor", action="append", help="AFISS factor name (repeatable)")
    quote.add_argument("--cleanup", action="store_true")
    quote.add_argument("--hauling", action="store_true")
    quote.add_argument("--urgency", choices=["normal", "priority", "emergency"], default="normal")
    quote.add_argument("--equipment", choices=[e.value for e in EquipmentClass], help="Equipment class")
    quote.add_argument("--crew-size", type=int, default=2)

    sub.add_parser("proposals-stats", help="Proposal pipeline statistics")

    return parser


_COMMANDS = {
    "equipment-rate": _cmd_equipment_rate,
    "loadout-cost": _cmd_loadout_cost,
    "quote": _cmd_quote,
    "proposals-stats": _cmd_proposals_stats,
}


def cli_main(args: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = build_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 2

    log_level = "DEBUG" if parsed.verbose else parsed.log_level
    setup_logging(level=log_level, log_file=parsed.log_file)

    from ..errors import TreeShopError

    try:
        from .app import AppContext
        from .config import load_config

        ctx = AppContext.build(load_config(parsed.config))
        return _COMMANDS[parsed.command](ctx, parsed)

    except TreeShopError as e:
        if parsed.json:
            print(json.dumps({"error": e.to_dict()}, indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


def api_main(args: Optional[List[str]] = None) -> None:
    """
    API server entry point.

    Args:
        args: Command line arguments
    """
    parser = argparse.ArgumentParser(
        description="TreeShop API Server",
        prog="treeshop-api",
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to configuration file",
        default=None,
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        help="API port",
        default=None,
    )
    parser.add_argument(
        "-H", "--host",
        help="API host",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level",
    )

    parsed = parser.parse_args(args)

    setup_logging(level=parsed.log_level)

    try:
        import uvicorn

        from .app import AppContext
        from .config import load_config
        from ..deployment.api import create_fastapi_app

        config = load_config(parsed.config)
        if parsed.port:
            config.api.port = parsed.port
        if parsed.host:
            config.api.host = parsed.host

        ctx = AppContext.build(config)
        app = create_fastapi_app(ctx)
        uvicorn.run(app, host=config.api.host, port=config.api.port)

    except KeyboardInterrupt:
        print("\nShutting down...")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


def main():
    """Main entry point for the package."""
    if len(sys.argv) > 1 and sys.argv[1] == "api":
        api_main(sys.argv[2:])
    else:
        sys.exit(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
