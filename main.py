#!/usr/bin/env python3
"""DAHDI Span Types CLI.

Assigns a line mode (E1, T1 or J1) to each span of the DAHDI devices before
the spans are assigned. Types come from a rule file that maps device
identifiers (hardware id, @location or device path, with shell wildcards)
to span types; the last matching line wins.

Actions:
    list        Show the current type of every E1/T1/J1 span
    dumpconfig  Print the current state as a rule file
    set         Apply the rule file to the devices
    compare     Report spans whose type differs from the rule file

Environment Variables:
    - DAHDISPANTYPESCONF: Rule file (default: /etc/dahdi/span-types.conf)
    - DAHDI_DEVICES_DIR: Device directory (default: /sys/bus/dahdi_devices/devices)
    - SPAN_TYPES_KEY: Identifier key for dumpconfig (default: hwid)
    - SPAN_TYPES_LOG_LEVEL: Log level when not verbose (default: WARNING)

Exit Codes:
    0  success / no drift
    1  fatal error, or at least one span write was rejected
    2  command-line usage error
    5  compare found drift

Example Usage:
    $ python main.py list
    $ python main.py dumpconfig > /etc/dahdi/span-types.conf
    $ python main.py --dry-run set
    $ python main.py compare || echo "span types drifted"
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from src.spantypes.adapters import SysfsDeviceStore, TextRuleParser
from src.spantypes.config import SpanTypesConfig, parse_line_mode
from src.spantypes.domain.entities import LineType, Rule, WriteStatus
from src.spantypes.domain.ports import IDeviceStore
from src.spantypes.exceptions import InvalidOptionError, RuleFileNotFoundError, SpanTypesError
from src.spantypes.use_cases import (
    CompareSpanTypesUseCase,
    DumpConfigUseCase,
    ListSpansUseCase,
    SetSpanTypesUseCase,
    format_span_line,
)

PROG = "dahdi-span-types"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_DRIFT = 5

ACTIONS = ("list", "dumpconfig", "set", "compare")

logger = logging.getLogger(PROG)


def load_rules(rules_file: str, line_mode: Optional[LineType] = None) -> list[Rule]:
    """Load the rule file, with an optional implicit leading ``* *:<mode>``.

    With a line mode, a missing rule file is not an error: the implicit
    rule alone applies.
    """
    rules: list[Rule] = []
    if line_mode is not None:
        rules.append(Rule(identifier_pattern="*", span_pattern="*", target_type=line_mode))

    try:
        rules.extend(TextRuleParser().parse_file(rules_file))
    except RuleFileNotFoundError as e:
        if line_mode is None:
            raise
        logger.warning(f"{e.message}; using default line mode {line_mode} only")

    return rules


def run_list(store: IDeviceStore, devices: Sequence[str]) -> int:
    for device, span in ListSpansUseCase(store).execute(devices or None):
        print(format_span_line(device, span))
    return EXIT_OK


def run_dumpconfig(
    store: IDeviceStore,
    devices: Sequence[str],
    config: SpanTypesConfig,
    line_mode: Optional[LineType],
) -> int:
    generated = DumpConfigUseCase(store).execute(
        devices or None,
        key=config.key,
        default_line_mode=line_mode,
    )
    sys.stdout.write(generated.text)
    return EXIT_OK


def run_set(
    store: IDeviceStore,
    devices: Sequence[str],
    rules: list[Rule],
    dry_run: bool,
) -> int:
    result = SetSpanTypesUseCase(store, rules).execute(devices or None, dry_run=dry_run)

    if dry_run:
        for r in result.results:
            target = r.target_type or "-"
            print(
                f"{r.status.value:<12} {r.device.path} span {r.span.number}: "
                f"{r.span.current_type} -> {target}"
            )

    for r in result.failures:
        print(
            f"{PROG}: {r.device.path} span {r.span.number}: "
            f"cannot set {r.target_type}: {r.detail}",
            file=sys.stderr,
        )

    logger.info(
        f"Applied={result.count(WriteStatus.APPLIED)}, "
        f"WouldApply={result.count(WriteStatus.WOULD_APPLY)}, "
        f"Unchanged={result.count(WriteStatus.UNCHANGED)}, "
        f"Unmatched={result.count(WriteStatus.UNMATCHED)}, "
        f"Failed={len(result.failures)}"
    )
    return EXIT_OK if result.success else EXIT_ERROR


def run_compare(store: IDeviceStore, devices: Sequence[str], rules: list[Rule]) -> int:
    result = CompareSpanTypesUseCase(store, rules).execute(devices or None)
    for record in result.drift:
        print(
            f"DIFF: {record.device.path} span {record.span.number}: "
            f"configured {record.configured_type}, live {record.live_type}"
        )
    return EXIT_DRIFT if result.has_drift else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Set the line mode (E1/T1/J1) of DAHDI spans before they are assigned",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Rule file format (last matching line wins):
  <hwid|@location|devpath>  <span>:<E1|T1|J1>

  *                 *:T1
  usb:X1234567      [34]:E1

Examples:
  dahdi-span-types list                     # Show current span types
  dahdi-span-types dumpconfig               # Current state as a rule file
  dahdi-span-types --dry-run set            # Show what set would change
  dahdi-span-types set                      # Apply the rule file
  dahdi-span-types compare                  # Exit 5 if spans differ from rules
        """,
    )

    parser.add_argument("action", choices=ACTIONS, help="Action to perform")
    parser.add_argument(
        "devices",
        nargs="*",
        metavar="DEVICE",
        help="Device paths or names to act on (default: all devices)",
    )

    general_group = parser.add_argument_group("General Options")
    general_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose diagnostics, including every resolution decision",
    )
    general_group.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="With set: report what would be written without writing",
    )

    rules_group = parser.add_argument_group("Rule Options")
    rules_group.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Rule file (default: $DAHDISPANTYPESCONF or /etc/dahdi/span-types.conf)",
    )
    rules_group.add_argument(
        "-k", "--key",
        metavar="KEY",
        help="Identifier dumpconfig uses for devices: hwid, location or path",
    )
    rules_group.add_argument(
        "--line-mode",
        metavar="MODE",
        help="Default line mode E1/T1/J1: the dumpconfig wildcard, or an implicit "
             "'* *:MODE' first rule for set/compare",
    )

    device_group = parser.add_argument_group("Device Options")
    device_group.add_argument(
        "--devices-dir",
        metavar="DIR",
        help="Device directory (default: $DAHDI_DEVICES_DIR or /sys/bus/dahdi_devices/devices)",
    )

    return parser


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def run(args: argparse.Namespace) -> int:
    """Validate options, build the adapters and dispatch the action.

    All option checks happen before any device is touched.
    """
    config = SpanTypesConfig().override(
        rules_file=args.config,
        devices_dir=args.devices_dir,
        key=args.key,
    )
    configure_logging(logging.DEBUG if args.verbose else config.log_level)

    line_mode = parse_line_mode(args.line_mode) if args.line_mode else None

    if args.dry_run and args.action != "set":
        raise InvalidOptionError(
            f"--dry-run does not apply to '{args.action}'", option="--dry-run"
        )
    if line_mode is not None and args.action == "list":
        raise InvalidOptionError("--line-mode does not apply to 'list'", option="--line-mode")

    logger.debug(f"Config: {config}")

    rules: list[Rule] = []
    if args.action in ("set", "compare"):
        rules = load_rules(config.rules_file, line_mode)
        logger.debug(f"Loaded {len(rules)} rule(s)")

    store = SysfsDeviceStore(config.devices_dir)

    if args.action == "list":
        return run_list(store, args.devices)
    if args.action == "dumpconfig":
        return run_dumpconfig(store, args.devices, config, line_mode)
    if args.action == "set":
        return run_set(store, args.devices, rules, args.dry_run)
    return run_compare(store, args.devices, rules)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return run(args)
    except SpanTypesError as e:
        logger.debug(f"Error details: {e.to_dict()}")
        print(f"{PROG}: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
