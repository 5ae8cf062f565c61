# rtl_muxtrace/cli.py
import argparse
import logging
import sys

from .config import Config, load_config
from .errors import ConfigError, MuxTraceError, NetlistFormatError
from .finder import MuxFinder


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the next multiplexer controlled by a signal")
    parser.add_argument("wire", help="Name of the start wire")
    parser.add_argument("-m", "--module", default=None,
                        help="Only consider modules whose name contains this string")
    parser.add_argument("-n", "--netlist", default=None, help="Netlist file (YAML/JSON)")
    parser.add_argument("-c", "--config", default=None, help="YAML config file")
    parser.add_argument("-s", "--select", action="append", default=None,
                        help="Selection pattern (module or module/member), repeatable")
    parser.add_argument("--top", default=None, help="Top module name")
    parser.add_argument("--reset-token", default=None,
                        help="Substring marking reset select signals")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = load_config(args.config) if args.config else Config()
        if args.netlist:
            cfg.netlist = args.netlist
        if args.top:
            cfg.top_module = args.top
        if args.select:
            cfg.select = args.select
        if args.reset_token is not None:
            cfg.reset_token = args.reset_token
        if not cfg.netlist:
            parser.error("a netlist is required (--netlist or netlist.path in --config)")

        finder = MuxFinder.from_config(cfg)
        result = finder.find_next_mux(args.wire, args.module)
    except (MuxTraceError, NetlistFormatError, ConfigError, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1

    print(f"Mux select: {result.select_wire}")
    print(f"Module: {result.module}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
