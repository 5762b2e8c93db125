"""
Entry point for ring.

Parses the command line, validates the configuration and runs the scan loop.
"""
import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from . import __version__
from .configuration import ConfigurationError, build_config, save_config, validate_config
from .output import ScanPrinter, print_banner, print_waiting
from .privileges import elevation_hint, is_admin
from .scan_manager import ScanManager


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        prog="ring",
        description="ring - parallel TCP connect and ICMP ping prober for multiple hosts and ports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s google.com                           # TCP check on port 80
  %(prog)s google.com -p 80,443,22              # Several ports
  %(prog)s google.com cloudflare.com --ping     # Several hosts plus ICMP ping
  %(prog)s example.com -p 1000-2000 --once      # Port range, single run
  %(prog)s api.example.com --ping -t 5000 -c 5  # Custom timeout and attempt count
        """
    )
    # Defaults are None so that values from --config are only overridden when given.
    parser.add_argument('hosts', nargs='*', help='One or more hostnames or IPs')
    parser.add_argument('-p', '--ports', help='Ports, comma-separated or ranges (e.g. 80,443,1000-1005; default: 80)')
    parser.add_argument('-c', '--count', type=int, help='Attempts per host and port (default: 3)')
    parser.add_argument('-t', '--timeout', dest='timeout_ms', type=int,
                        help='TCP connect timeout in milliseconds (default: 2000)')
    # --no-<flag> forms switch off a setting turned on in the --config file.
    parser.add_argument('-q', '--quiet', action=argparse.BooleanOptionalAction, default=None,
                        help='Suppress the banner and waiting messages')
    parser.add_argument('-j', '--json', action=argparse.BooleanOptionalAction, default=None,
                        help='Output results as JSON')
    parser.add_argument('-i', '--once', action=argparse.BooleanOptionalAction, default=None,
                        help='Run a single scan instead of repeating')
    parser.add_argument('--ping', action=argparse.BooleanOptionalAction, default=None,
                        help='Enable ICMP ping in addition to TCP checks')
    parser.add_argument('--ping-timeout', dest='ping_timeout_ms', type=int,
                        help='ICMP ping timeout in milliseconds (default: 1000)')
    parser.add_argument('--config', help='YAML file with default settings')
    parser.add_argument('--save-config', metavar='PATH', help='Write the effective settings to a YAML file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    console = Console()
    err_console = Console(stderr=True)

    overrides = {
        'ports': args.ports,
        'count': args.count,
        'timeout_ms': args.timeout_ms,
        'ping_timeout_ms': args.ping_timeout_ms,
        'quiet': args.quiet,
        'json': args.json,
        'once': args.once,
        'ping': args.ping,
    }
    try:
        config = build_config(overrides, args.config)
        ports = validate_config(args.hosts, config)
        if args.save_config:
            save_config(config, args.save_config)
            logging.info(f"Settings saved to {args.save_config}")
    except ConfigurationError as e:
        err_console.print(f"[red]❌[/] {e}", highlight=False, soft_wrap=True)
        return 1

    interactive = not config['json'] and not config['quiet']
    if config['ping'] and not is_admin():
        logging.warning(elevation_hint())

    if interactive:
        print_banner(args.hosts, ports, bool(config['ping']), console)

    manager = ScanManager(
        hosts=args.hosts,
        ports=ports,
        app_config=config,
        on_result=ScanPrinter(as_json=bool(config['json']), console=console),
        on_cycle_wait=(lambda interval: print_waiting(interval, console)) if interactive else None,
    )

    try:
        manager.run()
    except KeyboardInterrupt:
        if interactive:
            console.print("\n\nScan interrupted by user")
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
