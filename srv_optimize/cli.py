"""
CLI - Command-line entry point for srv_optimize.

Checks privileges, installs missing utilities, then hands over to the
interactive menu.
"""

import argparse
import os
import sys
from typing import Optional, List

from rich.console import Console

from . import __version__
from .config import Config, create_example_config
from .errors import ConfigError, FatalError, PrivilegeError
from .logs import configure_logging, get_logger, log_banner
from .runner.engine import Orchestrator
from .system.command import CommandRunner
from .system.installer import DependencyInstaller
from .tuning.operations import TuningOperations
from .ui.console import ConsoleUI

logger = get_logger()


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="srv_optimize",
        description="Interactive OS tuning for AI/ML and compute servers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    sudo srv_optimize
    sudo srv_optimize --config /etc/srv_optimize/config.toml
    srv_optimize --init-config srv_optimize.toml
        """,
    )

    parser.add_argument(
        "-c", "--config",
        help="TOML config file (default: search standard locations)"
    )
    parser.add_argument(
        "--log-file",
        help="Detailed log file (default: /var/log/server_optimization.log)"
    )
    parser.add_argument(
        "--summary-file",
        help="Summary log file (default: /var/log/server_optimization_summary.log)"
    )
    parser.add_argument(
        "--backup-root",
        help="Directory for backup snapshots (default: /var/backups)"
    )
    parser.add_argument(
        "--skip-deps",
        action="store_true",
        help="Do not check or install required packages"
    )
    parser.add_argument(
        "--init-config",
        metavar="PATH",
        help="Write an example config file and exit"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def require_root():
    """
    Raises:
        PrivilegeError: If the effective user is not root
    """
    if os.geteuid() != 0:
        raise PrivilegeError()


def load_config(args) -> Config:
    """
    Raises:
        ConfigError: If the file is missing, unparseable or fails validation
    """
    try:
        config = Config.load(args.config)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigError([str(e)])

    config.override_from_args(args)
    errors = config.validate()
    if errors:
        raise ConfigError(errors)
    return config


def run(
    config: Config,
    ui: ConsoleUI,
    runner: Optional[CommandRunner] = None,
    skip_deps: bool = False,
):
    """
    Install dependencies and run the menu.

    Raises:
        FatalError: On dependency install or mount table failures
    """
    runner = runner or CommandRunner()

    if not skip_deps:
        DependencyInstaller(runner).ensure(config.dependencies.packages)

    orchestrator = Orchestrator(
        config=config,
        ui=ui,
        operations=TuningOperations(config, runner=runner),
    )
    orchestrator.run()


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_args(argv)
    console = Console()

    if args.init_config:
        try:
            path = create_example_config(args.init_config)
        except FileExistsError as e:
            console.print(f"[bold red][ERROR][/] {e}")
            sys.exit(1)
        console.print(f"Example config written to {path}")
        sys.exit(0)

    try:
        require_root()
    except PrivilegeError as e:
        console.print(f"[bold red][ERROR][/] {e}", highlight=False)
        console.print("[yellow][HINT][/] Example: sudo srv_optimize", highlight=False)
        sys.exit(e.exit_code)

    try:
        config = load_config(args)
    except ConfigError as e:
        console.print(f"[bold red][ERROR][/] {e}", highlight=False)
        sys.exit(e.exit_code)

    configure_logging(config.paths.log_file, config.paths.summary_file, console=console)
    log_banner()

    ui = ConsoleUI(console=console)
    ui.print_banner(__version__)
    ui.print_config(config.summary())

    try:
        run(config, ui, skip_deps=args.skip_deps)
    except FatalError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)
    except (EOFError, KeyboardInterrupt):
        logger.info(f"Input closed. Exiting. Logs saved at {config.paths.log_file}.")

    sys.exit(0)


if __name__ == "__main__":
    main()
