#!/usr/bin/env python3
"""
Main entry point for toolshim - isolated tool installs and project script dispatch
"""

import argparse
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from packaging.requirements import InvalidRequirement

# Load environment variables from .env file
load_dotenv()

from toolshim.core.errors import ToolshimError
from toolshim.core.installer import ToolInstaller
from toolshim.core.process import ProcessReplacer, activation_overlay
from toolshim.core.resolver import ScriptResolver
from toolshim.core.shims import ShimDirectory
from toolshim.core.uninstaller import Uninstaller
from toolshim.integrations.provisioner import PythonProvisioner
from toolshim.integrations.pyproject import PyProject
from toolshim.models.script import ExecutionRequest
from toolshim.models.tool import InstallRequest, Verbosity
from toolshim.utils.logging import get_logger, setup_root_logger
from config.settings import Settings


logger = get_logger(__name__)


def _add_verbosity(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Turns off all output"
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="toolshim",
        description="Install command line tools into isolated environments and run project scripts"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Console logging level (default: WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Runs a command installed into this package")
    run_parser.add_argument(
        "-l", "--list",
        action="store_true",
        help="List all commands"
    )
    run_parser.add_argument(
        "cmd",
        nargs=argparse.REMAINDER,
        help="The command to run, followed by its arguments"
    )

    install_parser = subparsers.add_parser("install", help="Installs a package as global tool")
    install_parser.add_argument(
        "requirement",
        help="The name of the package to install"
    )
    install_parser.add_argument(
        "-p", "--python",
        default=None,
        help="The Python version to use"
    )
    install_parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Force install the package even if it's already there"
    )
    _add_verbosity(install_parser)

    uninstall_parser = subparsers.add_parser("uninstall", help="Uninstalls a global tool")
    uninstall_parser.add_argument(
        "name",
        help="The package to uninstall"
    )
    _add_verbosity(uninstall_parser)

    return parser.parse_args(argv)


def verbosity_from_args(args: argparse.Namespace) -> Verbosity:
    if getattr(args, "verbose", False):
        return Verbosity.VERBOSE
    if getattr(args, "quiet", False):
        return Verbosity.QUIET
    return Verbosity.NORMAL


def cmd_install(args: argparse.Namespace, settings: Settings) -> int:
    shims = ShimDirectory(settings.shims_dir)
    installer = ToolInstaller(
        tools_dir=settings.tools_dir,
        shims=shims,
        provisioner=PythonProvisioner(default_python=settings.default_python),
        installer_python=settings.installer.python,
        quiet_warnings=settings.installer.quiet_warnings
    )
    request = InstallRequest(
        requirement=args.requirement,
        python=args.python,
        force=args.force,
        verbosity=verbosity_from_args(args)
    )
    installer.install(request)
    return 0


def cmd_uninstall(args: argparse.Namespace, settings: Settings) -> int:
    uninstaller = Uninstaller(
        tools_dir=settings.tools_dir,
        shims=ShimDirectory(settings.shims_dir)
    )
    uninstaller.uninstall(args.name, verbosity_from_args(args))
    return 0


def cmd_run(args: argparse.Namespace, settings: Settings) -> int:
    project = PyProject.discover(
        venv_dir_name=settings.project.venv_dir_name,
        scripts_table=settings.project.scripts_table
    )
    venv_bin = project.venv_bin_path()
    if not venv_bin.is_dir():
        logger.warning(f"Project environment {project.venv_path()} does not exist")

    cmd = args.cmd[1:] if args.cmd[:1] == ["--"] else args.cmd
    resolver = ScriptResolver(project.scripts, venv_bin)
    argv, lines = resolver.dispatch(cmd, list_only=args.list)
    if argv is None:
        for line in lines:
            print(line)
        return 0

    # when we spawn into a script, we implicitly activate the virtualenv to make
    # the life of tools easier that expect to be in one.
    request = ExecutionRequest(
        command=cmd[0],
        args=cmd[1:],
        argv=argv,
        overlay=activation_overlay(project.venv_path(), venv_bin, os.environ.get("PATH"))
    )
    ProcessReplacer().execute(request)
    return 0


COMMANDS = {
    "install": cmd_install,
    "uninstall": cmd_uninstall,
    "run": cmd_run,
}


def report_error(error: BaseException) -> None:
    """Print an error and its chain of causes to stderr."""
    print(f"error: {error}", file=sys.stderr)
    cause = error.__cause__
    while cause is not None:
        print(f"  caused by: {cause}", file=sys.stderr)
        cause = cause.__cause__


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    settings = Settings()

    setup_root_logger(
        settings.log_file,
        args.log_level or settings.logging.level,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count
    )
    logger.info(f"Arguments: {vars(args)}")

    try:
        return COMMANDS[args.command](args, settings)
    except (ToolshimError, InvalidRequirement) as e:
        logger.info(f"{args.command} failed: {e}")
        report_error(e)
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
