"""Argument parsing functionality for stdresolve."""

import argparse
from constants import RepoBackends


def build_parser():
    """Build the argument parser for the program."""
    parser = argparse.ArgumentParser(
        prog="stdresolve",
        description=(
            "stdresolve - Go module version resolution, with the standard library as module \"std\""
        ),
        add_help=True,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument("-p", "--package",
                             dest="SINGLE",
                             help="Resolve a module@version token, e.g. std@go1.21.0 or golang.org/x/text@latest.",
                             action="append", type=str)
    input_group.add_argument("-l", "--load_list",
                             dest="LIST_FROM_FILE",
                             help="Load module@version tokens from a file, one per line",
                             action="store", type=str)
    input_group.add_argument("--list-versions",
                             dest="LIST_VERSIONS",
                             help="List the versions of the standard library in sort order",
                             action="store_true")

    parser.add_argument("-a", "--archive-dir",
                        dest="ARCHIVE_DIR",
                        help="Materialize resolved standard library versions as zip files in this directory",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to JSON output file (default: stdout)",
                        action="store",
                        type=str)

    parser.add_argument("-b", "--backend",
                        dest="BACKEND",
                        help="Standard library repository backend (default: remote, or local when a repository path is set)",
                        action="store",
                        type=str.lower,
                        choices=[b.value for b in RepoBackends])
    parser.add_argument("--repo-path",
                        dest="REPO_PATH",
                        help="Path to a local clone of the Go repository (implies --backend local)",
                        action="store",
                        type=str)
    parser.add_argument("--proxy",
                        dest="PROXY_URL",
                        help="Go module proxy base URL",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Timeout in seconds for each git command and HTTP request",
                        action="store",
                        type=float)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
