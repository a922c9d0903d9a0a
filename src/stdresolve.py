"""stdresolve - Go module version resolution and standard library materialization.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys
from dataclasses import asdict
from typing import List, Optional

from constants import Constants, ExitCodes, RepoBackends, apply_config, load_yaml_config
from common.errors import (
    InvalidArgumentError,
    NotFoundError,
    ResolutionError,
    UpstreamError,
    http_status,
)
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from registry.goproxy import ProxyClient, latest_module_version
from stdlib import (
    GoRepo,
    contains,
    repo_from_config,
    version_for_tag,
    versions,
    zip_info,
    zip_stdlib,
)
from versioning import semver
from versioning.models import LATEST, ModuleRequest, ResolutionResult
from versioning.parser import parse_module_token
from versioning.version import for_sorting

logger = logging.getLogger(__name__)


def load_tokens_file(file_name):
    """Loads module@version tokens from a file.

    Blank lines and lines starting with '#' are ignored.

    Args:
        file_name (str): File path containing the list of tokens.

    Returns:
        list: List of tokens
    """
    try:
        with open(file_name, encoding='utf-8') as file:
            lines = [line.strip() for line in file]
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except IOError as e:
        logging.error("IO error: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    return [line for line in lines if line and not line.startswith("#")]


def build_requests(args) -> List[ModuleRequest]:
    """Parse the CLI tokens into module requests."""
    tokens = args.SINGLE or []
    if args.LIST_FROM_FILE:
        tokens = load_tokens_file(args.LIST_FROM_FILE)
    requests_ = []
    for token in tokens:
        try:
            requests_.append(parse_module_token(token))
        except ValueError as e:
            logging.error("Invalid token %r: %s", token, e)
            sys.exit(ExitCodes.INVALID_ARGUMENT.value)
    return requests_


def is_std_request(module_path: str) -> bool:
    """Report whether module_path names the standard library or a package in it."""
    return module_path == Constants.STD_MODULE_PATH or contains(module_path)


def _std_version(requested: str) -> str:
    """Accept Go tags ("go1.21.0") as well as semantic versions."""
    if requested.startswith("go"):
        v = version_for_tag(requested)
        if v:
            return v
    return requested


def resolve_std(repo: GoRepo, req: ModuleRequest, archive_dir: Optional[str] = None) -> ResolutionResult:
    """Resolve a standard library request, materializing it when archive_dir is set."""
    requested = _std_version(req.requested_version)
    result = ResolutionResult(
        module_path=Constants.STD_MODULE_PATH,
        requested_version=req.requested_version,
        resolved_version=None,
        commit_time=None,
        archive=None,
        error=None,
    )
    if not archive_dir:
        result.resolved_version = zip_info(repo, requested)
        return result

    archive = zip_stdlib(repo, requested)
    path = os.path.join(archive_dir, f"{archive.prefix}.zip")
    try:
        os.makedirs(archive_dir, exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(archive.data)
    except OSError as e:
        raise ResolutionError(f"writing {path}: {e}") from e
    result.resolved_version = archive.resolved_version
    result.commit_time = archive.commit_time.isoformat()
    result.archive = path
    return result


def resolve_module(client: ProxyClient, req: ModuleRequest) -> ResolutionResult:
    """Resolve an ordinary module through the module proxy."""
    result = ResolutionResult(
        module_path=req.module_path,
        requested_version=req.requested_version,
        resolved_version=None,
        commit_time=None,
        archive=None,
        error=None,
    )
    if req.requested_version == LATEST:
        latest = latest_module_version(req.module_path, client)
        if latest is None:
            raise NotFoundError(f"no versions of {req.module_path}")
        result.resolved_version = latest
        return result
    info = client.get_info(req.module_path, req.requested_version)
    result.resolved_version = info.version
    result.commit_time = info.time
    return result


def resolve_all(reqs, repo: GoRepo, client: ProxyClient, archive_dir: Optional[str] = None):
    """Resolve every request, recording failures on the result instead of aborting.

    Returns:
        tuple: (results, first error or None)
    """
    results = []
    first_error = None
    for req in reqs:
        try:
            if is_std_request(req.module_path):
                res = resolve_std(repo, req, archive_dir)
            else:
                res = resolve_module(client, req)
        except ResolutionError as e:
            logging.warning("Could not resolve %s: %s", req.raw_token or req.module_path, e)
            res = ResolutionResult(
                module_path=req.module_path,
                requested_version=req.requested_version,
                resolved_version=None,
                commit_time=None,
                archive=None,
                error=str(e),
            )
            first_error = first_error or e
        else:
            logging.info("%s@%s => %s", res.module_path, res.requested_version, res.resolved_version)
        results.append(res)
    return results, first_error


def sorted_versions(repo: GoRepo) -> List[str]:
    """Return the standard library versions known to repo in ascending order.

    Supported branches have no place in version order and follow the tags.
    """
    known = set(versions(repo))
    tagged = sorted((v for v in known if semver.is_valid(v)), key=for_sorting)
    return tagged + sorted(known.difference(tagged))


def export_json(data, path=None):
    """Exports data as JSON.

    Args:
        data: JSON-serializable payload.
        path (str): File path to export the JSON; stdout when None.
    """
    if not path:
        json.dump(data, sys.stdout, ensure_ascii=False, indent=4)
        sys.stdout.write("\n")
        return
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def exit_code_for(exc: BaseException) -> ExitCodes:
    """Map an error category to the process exit code."""
    if isinstance(exc, InvalidArgumentError):
        return ExitCodes.INVALID_ARGUMENT
    if isinstance(exc, NotFoundError):
        return ExitCodes.NOT_FOUND
    if isinstance(exc, UpstreamError):
        return ExitCodes.CONNECTION_ERROR
    return ExitCodes.FILE_ERROR


def _setup_logging(args):
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging()
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _apply_cli_overrides(args):
    """CLI flags win over the config file and environment."""
    if args.PROXY_URL:
        Constants.PROXY_URL = args.PROXY_URL
    if args.REPO_PATH:
        Constants.REPO_PATH = args.REPO_PATH
        Constants.REPO_BACKEND = RepoBackends.LOCAL.value
    if args.BACKEND:
        Constants.REPO_BACKEND = args.BACKEND
    if args.TIMEOUT is not None:
        Constants.GIT_TIMEOUT = args.TIMEOUT
        Constants.REQUEST_TIMEOUT = args.TIMEOUT


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)

    apply_config(load_yaml_config(args.CONFIG))
    _apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="main",
                backend=Constants.REPO_BACKEND,
                proxy=Constants.PROXY_URL,
            ),
        )

    try:
        repo = repo_from_config(Constants.REPO_BACKEND, Constants.REPO_PATH)
    except InvalidArgumentError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.INVALID_ARGUMENT.value)

    if args.LIST_VERSIONS:
        try:
            data = sorted_versions(repo)
        except ResolutionError as e:
            logging.error("Listing versions failed (status %d): %s", http_status(e), e)
            sys.exit(exit_code_for(e).value)
        export_json(data, args.OUTPUT)
        sys.exit(ExitCodes.SUCCESS.value)

    reqs = build_requests(args)
    if not reqs:
        logging.warning("No modules found in the input list.")
        sys.exit(ExitCodes.SUCCESS.value)

    client = ProxyClient(Constants.PROXY_URL, timeout=Constants.REQUEST_TIMEOUT)
    results, first_error = resolve_all(reqs, repo, client, args.ARCHIVE_DIR)
    export_json([asdict(r) for r in results], args.OUTPUT)

    if first_error is not None:
        sys.exit(exit_code_for(first_error).value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
