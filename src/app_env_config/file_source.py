import os
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from dotenv import dotenv_values

from .domain import LoadResult, LoggerFn
from .env_snapshot import APP_ENV_VAR, get_environment_source
from .logger import get_logger
from .sensitive import mask_value

logger = get_logger()

DEFAULTS_FILE = ".env.defaults"


def default_config_files(environment: Optional[Mapping[str, str]] = None) -> List[str]:
    if environment is None:
        environment = get_environment_source()
    app_env = environment.get(APP_ENV_VAR)
    if app_env:
        return [f".env.{app_env}", ".env"]
    return [".env"]


def _absolute(path: str, base_dir: Optional[str]) -> str:
    if os.path.isabs(path):
        return path
    return os.path.abspath(os.path.join(base_dir or os.getcwd(), path))


def _read_env_file(file_path: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    # No ${VAR} expansion: it would read the live os.environ, not the snapshot
    for key, value in dotenv_values(file_path, interpolate=False).items():
        # `KEY` without `=` has no value; `KEY=` is an empty string
        if value is None:
            continue
        values[key] = value
    return values


def load_file_source(
    config_files: Sequence[str],
    defaults_file: Optional[str] = DEFAULTS_FILE,
    include_defaults_on_missing_file: bool = True,
    logger_fn: Optional[LoggerFn] = None,
    base_dir: Optional[str] = None
) -> Tuple[Dict[str, str], LoadResult]:
    """
    Merge config files into a single file source.

    Files are read left to right and a value is kept on first encounter, so
    earlier files win. The defaults file only fills keys missing from every
    file. Nothing is written to os.environ.

    Args:
        config_files: Files to read, most authoritative first
        defaults_file: Fallback values, or None for no defaults
        include_defaults_on_missing_file: Read defaults even if no config file exists
        logger_fn: Receives one line per file event
        base_dir: Directory for relative paths (default: current directory)
    """
    log = logger_fn or logger.debug
    result = LoadResult()
    merged: Dict[str, str] = {}

    for config_file in config_files:
        file_path = _absolute(config_file, base_dir)
        if not os.path.isfile(file_path):
            log(f"Config file not found: {file_path}")
            result.files_missing.append(file_path)
            continue

        log(f"Loading config file: {file_path}")
        values = _read_env_file(file_path)
        for key, value in values.items():
            if key in merged:
                logger.trace(f"FILE SKIP: {key} (already set by an earlier file)")
                continue
            logger.trace(f"FILE SET: {key} = {mask_value(key, value)}")
            merged[key] = value

        result.files_loaded.append(file_path)
        result.total_vars_loaded += len(values)

    if defaults_file:
        defaults_path = _absolute(defaults_file, base_dir)
        result.defaults_file = defaults_path
        if not result.files_loaded and not include_defaults_on_missing_file:
            log(f"No config file found, skipping defaults: {defaults_path}")
        elif not os.path.isfile(defaults_path):
            log(f"Defaults file not found: {defaults_path}")
        else:
            log(f"Loading defaults file: {defaults_path}")
            defaults = _read_env_file(defaults_path)
            for key, value in defaults.items():
                if key not in merged:
                    merged[key] = value
            result.defaults_applied = True
            result.total_vars_loaded += len(defaults)

    log(f"File source ready: {len(merged)} vars from {len(result.files_loaded)} files")
    return merged, result
