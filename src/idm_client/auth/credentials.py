"""Setting and credential lookup for :class:`idm_client.config.ClientOptions`.

Each setting comes from the first source that has it:

1. an explicit value passed by the caller
2. the process environment, after any ``.env`` file has been merged into it
3. a default

An API token may instead be kept in a file, named either directly or through
``IDM_API_TOKEN_FILE``. Only the source of a credential is ever logged.
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from idm_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

MASK = "***"


class CredentialResolver:
    """Look up client settings from explicit values, the environment, and files.

    Args:
        dotenv_path: .env file to merge into the environment; python-dotenv
            searches parent directories when None.
        load_dotenv: Set to False to leave the environment untouched.

    Example:
        ```python
        resolver = CredentialResolver(load_dotenv=False)
        base_url = resolver.resolve(env_var_name="IDM_BASE_URL", required=True, mask_in_logs=False)
        token = resolver.resolve_from_file(env_var_name="IDM_API_TOKEN_FILE")
        ```
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_path = dotenv_path
        self._dotenv_loaded = False
        self._lock = Lock()

        if load_dotenv:
            self._merge_dotenv()

    def _merge_dotenv(self) -> None:
        with self._lock:
            if self._dotenv_loaded:
                return
            try:
                load_dotenv(dotenv_path=self._dotenv_path)
            except OSError as e:
                logger.warning(f"Could not read .env file, using the process environment only: {e}")
            else:
                logger.debug("Merged .env file into the environment")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Return the first available value for one setting.

        Raises:
            CredentialNotFoundError: If ``required`` and no source has a value.
        """
        candidates = [
            ("explicit parameter", value),
            (f"environment variable '{env_var_name}'", os.environ.get(env_var_name) if env_var_name else None),
            ("default value", default),
        ]

        for source, candidate in candidates:
            if candidate is not None:
                logger.debug(f"Resolved credential from {source}: {MASK if mask_in_logs else candidate}")
                return candidate

        if required:
            hint = f" (checked env var: {env_var_name})" if env_var_name else ""
            raise CredentialNotFoundError(f"Required credential not found{hint}", env_var_name=env_var_name)
        return None

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a token file, stripping surrounding whitespace.

        ``~`` and ``$VAR`` in the path are expanded.

        Raises:
            CredentialFileError: If ``required`` and the file cannot be read.
        """
        raw_path = str(file_path) if file_path is not None else None
        if raw_path is None and env_var_name:
            raw_path = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if not raw_path:
            if not required:
                return None
            hint = f" (env var '{env_var_name}' not set)" if env_var_name else ""
            raise CredentialFileError(f"No file path provided for credential resolution{hint}")

        path = Path(os.path.expandvars(raw_path)).expanduser()

        try:
            content = path.read_text().strip()
        except OSError as e:
            if isinstance(e, FileNotFoundError):
                reason = f"Credential file not found: {path}"
            elif isinstance(e, PermissionError):
                reason = f"Permission denied reading credential file: {path}"
            else:
                reason = f"Error reading credential file {path}: {e}"

            if required:
                raise CredentialFileError(reason) from e
            logger.warning(reason)
            return None

        logger.debug(f"Resolved credential from file: {path} ({MASK})")
        return content
