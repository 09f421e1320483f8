"""
Installer fetch-and-execute module for the Toolchain Bootstrap Tool
Downloads the remote installer script and pipes it into a command interpreter,
the way `curl --proto '=https' -sSf URL | sh` does.
"""
import hashlib
import subprocess
from typing import Optional, Sequence

import requests

from toolchain_bootstrap.core.errors import (
    BootstrapError,
    ChecksumMismatchError,
    InstallerExecutionError,
    InstallerFetchError,
)
from toolchain_bootstrap.core.logging import LoggingManager
from toolchain_bootstrap.core.results import FAIL, PASS, RUNNING, StepResult
from toolchain_bootstrap.scripts.config_parsing import (
    DEFAULT_INSTALLER_URL,
    DEFAULT_INTERPRETER,
    DEFAULT_TIMEOUT,
)

STEP_NAME = "fetch-and-execute"

# curl exit codes, so failures read the same as they did from the shell script
CURL_UNSUPPORTED_PROTOCOL = 1
CURL_MALFORMED_URL = 3
CURL_COULDNT_RESOLVE_HOST = 6
CURL_COULDNT_CONNECT = 7
CURL_HTTP_RETURNED_ERROR = 22
CURL_OPERATION_TIMEDOUT = 28
CURL_SSL_CONNECT_ERROR = 35
CURL_RECV_ERROR = 56

# exit statuses of a shell asked to run a command it cannot find or cannot execute
COMMAND_NOT_FOUND = 127
COMMAND_NOT_EXECUTABLE = 126

_RESOLVE_MARKERS = ("NameResolutionError", "Name or service not known", "getaddrinfo failed",
                    "nodename nor servname", "Temporary failure in name resolution")


def _connection_error_code(error: Exception) -> int:
    text = str(error)
    if any(marker in text for marker in _RESOLVE_MARKERS):
        return CURL_COULDNT_RESOLVE_HOST
    return CURL_COULDNT_CONNECT


class InstallerFetcher:
    """
    Fetches an installer script over HTTPS and runs it through an interpreter.
    """
    def __init__(self, interpreter: str = DEFAULT_INTERPRETER, timeout: float = DEFAULT_TIMEOUT,
                 logger: Optional[LoggingManager] = None):
        self.interpreter = interpreter
        self.timeout = timeout
        self.logger = logger or LoggingManager()

    def fetch(self, url: str = DEFAULT_INSTALLER_URL) -> bytes:
        """
        Download the installer body.
        Only https URLs are accepted, no progress is shown, and any non-2xx
        status is a failure whose body is discarded.
        Raises:
            InstallerFetchError: with a curl-compatible return code.
        """
        if not url.lower().startswith("https://"):
            raise InstallerFetchError(f"({CURL_UNSUPPORTED_PROTOCOL}) Protocol not allowed: {url}",
                                      CURL_UNSUPPORTED_PROTOCOL)
        self.logger.debug(f"GET {url}")
        try:
            response = requests.get(url, timeout=self.timeout, allow_redirects=False)
        except requests.exceptions.SSLError as e:
            raise InstallerFetchError(f"({CURL_SSL_CONNECT_ERROR}) TLS failure for {url}: {e}",
                                      CURL_SSL_CONNECT_ERROR) from e
        except requests.exceptions.Timeout as e:
            raise InstallerFetchError(f"({CURL_OPERATION_TIMEDOUT}) Timed out fetching {url}",
                                      CURL_OPERATION_TIMEDOUT) from e
        except requests.exceptions.ConnectionError as e:
            code = _connection_error_code(e)
            raise InstallerFetchError(f"({code}) Could not connect to {url}: {e}", code) from e
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
            raise InstallerFetchError(f"({CURL_MALFORMED_URL}) Malformed URL {url}", CURL_MALFORMED_URL) from e
        except requests.exceptions.RequestException as e:
            raise InstallerFetchError(f"({CURL_RECV_ERROR}) Failed fetching {url}: {e}", CURL_RECV_ERROR) from e

        if not 200 <= response.status_code < 300:
            raise InstallerFetchError(
                f"({CURL_HTTP_RETURNED_ERROR}) The requested URL returned error: {response.status_code}",
                CURL_HTTP_RETURNED_ERROR,
            )
        self.logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content

    def verify(self, content: bytes, sha256: Optional[str]):
        """Check the installer against an expected SHA-256 digest; no digest means no check."""
        if not sha256:
            return
        actual = hashlib.sha256(content).hexdigest()
        if actual != sha256.strip().lower():
            raise ChecksumMismatchError(f"Installer checksum mismatch: expected {sha256}, got {actual}")
        self.logger.info("Installer checksum verified")

    def execute(self, content: bytes, args: Sequence[str] = ()) -> int:
        """
        Stream the installer into `<interpreter> -s -- args...`.
        The interpreter shares this process's terminal; its exit status is returned unchecked.
        """
        argv = [self.interpreter, "-s", "--", *args]
        self.logger.info(f"Running installer: {' '.join(argv)}")
        try:
            completed = subprocess.run(argv, input=content, check=False)
        except FileNotFoundError as e:
            raise InstallerExecutionError(f"{self.interpreter}: command not found", COMMAND_NOT_FOUND) from e
        except OSError as e:
            raise InstallerExecutionError(f"{self.interpreter}: {e.strerror or e}", COMMAND_NOT_EXECUTABLE) from e
        return completed.returncode

    def fetch_and_execute(self, url: str = DEFAULT_INSTALLER_URL, args: Sequence[str] = (),
                          sha256: Optional[str] = None, strict: bool = False) -> StepResult:
        result = StepResult(STEP_NAME, status=RUNNING)
        try:
            content = self.fetch(url)
            self.verify(content, sha256)
            returncode = self.execute(content, args)
            if returncode != 0:
                raise InstallerExecutionError(f"Installer exited with status {returncode}", returncode)
        except BootstrapError as e:
            self.logger.error(e.message)
            result.status = FAIL
            result.returncode = e.returncode
            result.detail = e.message
            if strict:
                raise
            return result
        result.status = PASS
        self.logger.info("Installer finished")
        return result
