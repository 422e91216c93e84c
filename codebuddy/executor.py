"""
Remote code execution through a Judge0-compatible submit/poll API.

Code is never run locally: the service queues the submission, and we poll
its token until the run leaves the queue.
"""
import logging
import time
from dataclasses import dataclass, asdict
from typing import Callable, Optional

import requests

from .config import (
    get_judge0_api_key,
    get_judge0_api_url,
    get_judge0_host,
    get_judge0_max_polls,
    get_judge0_poll_interval,
)
from .languages import normalize_language

logger = logging.getLogger(__name__)


# Language ids used by Judge0 CE
LANGUAGE_MAP = {
    "javascript": 63,  # Node.js
    "python": 71,      # Python 3
    "c": 49,
    "typescript": 74,
    "java": 62,
    "csharp": 50,
    "cpp": 54,
    "php": 68,
    "ruby": 72,
}

# Judge0 status ids that mean the run has not finished yet
PENDING_STATUSES = (1, 2)  # In Queue, Processing


class ExecutionServiceError(RuntimeError):
    """The execution service could not be reached or rejected the request."""


@dataclass
class ExecutionResult:
    """Result of running code on the execution service."""
    output: str
    error: str
    status: str
    token: Optional[str] = None
    finished: bool = True

    @property
    def success(self) -> bool:
        return self.finished and not self.error

    def to_dict(self) -> dict:
        return asdict(self)


class ExecutionClient:
    """Submits code to Judge0 and waits for the result."""

    def __init__(
        self,
        api_url: str = None,
        api_key: str = None,
        host: str = None,
        poll_interval: float = None,
        max_polls: int = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.api_url = (api_url or get_judge0_api_url()).rstrip("/")
        self.api_key = api_key if api_key is not None else get_judge0_api_key()
        self.host = host or get_judge0_host()
        self.poll_interval = poll_interval if poll_interval is not None else get_judge0_poll_interval()
        self.max_polls = max_polls if max_polls is not None else get_judge0_max_polls()
        self.session = session or requests.Session()
        self.timeout = timeout
        self._sleep = sleep

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-rapidapi-key"] = self.api_key
            headers["x-rapidapi-host"] = self.host
        return headers

    def _request(self, method: str, path: str, **kwargs) -> dict:
        url = f"{self.api_url}{path}"
        try:
            response = self.session.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise ExecutionServiceError(f"Execution service unreachable: {e}") from e

        if not response.ok:
            logger.error("Judge0 %s %s -> %s: %s", method, path, response.status_code, response.text[:300])
            raise ExecutionServiceError(f"Judge0 API error: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise ExecutionServiceError("Judge0 API returned invalid JSON") from e

    def submit(self, code: str, language: str, stdin: str = "") -> str:
        """Queue a submission and return its token."""
        name = language if isinstance(language, str) else ""
        # Editor languages accept the usual aliases; the rest must be spelled as in LANGUAGE_MAP
        language_id = LANGUAGE_MAP.get(normalize_language(name) or name.lower())
        if language_id is None:
            raise ValueError(f"Unsupported language for execution: {language}")

        data = self._request(
            "POST", "/submissions",
            params={"base64_encoded": "false", "wait": "false"},
            json={"source_code": code, "language_id": language_id, "stdin": stdin},
        )
        token = data.get("token")
        if not token:
            raise ExecutionServiceError("Judge0 API did not return a submission token")
        return token

    def fetch(self, token: str) -> dict:
        return self._request("GET", f"/submissions/{token}", params={"base64_encoded": "false"})

    def execute(
        self,
        code: str,
        language: str,
        stdin: str = "",
        on_log: Optional[Callable[[str, str], None]] = None
    ) -> ExecutionResult:
        """
        Run code remotely and wait for it to finish.

        Args:
            code: Source code to run
            language: Language name (see LANGUAGE_MAP)
            stdin: Standard input for the program
            on_log: Callback for progress messages (message, type)

        Returns:
            ExecutionResult; `finished` is False if the run was still queued
            after the polling budget ran out.
        """
        def log(msg: str, msg_type: str = "info"):
            logger.info(msg)
            if on_log:
                on_log(msg, msg_type)

        if not code:
            raise ValueError("Code is required")

        token = self.submit(code, language, stdin)
        log(f"Submitted {language} code, token {token}")

        data: dict = {}
        for attempt in range(1, self.max_polls + 1):
            self._sleep(self.poll_interval)
            data = self.fetch(token)
            status_id = (data.get("status") or {}).get("id")
            if status_id not in PENDING_STATUSES:
                break
            log(f"Still running (poll {attempt}/{self.max_polls})...")
        else:
            log("Gave up waiting for the execution result", "warning")
            return self._to_result(token, data, finished=False)

        return self._to_result(token, data)

    @staticmethod
    def _to_result(token: str, data: dict, finished: bool = True) -> ExecutionResult:
        return ExecutionResult(
            output=data.get("stdout") or "",
            error=data.get("stderr") or data.get("compile_output") or "",
            status=(data.get("status") or {}).get("description") or "Unknown status",
            token=token,
            finished=finished,
        )
