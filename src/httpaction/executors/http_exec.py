"""
http_exec.py
------------
Implements HTTPExecutor: issues exactly one HTTP request per call and validates
the response against the expected status code and the text content-type
allow-list. Delete requests are checked on status only; their body is never read.
"""
import logging
from typing import Dict, Optional

import requests

from .. import errors
from ..config import settings
from ..models import Phase, RequestSpec, ResponseOutcome
from .base import BaseExecutor
from .content_type import is_content_type_allowed

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
BODY_SNIPPET_LIMIT = 1024

BUILD_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.InvalidHeader,
)


def _flatten_headers(response) -> Dict[str, str]:
    raw_headers = getattr(response.raw, "headers", None)
    if hasattr(raw_headers, "iteritems"):
        # urllib3 yields one item per header line, so a repeated header keeps its last value
        items = raw_headers.iteritems()
    else:
        items = response.headers.items()
    headers = {}
    for name, value in items:
        headers[name] = value
    return headers


def _snippet(body: bytes) -> str:
    return body[:BODY_SNIPPET_LIMIT].decode("utf-8", errors="replace")


class HTTPExecutor(BaseExecutor):
    def __init__(self, timeout: Optional[float] = None, max_response_bytes: Optional[int] = None):
        self.timeout = settings.HTTP_TIMEOUT if timeout is None else timeout
        self.max_response_bytes = settings.MAX_RESPONSE_BYTES if max_response_bytes is None else max_response_bytes

    def execute(self, spec: RequestSpec, context: Optional[dict] = None) -> ResponseOutcome:
        phase = Phase((context or {}).get("phase", Phase.QUERY))
        logger.info("%s request: %s %s", phase.value, spec.method, spec.url)

        with requests.Session() as session:
            try:
                request = session.prepare_request(requests.Request(
                    method=spec.method,
                    url=spec.url,
                    # header values are sent as UTF-8 bytes
                    headers={name: value.encode("utf-8") for name, value in spec.headers.items()},
                    data=spec.body.encode("utf-8") if spec.body else None,
                ))
            except BUILD_ERRORS as e:
                raise errors.ConfigurationError(f"Error creating {phase.value} request: {e}") from e
            # prepare_request upper-cases the method
            request.method = spec.method

            try:
                response = session.send(request, stream=True, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                raise errors.ConnectionError(phase.value, spec.url, e) from e

            with response:
                if phase is Phase.DELETE:
                    if response.status_code != spec.expected_status:
                        raise errors.StatusMismatchError(phase.value, response.status_code, spec.expected_status)
                    logger.info("%s response: %s", phase.value, response.status_code)
                    return ResponseOutcome(status_code=response.status_code, headers=_flatten_headers(response))

                body = self._read_body(response, phase)
                if response.status_code != spec.expected_status:
                    raise errors.StatusMismatchError(
                        phase.value, response.status_code, spec.expected_status, _snippet(body)
                    )

                content_type = response.headers.get("Content-Type", "")
                if not is_content_type_allowed(content_type):
                    raise errors.UnsupportedContentTypeError(content_type)

                logger.info("%s response: %s (%d bytes)", phase.value, response.status_code, len(body))
                return ResponseOutcome(
                    status_code=response.status_code,
                    headers=_flatten_headers(response),
                    body=body,
                )

    def _read_body(self, response, phase: Phase) -> bytes:
        chunks = []
        size = 0
        try:
            for chunk in response.iter_content(CHUNK_SIZE):
                size += len(chunk)
                if size > self.max_response_bytes:
                    raise errors.ReadError(
                        phase.value, f"Response body exceeds {self.max_response_bytes} bytes"
                    )
                chunks.append(chunk)
        except requests.exceptions.RequestException as e:
            raise errors.ReadError(phase.value, e) from e
        return b"".join(chunks)
