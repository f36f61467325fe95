"""
HTTP client for scheduler extenders.

An ``HTTPExtender`` is built once from an ``ExtenderConfig`` and reused for
every scheduling cycle. Each ``filter``/``prioritize`` call is a single blocking
JSON POST to ``{url_prefix}/{api_version}/{verb}``; failures are raised to the
scheduler core without any local retry.
"""

import ssl
import time
from typing import Optional, Tuple

import httpx
from pydantic import ValidationError

from .algorithm import SchedulerExtender
from .config import ExtenderConfig
from .errors import ExtenderLogicError, TransportError
from .logging import get_logger
from .transport import build_tls_context, transport_for_context
from .types import (
    CandidateList,
    ExtenderArgs,
    FilterResult,
    HostPriority,
    HostPriorityList,
    PlacementRequest,
    filter_result_adapter,
    host_priority_list_adapter,
)

logger = get_logger(__name__)


class HTTPExtender(SchedulerExtender):
    """Scheduler extender reached over HTTP(S).

    Args:
        config: Extender settings. Not modified.
        api_version: Protocol version inserted into every request path.
        transport: Optional httpx transport to use instead of the one built
            from ``config``'s TLS settings.

    Raises:
        ConfigError: if the TLS settings are malformed.
    """

    def __init__(
        self,
        config: ExtenderConfig,
        api_version: str,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._extender_url = config.url_prefix
        self._api_version = api_version
        self._filter_verb = config.filter_verb
        self._prioritize_verb = config.prioritize_verb
        self._weight = config.weight
        self._timeout = config.effective_timeout

        self._tls_context = build_tls_context(config)
        if transport is None:
            transport = transport_for_context(self._tls_context)

        self._client = httpx.Client(transport=transport, timeout=self._timeout)

        logger.debug(
            "Extender client created",
            extender_url=self._extender_url,
            api_version=self._api_version,
            filter_verb=self._filter_verb,
            prioritize_verb=self._prioritize_verb,
            weight=self._weight,
            timeout_seconds=self._timeout,
            tls=self._tls_context is not None,
        )

    @property
    def extender_url(self) -> str:
        return self._extender_url

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def filter_verb(self) -> str:
        return self._filter_verb

    @property
    def prioritize_verb(self) -> str:
        return self._prioritize_verb

    @property
    def weight(self) -> int:
        return self._weight

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def tls_context(self) -> Optional[ssl.SSLContext]:
        return self._tls_context

    def close(self):
        """Close the underlying HTTP client and its connection pool."""
        self._client.close()

    def __enter__(self) -> "HTTPExtender":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self) -> str:
        return (
            f"HTTPExtender(url={self._extender_url!r}, api_version={self._api_version!r}, "
            f"filter_verb={self._filter_verb!r}, prioritize_verb={self._prioritize_verb!r}, "
            f"weight={self._weight})"
        )

    def filter(self, pod: PlacementRequest, nodes: CandidateList) -> CandidateList:
        """Filter nodes using the extender's predicate functions.

        The returned list is expected to be a subset of ``nodes``; that is the
        extender's obligation and is not checked here. With no filter verb
        configured ``nodes`` is returned as-is.

        Raises:
            TransportError: if the exchange fails.
            ExtenderLogicError: if the extender reports an error.
        """
        if not self._filter_verb:
            return nodes

        result = self._send_filter(ExtenderArgs(pod=pod, nodes=nodes))
        if result.error:
            logger.warning(
                "Extender rejected filter request",
                verb=self._filter_verb,
                pod=pod.name,
                error=result.error,
            )
            raise ExtenderLogicError(result.error, verb=self._filter_verb)
        return result.nodes

    def prioritize(
        self, pod: PlacementRequest, nodes: CandidateList
    ) -> Tuple[HostPriorityList, int]:
        """Score nodes using the extender's priority functions.

        Returns the scores together with the configured weight; the scheduler
        adds weight * score to its own totals. With no prioritize verb
        configured every node scores 0 and the weight is 0.

        Raises:
            TransportError: if the exchange fails.
        """
        if not self._prioritize_verb:
            return [HostPriority(host=node.name, score=0) for node in nodes.items], 0

        result = self._send_prioritize(ExtenderArgs(pod=pod, nodes=nodes))
        return result, self._weight

    def _url_for(self, verb: str) -> str:
        return self._extender_url + "/" + self._api_version + "/" + verb

    def _send_filter(self, args: ExtenderArgs) -> FilterResult:
        verb = self._filter_verb
        body = self._post(verb, args)
        try:
            result = filter_result_adapter.validate_json(body)
        except ValidationError as e:
            raise TransportError(verb, self._url_for(verb), f"invalid response: {e}") from e
        return result if result is not None else FilterResult()

    def _send_prioritize(self, args: ExtenderArgs) -> HostPriorityList:
        verb = self._prioritize_verb
        body = self._post(verb, args)
        try:
            result = host_priority_list_adapter.validate_json(body)
        except ValidationError as e:
            raise TransportError(verb, self._url_for(verb), f"invalid response: {e}") from e
        return result if result is not None else []

    def _post(self, verb: str, args: ExtenderArgs) -> bytes:
        """POST ``args`` as JSON to ``verb`` and return the full response body.

        The whole exchange, body included, must finish within the client
        timeout. The deadline is checked between body reads; a single stalled
        read is bounded by the transport's own timeout.
        """
        url = self._url_for(verb)

        try:
            payload = args.model_dump_json().encode("utf-8")
        except ValueError as e:
            raise TransportError(verb, url, f"cannot encode request: {e}") from e

        start_time = time.perf_counter()
        deadline = start_time + self._timeout

        try:
            request = self._client.build_request(
                "POST",
                url,
                content=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except (httpx.InvalidURL, ValueError) as e:
            raise TransportError(verb, url, f"cannot build request: {e}") from e

        try:
            response = self._client.send(request, stream=True)
            try:
                body = _read_body(response, deadline)
            finally:
                response.close()
        except httpx.HTTPError as e:
            logger.debug(
                "Extender call failed",
                verb=verb,
                url=url,
                duration_seconds=time.perf_counter() - start_time,
                error=str(e),
            )
            raise TransportError(verb, url, str(e) or type(e).__name__) from e

        logger.debug(
            "Extender call completed",
            verb=verb,
            url=url,
            status_code=response.status_code,
            duration_seconds=time.perf_counter() - start_time,
        )
        if not response.is_success:
            # Body is decoded regardless of status.
            logger.warning(
                "Extender returned non-success status",
                verb=verb,
                url=url,
                status_code=response.status_code,
            )

        return body


def _read_body(response: httpx.Response, deadline: float) -> bytes:
    """Read the full response body, failing once ``deadline`` has passed."""
    chunks = []
    for chunk in response.iter_bytes():
        if time.perf_counter() > deadline:
            raise httpx.ReadTimeout("timed out", request=response.request)
        chunks.append(chunk)
    if time.perf_counter() > deadline:
        raise httpx.ReadTimeout("timed out", request=response.request)
    return b"".join(chunks)
