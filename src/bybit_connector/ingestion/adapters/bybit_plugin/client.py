import asyncio
from collections.abc import Mapping
from typing import Any

import aiohttp

from bybit_connector.infrastructure.observability import get_ingestion_logger
from bybit_connector.ingestion.config.value_objects import BybitConfig, CallOptions
from bybit_connector.ingestion.ports import IErrorClassifier, IHttpClient

from .clock import ClockSynchronizer
from .exceptions import TransportError
from .routes import Route, build_request_path
from .signer import Credentials, RequestSigner

logger = get_ingestion_logger("bybit-client", exchange="bybit")


class BybitClient:
    """Async client for the Bybit REST API.

    Single Responsibility: Turn one route + params into one round trip and
    hand back the decoded envelope, or raise the classified error.

    Dependencies injected (not instantiated):
    - http_client: Executes HTTP requests
    - signer: Builds URLs, bodies and signatures
    - classifier: Maps failure responses to exceptions
    - clock: Supplies venue-adjusted timestamps

    No retries: every call is exactly one request.
    """

    def __init__(
        self,
        config: BybitConfig,
        http_client: IHttpClient,
        signer: RequestSigner,
        classifier: IErrorClassifier,
        clock: ClockSynchronizer,
    ):
        """Initialize BybitClient with injected dependencies.

        Args:
            config: Base URL, credentials and default call options
            http_client: HTTP client implementation (e.g., AiohttpClient)
            signer: Request signer bound to the same base URL
            classifier: Error classifier (e.g., BybitErrorClassifier)
            clock: Clock synchronizer used for signed request timestamps
        """
        self.config = config
        self.http_client = http_client
        self.signer = signer
        self.classifier = classifier
        self.clock = clock
        self.credentials = Credentials(api_key=config.api_key, secret=config.secret)

    @property
    def has_credentials(self) -> bool:
        return bool(self.credentials.api_key and self.credentials.secret)

    async def request(
        self,
        route: Route,
        params: Mapping[str, Any] | None = None,
        options: CallOptions | None = None,
    ) -> Any:
        """Call ``route`` and return the decoded response envelope.

        Args:
            route: Endpoint to call
            params: Request parameters (caller overrides already merged)
            options: Per-call options; defaults to the configured ones

        Returns:
            Decoded JSON body ({ret_code, ret_msg, result, time_now, ...})

        Raises:
            AuthenticationRequiredError: Private route without credentials
            ExchangeError: Or one of its subclasses, for venue-reported failures
            TransportError: Network failure, unclassified HTTP error or non-JSON body
        """
        options = options or self.config.options
        endpoint = build_request_path(route.scope, route.path, self.signer.version)
        timestamp = None if route.scope.is_public else self.clock.nonce()

        signed = self.signer.sign(
            route.path,
            scope=route.scope,
            method=route.method,
            params=params,
            credentials=self.credentials,
            timestamp=timestamp,
            recv_window=options.recv_window_millis,
        )

        logger.debug("request_sent", endpoint=endpoint, method=signed.method)
        try:
            response = await self.http_client.send(
                signed.url,
                method=signed.method,
                headers=signed.headers,
                body=signed.body,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("transport_failed", endpoint=endpoint, error=str(e))
            raise TransportError(
                f"bybit {signed.method} {endpoint} failed: {e}", endpoint=endpoint
            ) from e

        error = self.classifier.classify(
            response.status_code, response.body, response.text, endpoint
        )
        if error is not None:
            logger.error(
                "venue_error",
                endpoint=endpoint,
                status_code=response.status_code,
                code=getattr(error, "code", None),
                error_type=type(error).__name__,
            )
            raise error

        if response.status_code >= 400:
            logger.error(
                "http_error", endpoint=endpoint, status_code=response.status_code
            )
            raise TransportError(
                f"bybit {response.status_code} {response.text}",
                status_code=response.status_code,
                endpoint=endpoint,
            )

        if response.body is None:
            logger.error("unparseable_response", endpoint=endpoint)
            raise TransportError(
                f"bybit returned a non-JSON response: {response.text}",
                status_code=response.status_code,
                endpoint=endpoint,
            )

        logger.debug(
            "response_received", endpoint=endpoint, status_code=response.status_code
        )
        return response.body
