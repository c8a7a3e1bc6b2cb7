"""
Bearer token issuing and verification.

Tokens are HS256 JWTs carrying an opaque identity payload in the ``data``
claim and an absolute ``exp`` instant. Verification never raises: any token
that is missing, malformed, tampered with or expired resolves to the empty
(anonymous) identity.
"""

import time
from typing import Any, Callable, Optional

import jwt
from aws_lambda_powertools.metrics import MetricUnit

from storefront.handlers.models.env_vars import StorefrontEnvVars
from storefront.handlers.utils.errors import ConfigurationError
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.handlers.utils.response import DecimalEncoder

# Fallback signing secret for local runs when SECRET is unset. Refused in prod.
DEVELOPMENT_SECRET = 'SECRET'

DEFAULT_TOKEN_TTL_SECONDS = 86400
TOKEN_ALGORITHM = 'HS256'
PAYLOAD_CLAIM = 'data'
BEARER_PREFIX = 'Bearer '


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the token service.

        Args:
            secret: HMAC signing secret
            ttl_seconds: Lifetime of issued tokens
            clock: Source of the issue time, in epoch seconds
        """
        if not secret:
            raise ConfigurationError("Token signing secret must not be empty")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: StorefrontEnvVars) -> 'TokenService':
        """
        Build the token service from environment configuration.

        Raises:
            ConfigurationError: If SECRET is unset in production
        """
        secret = settings.SECRET
        if not secret:
            if settings.is_production:
                raise ConfigurationError("SECRET must be set when ENVIRONMENT is prod")
            logger.warning("SECRET is not set, signing tokens with DEVELOPMENT_SECRET", extra={
                "environment": settings.ENVIRONMENT,
            })
            secret = DEVELOPMENT_SECRET
        return cls(secret=secret, ttl_seconds=settings.TOKEN_TTL_SECONDS)

    @tracer.capture_method
    def issue(self, payload: Any) -> str:
        """
        Sign a token embedding ``payload`` that expires after the configured TTL.

        Args:
            payload: JSON-serializable identity data

        Returns:
            Encoded JWT
        """
        issued_at = int(self._clock())
        claims = {
            PAYLOAD_CLAIM: payload,
            'iat': issued_at,
            'exp': issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=TOKEN_ALGORITHM, json_encoder=DecimalEncoder)

    @tracer.capture_method
    def verify(self, token: Optional[str]) -> Any:
        """
        Resolve a token to its identity payload.

        Args:
            token: Encoded JWT, optionally prefixed with ``Bearer``

        Returns:
            The embedded payload, or an empty dict when the token is not valid
        """
        if not token:
            return {}
        if token.startswith(BEARER_PREFIX):
            token = token[len(BEARER_PREFIX):]

        try:
            claims = jwt.decode(token, self._secret, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            metrics.add_metric(name="TokenRejected", unit=MetricUnit.Count, value=1)
            logger.info("Bearer token expired")
            return {}
        except jwt.PyJWTError as e:
            metrics.add_metric(name="TokenRejected", unit=MetricUnit.Count, value=1)
            logger.info("Bearer token rejected", extra={"reason": str(e)})
            return {}

        payload = claims.get(PAYLOAD_CLAIM)
        return {} if payload is None else payload
