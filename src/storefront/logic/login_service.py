"""
Business Logic Layer for LOGIN.

A login succeeds when the user record exists and its stored password matches
the supplied one; the issued token then carries the user's profile info.
"""

from typing import Optional

from aws_lambda_powertools.metrics import MetricUnit

from storefront.dal import RecordStore
from storefront.handlers.utils.observability import logger, metrics, tracer
from storefront.models.records import RecordContext
from storefront.security.credentials import ConstantTimeCredentialVerifier, CredentialVerifier
from storefront.security.tokens import TokenService

PASSWORD_ATTRIBUTE = 'password'
PROFILE_ATTRIBUTE = 'info'


class LoginService:
    """Checks credentials against stored users and issues bearer tokens."""

    def __init__(
        self,
        store: RecordStore,
        token_service: TokenService,
        credential_verifier: Optional[CredentialVerifier] = None,
    ):
        self.store = store
        self.token_service = token_service
        self.credential_verifier = credential_verifier or ConstantTimeCredentialVerifier()

    @tracer.capture_method
    def login(self, user_id: str, password: str) -> Optional[str]:
        """
        Authenticate a user.

        Args:
            user_id: Id of the user record
            password: Credential to compare with the stored one

        Returns:
            A signed token over the user's profile info on success, None otherwise
        """
        user = self.store.get_by_key(RecordContext.USER, user_id) if user_id else None

        if user is None or not self.credential_verifier.verify(password, user.get(PASSWORD_ATTRIBUTE)):
            metrics.add_metric(name="LoginFailure", unit=MetricUnit.Count, value=1)
            logger.info("Login rejected", extra={"user_id": user_id, "user_found": user is not None})
            return None

        # A user stored without profile info logs in with an empty identity
        profile = user.get(PROFILE_ATTRIBUTE)
        if profile is None:
            profile = {}

        metrics.add_metric(name="LoginSuccess", unit=MetricUnit.Count, value=1)
        logger.info("Login succeeded", extra={"user_id": user_id, "has_profile": bool(profile)})
        return self.token_service.issue(profile)
