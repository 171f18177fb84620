"""
Core Application - Infrastructure & Base Classes

Generic, reusable base classes with no domain-specific logic. Domain apps
(hackathon, payments) build on these.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - VersionedMixin: Version counter incremented on every update

Services (import from core.services):
    - BaseService: Logger, transaction and required-field helpers

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError, NotFoundError, ConflictError
    - ConfigurationError, StoreError, ExternalServiceError
    - api_exception_handler: DRF exception handler

Helpers (import from core.helpers):
    - generate_token: Cryptographically secure token generation
    - compute_hmac_signature / verify_hmac_signature: Webhook signatures
    - get_bearer_token: Authorization header parsing

Views (import from core.views):
    - health_check: Database health endpoint
"""
