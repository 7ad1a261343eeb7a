"""Discourse admin API client library.

Architecture:
- client.py: HTTP client, credentials and the process-wide default client
- responses.py: body decoding, allow-list normalization, typed views
- result.py: Result type and the ``raising`` wrapper
- users.py: user lookup, creation, deactivation/reactivation
- api_keys.py: per-user API key generation and revocation
- categories.py: community topic and category creation
- exceptions.py: typed exceptions

Usage:
    # Using service classes
    from discourse_admin.core import DiscourseClient, DiscourseCredentials

    client = DiscourseClient(DiscourseCredentials("https://forum.example.com", "system", "key"))
    result = client.users.user_id("alice")
    if result.is_ok:
        print(result.value)

    # Using standalone functions (credentials from the environment)
    from discourse_admin.core import user_id_or_raise

    user_id_or_raise("alice")
"""
from .client import (
    DiscourseClient,
    DiscourseCredentials,
    DiscourseResponse,
    get_default_client,
    reset_default_client,
    USER_NOT_FOUND,
    INTERNAL_SERVER_ERROR,
    UNEXPECTED_BODY,
)
from .exceptions import (
    DiscourseError,
    DiscourseRequestError,
    DiscourseTransportError,
    MissingCredentialsError,
    UnexpectedFieldsError,
)
from .result import Result, TransportFailure, raising
from .responses import (
    EXPECTED_FIELDS,
    ApiKeyRecord,
    CategoryRecord,
    UserSummary,
    decode_body,
    normalize_body,
)
from .users import (
    UserService,
    user_id,
    user_id_or_raise,
    user,
    user_or_raise,
    create_user,
    create_user_or_raise,
    deactivate_user,
    deactivate_user_or_raise,
    reactivate_user,
    reactivate_user_or_raise,
)
from .api_keys import (
    ApiKeyService,
    API_KEY_REVOKED,
    generate_user_api_key,
    generate_user_api_key_or_raise,
    revoke_user_api_key,
    revoke_user_api_key_or_raise,
)
from .categories import (
    CategoryService,
    create_community_topic,
    create_community_topic_or_raise,
    create_category,
    create_category_or_raise,
)

__all__ = [
    # Client
    "DiscourseClient",
    "DiscourseCredentials",
    "DiscourseResponse",
    "get_default_client",
    "reset_default_client",
    "USER_NOT_FOUND",
    "INTERNAL_SERVER_ERROR",
    "UNEXPECTED_BODY",
    "API_KEY_REVOKED",

    # Exceptions
    "DiscourseError",
    "DiscourseRequestError",
    "DiscourseTransportError",
    "MissingCredentialsError",
    "UnexpectedFieldsError",

    # Results and bodies
    "Result",
    "TransportFailure",
    "raising",
    "EXPECTED_FIELDS",
    "ApiKeyRecord",
    "CategoryRecord",
    "UserSummary",
    "decode_body",
    "normalize_body",

    # Services
    "UserService",
    "ApiKeyService",
    "CategoryService",

    # User functions
    "user_id",
    "user_id_or_raise",
    "user",
    "user_or_raise",
    "create_user",
    "create_user_or_raise",
    "deactivate_user",
    "deactivate_user_or_raise",
    "reactivate_user",
    "reactivate_user_or_raise",

    # API key functions
    "generate_user_api_key",
    "generate_user_api_key_or_raise",
    "revoke_user_api_key",
    "revoke_user_api_key_or_raise",

    # Category functions
    "create_community_topic",
    "create_community_topic_or_raise",
    "create_category",
    "create_category_or_raise",
]
