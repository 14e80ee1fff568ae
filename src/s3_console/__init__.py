"""Browser-facing administrative API for Amazon S3.

Users connect with static access keys or by assuming an IAM role. The
server keeps their credentials in a server-side session referenced by a
signed cookie and proxies bucket and object operations through boto3.

Key Features:
    - Static-key and role-assumption connect flows
    - Bucket listing, folder-style object browsing with full pagination
    - Presigned download URLs, uploads and deletes
    - CLI to run the server

Recommended Usage:
    Run the server from the command line:

    $ s3-console serve --port 5000

    Or embed the application factory:

    >>> from s3_console import create_app
    >>> app = create_app()
"""

__version__ = "0.1.0"

from .api import create_app
from .credentials import CredentialResolver
from .objectstorage import AwsClientFactory, S3Gateway
from .schemas import BucketDescriptor, CredentialRecord, ObjectDescriptor
from .sessions import InMemorySessionStore, Session, SessionStore

__all__ = [
    "create_app",
    # Credentials
    "CredentialRecord",
    "CredentialResolver",
    # Sessions
    "InMemorySessionStore",
    "Session",
    "SessionStore",
    # Object storage
    "AwsClientFactory",
    "BucketDescriptor",
    "ObjectDescriptor",
    "S3Gateway",
]
