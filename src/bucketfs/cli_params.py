"""Shared CLI parameter definitions.

Connection options are declared once here and used by the application
callback in :mod:`bucketfs.cli`; every option can also be supplied through
its ``BUCKETFS_*`` environment variable.

Usage:
    @app.callback()
    def main(ctx: typer.Context, bucket: BucketOption = None):
        ...
"""

from typing import Annotated, Optional

import typer

BucketOption = Annotated[
    Optional[str],
    typer.Option("--bucket", "-b", envvar="BUCKETFS_BUCKET", help="Bucket name"),
]

PrefixOption = Annotated[
    str,
    typer.Option(
        "--prefix", envvar="BUCKETFS_PREFIX", help="Key prefix the paths are relative to"
    ),
]

DomainOption = Annotated[
    Optional[str],
    typer.Option(
        "--domain", envvar="BUCKETFS_DOMAIN", help="External base URL for public URLs"
    ),
]

AccessKeyOption = Annotated[
    Optional[str],
    typer.Option(
        "--access-key-id", envvar="BUCKETFS_ACCESS_KEY_ID", help="AWS access key ID"
    ),
]

SecretKeyOption = Annotated[
    Optional[str],
    typer.Option(
        "--secret-access-key",
        envvar="BUCKETFS_SECRET_ACCESS_KEY",
        help="AWS secret access key",
    ),
]

SessionTokenOption = Annotated[
    Optional[str],
    typer.Option(
        "--session-token", envvar="BUCKETFS_SESSION_TOKEN", help="AWS session token"
    ),
]

RegionOption = Annotated[
    str,
    typer.Option("--region", envvar="BUCKETFS_REGION", help="AWS region name"),
]

EndpointUrlOption = Annotated[
    Optional[str],
    typer.Option(
        "--endpoint-url", envvar="BUCKETFS_ENDPOINT_URL", help="Custom S3 endpoint URL"
    ),
]

AwsProfileOption = Annotated[
    Optional[str],
    typer.Option("--aws-profile", envvar="BUCKETFS_AWS_PROFILE", help="AWS CLI profile name"),
]

VisibilityOption = Annotated[
    Optional[str],
    typer.Option("--visibility", help="Visibility label, e.g. 'public' or 'private'"),
]

RecursiveOption = Annotated[
    bool,
    typer.Option("--recursive", "-r", help="Include everything below sub-directories"),
]

LogLevelOption = Annotated[
    Optional[str],
    typer.Option(
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR); defaults to BUCKETFS_LOG_LEVEL",
    ),
]
