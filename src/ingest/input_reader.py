"""Upload source readers for ADIF imports.

This module loads ADIF text from a local file or an S3 object.
Both paths hand undecoded bytes to the shared byte decoder.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from adif.tokenizer import decode_adif_bytes
from core.config import LogbookConfig
from core.errors import LogbookDependencyError, LogbookIngestError
from core.s3_uri import S3Location, parse_s3_uri


def read_adif_source(source_uri: str, config: LogbookConfig) -> str:
    """Load ADIF text from a local file or S3.

    Args:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Decoded ADIF text.

    Raises:
        LogbookIngestError: If source cannot be read.
        LogbookDependencyError: If an S3 source is used without boto3.
    """
    if source_uri.startswith("s3://"):
        return _read_s3_object(parse_s3_uri(source_uri), config)
    return _read_local_file(Path(source_uri).expanduser())


def _read_local_file(source_path: Path) -> str:
    """Read ADIF text from a local file.

    Args:
        source_path: Input file.

    Returns:
        Decoded ADIF text.

    Raises:
        LogbookIngestError: If path is missing, a directory, or unreadable.
    """
    if not source_path.exists():
        raise LogbookIngestError(
            f"Failed to read source at {source_path}: path does not exist. "
            "Provide an existing ADIF file."
        )
    if not source_path.is_file():
        raise LogbookIngestError(
            f"Failed to read source at {source_path}: not a file. "
            "Provide a single .adi or .adif file."
        )
    try:
        payload = source_path.read_bytes()
    except OSError as error:
        raise LogbookIngestError(
            f"Failed to read source at {source_path}: {error.strerror}."
        ) from error
    return decode_adif_bytes(payload)


def _read_s3_object(location: S3Location, config: LogbookConfig) -> str:
    """Download one ADIF object from S3.

    Args:
        location: Target bucket/key.
        config: Runtime config for region/profile.

    Returns:
        Decoded ADIF text.

    Raises:
        LogbookIngestError: If the object cannot be downloaded.
    """
    s3_client = _create_s3_client(config)
    from botocore.exceptions import BotoCoreError, ClientError

    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
        payload = response["Body"].read()
    except (BotoCoreError, ClientError) as error:
        raise LogbookIngestError(
            f"Failed to download s3://{location.bucket}/{location.key}: {error}. "
            "Check the object key and AWS credentials."
        ) from error
    return decode_adif_bytes(payload)


def _create_s3_client(config: LogbookConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        LogbookDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise LogbookDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to import from s3:// sources."
        ) from error
    session_kwargs = _build_boto3_session_kwargs(config)
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _build_boto3_session_kwargs(config: LogbookConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config."""
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
