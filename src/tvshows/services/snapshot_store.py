"""Snapshot storage for the last fetched TVMaze dataset.

The snapshot is only used to diff the next fetch against; the relational
store remains the system of record. Every operation therefore degrades to a
falsy result instead of raising.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from tvshows.config import Settings, settings

logger = logging.getLogger(__name__)

Snapshot = list[dict[str, Any]]


class SnapshotStore(ABC):
    """
    Abstract blob store holding one snapshot.

    Implementations must NOT raise. Failures are logged and reported as
    ``None`` / ``False``.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Return True if a snapshot is stored."""

    @abstractmethod
    def read(self) -> Snapshot | None:
        """Return the stored snapshot, or None when missing or corrupt."""

    @abstractmethod
    def write(self, data: Snapshot) -> bool:
        """Replace the snapshot wholesale. Returns False on failure."""

    @abstractmethod
    def delete(self) -> bool:
        """Remove the snapshot. Returns False on failure."""


def _serialize(data: Snapshot) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _deserialize(content: str | bytes) -> Snapshot:
    data = json.loads(content)
    if not isinstance(data, list):
        raise ValueError(f"Snapshot must be a JSON array, got {type(data).__name__}")
    return data


class LocalSnapshotStore(SnapshotStore):
    """Snapshot kept as a pretty-printed JSON file on local disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> Snapshot | None:
        if not self.exists():
            return None

        try:
            return _deserialize(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse local snapshot {self.path}: {e}")
            return None

    def write(self, data: Snapshot) -> bool:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file and rename, so readers never see
            # a half-written snapshot.
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(_serialize(data))
            os.replace(tmp_name, self.path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write local snapshot {self.path}: {e}")
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            return False

    def delete(self) -> bool:
        try:
            self.path.unlink(missing_ok=True)
            return True
        except OSError as e:
            logger.error(f"Failed to delete local snapshot {self.path}: {e}")
            return False


class S3SnapshotStore(SnapshotStore):
    """
    Snapshot kept as a single S3 object.

    Falls back to ``fallback`` (a local store) when no S3 client can be
    built, and for writes that S3 rejects.
    """

    def __init__(
        self,
        bucket: str,
        key: str,
        fallback: SnapshotStore,
        region: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the S3 store.

        Args:
            bucket: S3 bucket name
            key: Object key of the snapshot
            fallback: Store used when S3 is unavailable
            region: AWS region (uses the boto3 default chain if not provided)
            client: Pre-built S3 client (built lazily if not provided)
        """
        self.bucket = bucket
        self.key = key
        self.fallback = fallback
        self.region = region
        self._client = client
        self._client_failed = False

    @property
    def client(self) -> Any:
        if self._client is None and not self._client_failed:
            try:
                self._client = boto3.client("s3", region_name=self.region)
            except BotoCoreError as e:
                logger.warning(f"S3 client unavailable, falling back to local snapshot: {e}")
                self._client_failed = True
        return self._client

    def exists(self) -> bool:
        if self.client is None:
            return self.fallback.exists()

        try:
            self.client.head_object(Bucket=self.bucket, Key=self.key)
            return True
        except ClientError as e:
            if _error_code(e) in ("404", "NoSuchKey", "NotFound"):
                return False
            logger.error(f"Failed to check S3 snapshot s3://{self.bucket}/{self.key}: {e}")
            return False
        except BotoCoreError as e:
            logger.error(f"Failed to check S3 snapshot s3://{self.bucket}/{self.key}: {e}")
            return False

    def read(self) -> Snapshot | None:
        if self.client is None:
            return self.fallback.read()

        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self.key)
            return _deserialize(response["Body"].read())
        except ClientError as e:
            if _error_code(e) != "NoSuchKey":
                logger.error(f"Failed to read S3 snapshot s3://{self.bucket}/{self.key}: {e}")
            return None
        except (BotoCoreError, ValueError) as e:
            logger.error(f"Failed to read S3 snapshot s3://{self.bucket}/{self.key}: {e}")
            return None

    def write(self, data: Snapshot) -> bool:
        if self.client is None:
            return self.fallback.write(data)

        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=_serialize(data).encode("utf-8"),
                ContentType="application/json",
            )
            return True
        except (BotoCoreError, ClientError, TypeError, ValueError) as e:
            logger.error(f"Failed to write S3 snapshot, writing locally instead: {e}")
            return self.fallback.write(data)

    def delete(self) -> bool:
        if self.client is None:
            return self.fallback.delete()

        try:
            self.client.delete_object(Bucket=self.bucket, Key=self.key)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete S3 snapshot s3://{self.bucket}/{self.key}: {e}")
            return False


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def get_snapshot_store(config: Settings | None = None) -> SnapshotStore:
    """
    Build the snapshot store selected by configuration.

    Args:
        config: Settings to read (uses global settings if not provided)

    Returns:
        LocalSnapshotStore or S3SnapshotStore
    """
    config = config or settings
    local = LocalSnapshotStore(config.snapshot_path)

    if config.snapshot_backend == "s3":
        return S3SnapshotStore(
            bucket=config.snapshot_s3_bucket,
            key=config.snapshot_s3_key,
            fallback=local,
            region=config.aws_region,
        )

    if config.snapshot_backend != "local":
        logger.warning(f"Unknown snapshot backend {config.snapshot_backend!r}, using local file")
    return local
