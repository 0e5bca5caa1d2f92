"""Test configuration and fixtures for bucketfs."""

import boto3
import pytest
from moto import mock_aws

from bucketfs.adapter import ObjectStorageAdapter
from bucketfs.objectstorage.provider import ObjectInfo, ObjectListPage, S3Provider

BUCKET = "test-bucket"


class InMemoryProvider:
    """Listing-capable provider over a dict of keys.

    Pagination follows S3's marker semantics: entries (keys and grouped
    sub-prefixes) are ordered lexicographically and a page resumes strictly
    after the marker, so a sub-prefix used as a marker skips all its keys.
    """

    def __init__(self, keys=()):
        self.objects = {key: b"x" * (index + 1) for index, key in enumerate(keys)}
        self.list_calls = []
        self.deleted_batches = []

    def list_objects(self, bucket, prefix, delimiter, max_keys, marker):
        self.list_calls.append((prefix, marker))

        entries = []
        seen_prefixes = set()
        for key in sorted(self.objects):
            if not key.startswith(prefix):
                continue
            rest = key[len(prefix) :]
            if delimiter and delimiter in rest:
                sub_prefix = prefix + rest.split(delimiter, 1)[0] + delimiter
                if sub_prefix not in seen_prefixes:
                    seen_prefixes.add(sub_prefix)
                    entries.append((sub_prefix, True))
            else:
                entries.append((key, False))

        entries = [entry for entry in entries if entry[0] > marker]
        page = entries[:max_keys]
        truncated = len(entries) > max_keys

        return ObjectListPage(
            objects=[
                ObjectInfo(key=name, size=len(self.objects[name]))
                for name, is_prefix in page
                if not is_prefix
            ],
            prefixes=[name for name, is_prefix in page if is_prefix],
            next_marker=page[-1][0] if truncated else "",
        )

    def delete_objects(self, bucket, keys):
        self.deleted_batches.append(list(keys))
        for key in keys:
            self.objects.pop(key, None)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing reaches real AWS."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def s3_client(aws_credentials):
    """Mocked S3 client with an empty test bucket."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def adapter(s3_client):
    """Adapter over the mocked bucket."""
    return ObjectStorageAdapter(S3Provider(s3_client), BUCKET)


@pytest.fixture
def memory_provider():
    """In-memory provider with a small directory tree."""
    return InMemoryProvider(
        [
            "images/",
            "images/a.jpg",
            "images/b.jpg",
            "images/2019/",
            "images/2019/c.jpg",
            "images/2019/raw/d.raw",
            "images/2020/e.jpg",
            "images-backup/f.jpg",
            "readme.txt",
        ]
    )
