"""Pytest configuration and shared fixtures."""

import logging

import pytest


@pytest.fixture
def required_config():
    """Smallest configuration accepted by S3SinkConfig, using current names."""
    return {
        "aws.access.key.id": "AKIAEXAMPLE",
        "aws.secret.access.key": "secret-example",
        "aws.s3.bucket.name": "exports",
    }


@pytest.fixture
def legacy_config():
    """Smallest accepted configuration using only legacy names."""
    return {
        "aws_access_key_id": "AKIALEGACY",
        "aws_secret_access_key": "secret-legacy",
        "aws_s3_bucket": "legacy-exports",
    }


@pytest.fixture
def s3sink_logger():
    """Restore the s3sink logger after a test reconfigures it."""
    logger = logging.getLogger("s3sink")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
