"""Shared fixtures for market_flags tests."""

import json

import pytest

from market_flags import InMemoryBlobStore, ServiceConfig
from market_flags.config import StorageSection

BUCKET = "flags-bucket"
OBJECT_NAME = "flags.json"
ORIGIN = "https://shop.example.com"

DATASET = {
    "featureFlags": [
        {"market": "US", "newFeatureActive": True},
        {
            "market": "SE",
            "newFeatureActive": False,
            "abSplitPercentage": {"new": 20, "current": 80},
        },
        {"market": "US", "newFeatureActive": False},
    ]
}


@pytest.fixture
def store() -> InMemoryBlobStore:
    s = InMemoryBlobStore()
    s.put(BUCKET, OBJECT_NAME, json.dumps(DATASET))
    return s


@pytest.fixture
def config() -> ServiceConfig:
    return ServiceConfig(
        access_control_allow_origin=ORIGIN,
        storage=StorageSection(bucket_name=BUCKET, data_filename=OBJECT_NAME),
    )
