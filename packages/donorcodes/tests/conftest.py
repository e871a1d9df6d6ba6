"""Shared fixtures for donorcodes tests."""

import pytest

from donorcodes.types import DonorRecord


@pytest.fixture
def donors() -> list[DonorRecord]:
    return [
        DonorRecord("World Health Organization", "WHO", "UN Agency", "1"),
        DonorRecord("United Nations Children's Fund", "UNICEF", "UN Agency", "1"),
        DonorRecord("Bill & Melinda Gates Foundation", "GATES", "Foundation", "0"),
    ]
