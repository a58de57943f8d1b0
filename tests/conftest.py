"""Shared pytest setup: Hypothesis profiles and the fuzz marker.

Profiles (max_examples is set here and nowhere else):
    dev      300 examples, random seeds (default)
    ci       50 examples, derandomized, failure blobs printed
    verbose  100 examples with Hypothesis progress output

HYPOTHESIS_PROFILE selects a profile explicitly; CI=true selects "ci".

Tests marked @pytest.mark.fuzz only run under `pytest -m fuzz`.
"""

import os
import sys
from collections.abc import Iterator

import pytest
from hypothesis import Phase, Verbosity, settings

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

settings.register_profile("dev", max_examples=300, phases=_PHASES, derandomize=False)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=_PHASES,
    derandomize=True,
    print_blob=True,
)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=_PHASES,
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Profile name for this run, from HYPOTHESIS_PROFILE or CI."""
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


def pytest_configure(config: pytest.Config) -> None:
    """Declare the fuzz marker so --strict-markers accepts it."""
    config.addinivalue_line(
        "markers",
        "fuzz: long-running property tests, only run with -m fuzz",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark fuzz tests as skipped when the -m expression does not name them."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return

    skip_fuzz = pytest.mark.skip(reason="fuzz test; select with -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


@pytest.fixture
def int_digit_limit() -> Iterator[int]:
    """Pin sys.get_int_max_str_digits() to 5000, restoring it afterwards."""
    previous = sys.get_int_max_str_digits()
    sys.set_int_max_str_digits(5000)
    try:
        yield 5000
    finally:
        sys.set_int_max_str_digits(previous)
