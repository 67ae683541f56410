from __future__ import annotations

import pytest

from train.core.result import Err, Ok
from train.services.release.versions import (
    ReleaseVersion,
    next_versions,
    parse_tag,
    train_branch_name,
)


def test_train_release_bumps_train_and_resets_patch() -> None:
    result = next_versions("v149.3.0", "train")
    assert isinstance(result, Ok)

    nxt = result.value.next
    assert (nxt.major, nxt.train, nxt.patch) == (149, 4, 0)
    assert nxt.version == "149.4.0"
    assert nxt.tag == "v149.4.0"
    assert result.value.branch == "train-4"


def test_patch_release_stays_on_train_branch() -> None:
    result = next_versions("v149.4.2", "patch")
    assert isinstance(result, Ok)

    assert result.value.current == ReleaseVersion(149, 4, 2)
    assert result.value.next.tag == "v149.4.3"
    assert result.value.branch == "train-4"


def test_train_release_from_a_patch_tag_resets_patch() -> None:
    result = next_versions("v149.4.2", "train")
    assert isinstance(result, Ok)
    assert result.value.next.version == "149.5.0"


@pytest.mark.parametrize("tag", ["v1.2.3", "1.2.3", " v1.2.3\n"])
def test_parse_tag_accepts_optional_prefix(tag: str) -> None:
    result = parse_tag(tag)
    assert isinstance(result, Ok)
    assert result.value == ReleaseVersion(1, 2, 3)


@pytest.mark.parametrize("tag", ["", "v1.2", "v1.2.3-rc.1", "release-1.2.3", "vx.y.z"])
def test_parse_tag_rejects_malformed(tag: str) -> None:
    result = parse_tag(tag)
    assert isinstance(result, Err)
    assert result.error.kind == "parse_error"


def test_next_versions_propagates_parse_error() -> None:
    result = next_versions("nightly", "train")
    assert isinstance(result, Err)
    assert result.error.kind == "parse_error"


def test_versions_order_numerically() -> None:
    assert ReleaseVersion(149, 10, 0) > ReleaseVersion(149, 9, 7)


def test_train_branch_name() -> None:
    assert train_branch_name(4) == "train-4"
