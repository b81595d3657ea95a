from __future__ import annotations

import pytest

from anagrafe.core import policy


@pytest.mark.parametrize(
    "raw,reason",
    [
        ("", "required"),
        ("   ", "required"),
        (None, "required"),
        ("ABC", "length"),
        ("RSSMRA80A01H501UX", "length"),
        ("1SSMRA80A01H501U", "format"),
        ("RSSMRA80A01H5O1U", "format"),
    ],
)
def test_identifier_reasons_are_distinct(raw, reason):
    check = policy.validate(raw)
    assert check.valid is False
    assert check.reason == reason


def test_wrong_pattern_sixteen_chars_is_format():
    # dígito donde se exige una letra (posición 12)
    check = policy.validate("AAAAAA00A000A000")
    assert (check.valid, check.reason) == (False, "format")


def test_valid_identifier_after_canonicalization():
    assert policy.validate("RSSMRA80A01H501U").valid is True
    assert policy.validate("  rssmra80a01h501u ").valid is True
    assert policy.validate("RSSMRA80A01H501U").reason is None


def test_canonicalize_and_path_segment():
    assert policy.canonicalize("  rssmra80a01h501u ") == "RSSMRA80A01H501U"
    assert policy.canonicalize(None) == ""
    assert policy.path_segment("ab/c d") == "AB%2FC%20D"


@pytest.mark.parametrize("status,expected", [(404, True), (405, True), (501, True), (500, False), (400, False), (200, False)])
def test_endpoint_unavailable_guard(status, expected):
    assert policy.is_endpoint_unavailable(status) is expected


def test_validate_policy_passes():
    policy.validate_policy()


def test_structurally_conforming_placeholder_is_accepted():
    # sólo estructura: no se verifica el carácter de control
    assert policy.validate("AAAAAA00A00A000A").valid is True
