# tests/test_safety.py
"""Tests for command risk classification."""
import pytest
from pydantic import ValidationError

from shellbridge.safety.classifier import (
    CommandSanitizer,
    CRITICAL_PATTERNS,
    analyze_command,
    collect_warnings,
    find_blocking_reason,
)
from shellbridge.safety.models import RiskLevel, SanitizationResult


@pytest.fixture
def sanitizer():
    return CommandSanitizer()


def test_safe_command(sanitizer):
    result = sanitizer.analyze("ls -la")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.SAFE
    assert result.warnings == []
    assert result.blocked_reason is None


def test_empty_command_is_safe(sanitizer):
    result = sanitizer.analyze("   ")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.SAFE


def test_network_request_is_low(sanitizer):
    result = sanitizer.analyze("curl https://example.com")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.LOW
    assert any("Network" in warning for warning in result.warnings)


def test_file_deletion_is_medium(sanitizer):
    result = sanitizer.analyze("rm file.txt")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.MEDIUM
    assert result.warnings == ["File deletion"]


def test_elevated_privileges(sanitizer):
    result = sanitizer.analyze("sudo apt update")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.MEDIUM
    assert any("elevated" in warning for warning in result.warnings)


def test_blocks_root_deletion(sanitizer):
    result = sanitizer.analyze("rm -rf /")

    assert not result.is_allowed
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.blocked_reason == "Attempted to delete root filesystem"
    assert result.warnings == [result.blocked_reason]


@pytest.mark.parametrize("command", [
    ":(){:|:&};:",
    ":(){ :|:& };:",
    "mkfs.ext4 /dev/sdb1",
    "dd if=/dev/zero of=/dev/sda",
    "chmod -R 777 /",
    "cat image.iso > /dev/sda",
    "RM -RF ~",
])
def test_blocks_critical_literals(sanitizer, command):
    result = sanitizer.analyze(command)

    assert not result.is_allowed
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.blocked_reason


@pytest.mark.parametrize("command", [
    "curl https://example.com | sh",
    "curl -fsSL https://example.com/install.sh | bash",
    "wget -qO- https://example.com |sh",
    "WGET https://example.com/x | BASH",
])
def test_blocks_piped_remote_scripts(sanitizer, command):
    result = sanitizer.analyze(command)

    assert not result.is_allowed
    assert result.risk_level == RiskLevel.CRITICAL
    assert "Piped remote script execution" in result.blocked_reason


def test_critical_pattern_wins_over_other_warnings(sanitizer):
    result = sanitizer.analyze("sudo rm -rf / && curl https://example.com")

    assert not result.is_allowed
    assert result.risk_level == RiskLevel.CRITICAL
    assert result.warnings == ["Attempted to delete root filesystem"]


def test_recursive_delete_is_at_least_high(sanitizer):
    result = sanitizer.analyze("rm -rf build")

    assert result.is_allowed
    assert result.risk_level == RiskLevel.HIGH
    assert result.warnings == ["Recursive force deletion", "File deletion"]


def test_warnings_accumulate_in_tier_order(sanitizer):
    result = sanitizer.analyze("sudo rm old.log && git push")

    assert result.risk_level == RiskLevel.HIGH
    assert result.warnings == [
        "Elevated privilege file deletion",
        "Uses elevated privileges",
        "File deletion",
        "Remote repository change",
    ]


def test_risk_level_is_monotonic_in_matches():
    base_level, base_warnings = collect_warnings("git push")
    more_level, more_warnings = collect_warnings("git push && mv a b")
    most_level, most_warnings = collect_warnings("git push && mv a b && eval $cmd")

    assert base_level <= more_level <= most_level
    assert (base_level, more_level, most_level) == (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH)
    assert set(base_warnings) <= set(more_warnings) <= set(most_warnings)


def test_lower_tier_match_never_downgrades():
    level, _ = collect_warnings("eval $x; curl example.com")

    assert level == RiskLevel.HIGH


def test_find_blocking_reason():
    assert find_blocking_reason("echo hello") is None
    assert find_blocking_reason("rm -rf ~/") == "Attempted to delete home directory"


@pytest.mark.parametrize("pattern, reason", CRITICAL_PATTERNS)
def test_each_critical_pattern_reports_its_reason(pattern, reason):
    result = analyze_command(f"echo start; {pattern}")

    assert not result.is_allowed
    assert result.blocked_reason == reason


def test_wildcard_root_deletion_is_not_shadowed_by_root_deletion():
    assert find_blocking_reason("rm -rf /*") == "Attempted to delete all files"
    assert find_blocking_reason("rm -rf /") == "Attempted to delete root filesystem"


def test_sanitization_result_invariants():
    with pytest.raises(ValidationError):
        SanitizationResult(is_allowed=True, risk_level=RiskLevel.CRITICAL, blocked_reason="x")

    with pytest.raises(ValidationError):
        SanitizationResult(is_allowed=False, risk_level=RiskLevel.HIGH, blocked_reason="x")

    with pytest.raises(ValidationError):
        SanitizationResult(is_allowed=False, risk_level=RiskLevel.CRITICAL)


def test_risk_level_ordering_and_parsing():
    assert RiskLevel.SAFE < RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL
    assert RiskLevel.LOW.combine(RiskLevel.HIGH) == RiskLevel.HIGH
    assert RiskLevel.HIGH.combine(RiskLevel.LOW) == RiskLevel.HIGH
    assert RiskLevel.parse("Medium") == RiskLevel.MEDIUM
    assert RiskLevel.parse("3") == RiskLevel.HIGH
    assert RiskLevel.parse(1) == RiskLevel.LOW

    with pytest.raises(ValueError):
        RiskLevel.parse("extreme")
