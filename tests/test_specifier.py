import pytest

from builder_cache.specifier import SpecifierError, parse_specifier


@pytest.mark.parametrize(
    "raw, name, spec",
    [
        ("my-builder", "my-builder", "latest"),
        ("my-builder@1.0.0", "my-builder", "1.0.0"),
        ("my-builder@^1.2", "my-builder", "^1.2"),
        ("my-builder@>=1 <2", "my-builder", ">=1 <2"),
        ("my-builder@canary", "my-builder", "canary"),
        ("my-builder@", "my-builder", "latest"),
        ("@scope/node", "@scope/node", "latest"),
        ("@scope/node@0.5.1", "@scope/node", "0.5.1"),
    ],
)
def test_registry_specifiers(raw: str, name: str, spec: str) -> None:
    parsed = parse_specifier(raw)
    assert parsed.name == name
    assert parsed.version_spec == spec
    assert parsed.registry
    assert str(parsed) == raw


def test_non_registry_specifier_uses_raw_string_as_name() -> None:
    raw = "https://example.invalid/builder.tgz"
    parsed = parse_specifier(raw)
    assert parsed.name == raw
    assert not parsed.registry


@pytest.mark.parametrize("raw", ["", "   ", "@scope", "bad name@1.0.0"])
def test_invalid_specifiers(raw: str) -> None:
    with pytest.raises(SpecifierError) as exc:
        parse_specifier(raw)
    assert exc.value.code == "INVALID_BUILDER_SPECIFIER"


@pytest.mark.parametrize("raw", ["user/repo", "vercel/now-static#main", "owner/builder#semver:^1.0"])
def test_hosted_git_shorthand_uses_raw_string_as_name(raw: str) -> None:
    parsed = parse_specifier(raw)
    assert parsed.name == raw
    assert parsed.version_spec == raw
    assert not parsed.registry
