"""Tests for rdist.sdk.urls."""

from __future__ import annotations

import pytest

from rdist.sdk.urls import app_name_param, encode_component, encode_path


class TestEncodeComponent:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Staging", "Staging"),
            ("my app", "my%20app"),
            ("a/b", "a%2Fb"),
            ("user@example.com", "user%40example.com"),
            ("-_.!~*'()", "-_.!~*'()"),
            ("?&=#", "%3F%26%3D%23"),
            ("héllo", "h%C3%A9llo"),
        ],
    )
    def test_matches_encode_uri_component(self, value: str, expected: str) -> None:
        assert encode_component(value) == expected


class TestEncodePath:
    def test_fills_placeholders(self) -> None:
        path = encode_path("/apps/{}/deployments/{}/release", "My App", "Production")
        assert path == "/apps/My%20App/deployments/Production/release"

    def test_no_placeholders(self) -> None:
        assert encode_path("/user") == "/user"

    def test_trailing_placeholder(self) -> None:
        assert encode_path("/apps/{}", "x y") == "/apps/x%20y"

    def test_count_mismatch(self) -> None:
        with pytest.raises(ValueError):
            encode_path("/apps/{}/deployments/{}", "only-one")


class TestAppNameParam:
    def test_plain_name_unchanged(self) -> None:
        assert app_name_param("MyApp") == "MyApp"

    def test_slashes_become_double_tilde(self) -> None:
        assert app_name_param("org/app") == "org~~app"
        assert app_name_param("a/b/c") == "a~~b~~c"

    def test_survives_encoding(self) -> None:
        assert encode_path("/apps/{}", app_name_param("org/app")) == "/apps/org~~app"
