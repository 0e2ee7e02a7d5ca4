"""Tests for application configuration settings."""

import os
from unittest.mock import patch

import pytest

from georesolve.core.config import KNOWN_PROVIDERS, Settings


class TestGeocodingSettingsDefaults:
    """Test default resolution settings."""

    def test_should_default_to_full_provider_chain_in_priority_order(self):
        """Test GEOCODING_PROVIDERS lists every provider, commercial first."""
        # Arrange & Act
        settings = Settings(GEOCODING_PROVIDERS=list(KNOWN_PROVIDERS))

        # Assert
        assert settings.GEOCODING_PROVIDERS == [
            "google_findplace",
            "geoapify",
            "mapbox",
            "google_text",
            "nominatim",
        ]

    def test_should_have_scoring_defaults(self):
        """Test candidate scoring defaults."""
        # Arrange & Act
        settings = Settings()

        # Assert
        assert settings.GEOCODING_MAX_CANDIDATES == 8
        assert settings.GEOCODING_REGION_MATCH_WEIGHT == 30
        assert settings.GEOCODING_CITY_MATCH_WEIGHT == 20
        assert settings.NOMINATIM_VIEWBOX_PAD == 0.3


class TestGeocodingSettingsValidation:
    """Test validators on resolution settings."""

    def test_should_normalize_and_dedupe_provider_names(self):
        """Test provider names are lowercased and repeated names dropped."""
        # Arrange & Act
        settings = Settings(GEOCODING_PROVIDERS=["Mapbox", " nominatim ", "mapbox"])

        # Assert
        assert settings.GEOCODING_PROVIDERS == ["mapbox", "nominatim"]

    def test_should_reject_unknown_provider(self):
        """Test an unknown provider name fails validation."""
        # Arrange & Act & Assert
        with pytest.raises(ValueError, match="Unknown geocoding providers"):
            Settings(GEOCODING_PROVIDERS=["mapbox", "bing"])

    def test_should_read_provider_order_from_environment(self):
        """Test GEOCODING_PROVIDERS can be overridden via environment."""
        # Arrange & Act
        with patch.dict(
            os.environ, {"GEOCODING_PROVIDERS": '["nominatim", "geoapify"]'}
        ):
            settings = Settings()

        # Assert
        assert settings.GEOCODING_PROVIDERS == ["nominatim", "geoapify"]

    @pytest.mark.parametrize("timeout", ["0", "-1"])
    def test_should_reject_non_positive_timeout(self, timeout):
        """Test GEOCODING_TIMEOUT must be positive."""
        # Arrange & Act & Assert
        with patch.dict(os.environ, {"GEOCODING_TIMEOUT": timeout}):
            with pytest.raises(ValueError):
                Settings()

    def test_should_reject_negative_weights(self):
        """Test scoring weights cannot be negative."""
        # Arrange & Act & Assert
        with pytest.raises(ValueError):
            Settings(GEOCODING_REGION_MATCH_WEIGHT=-5)

    def test_should_lowercase_country_code(self):
        """Test GEOCODING_COUNTRY_CODE is normalized to lowercase."""
        # Arrange & Act
        settings = Settings(GEOCODING_COUNTRY_CODE=" US ")

        # Assert
        assert settings.GEOCODING_COUNTRY_CODE == "us"


class TestSettingsGeneralBehavior:
    """Test general Settings class behavior."""

    def test_should_replace_wildcard_cors_origins(self):
        """Test wildcard CORS origins fall back to localhost origins."""
        # Arrange & Act
        settings = Settings(cors_origins=["*"])

        # Assert
        assert "*" not in settings.cors_origins
        assert "http://localhost:8000" in settings.cors_origins

    def test_should_keep_explicit_cors_origins(self):
        """Test explicit CORS origins are kept as given."""
        # Arrange & Act
        settings = Settings(cors_origins=["https://example.org"])

        # Assert
        assert settings.cors_origins == ["https://example.org"]
