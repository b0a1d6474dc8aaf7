# tests/test_environments.py
import pytest

from appbuilder.environments import DeployEnvironment
from appbuilder.errors import ConfigurationError, InvalidEnumValueError


class TestDeployEnvironment:
    """DeployEnvironment parsing from configured strings."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Local", DeployEnvironment.LOCAL),
            ("Development", DeployEnvironment.DEVELOPMENT),
            ("Test", DeployEnvironment.TEST),
            ("Staging", DeployEnvironment.STAGING),
            ("Production", DeployEnvironment.PRODUCTION),
            ("production", DeployEnvironment.PRODUCTION),
            ("  STAGING\n", DeployEnvironment.STAGING),
        ],
    )
    def test_from_value_known(self, raw, expected):
        assert DeployEnvironment.from_value(raw) is expected

    @pytest.mark.unit
    def test_from_value_passes_members_through(self):
        assert DeployEnvironment.from_value(DeployEnvironment.TEST) is DeployEnvironment.TEST

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["Prod", "qa", "", "   ", None, 3])
    def test_from_value_unknown(self, raw):
        with pytest.raises(InvalidEnumValueError) as exc_info:
            DeployEnvironment.from_value(raw)

        assert exc_info.value.value == raw
        assert "Production" in exc_info.value.allowed

    @pytest.mark.unit
    def test_invalid_value_error_hierarchy(self):
        """Unknown variants are both configuration errors and ValueErrors."""
        with pytest.raises(ConfigurationError):
            DeployEnvironment.from_value("Moon")
        with pytest.raises(ValueError):
            DeployEnvironment.from_value("Moon")

    @pytest.mark.unit
    def test_is_local_or_test(self):
        assert DeployEnvironment.LOCAL.is_local_or_test
        assert DeployEnvironment.TEST.is_local_or_test
        assert not DeployEnvironment.DEVELOPMENT.is_local_or_test
        assert not DeployEnvironment.STAGING.is_local_or_test
        assert not DeployEnvironment.PRODUCTION.is_local_or_test
