"""Tests for WebsiteSettings"""

import dataclasses

import pytest

from website_stacks.errors import MissingSettingError
from website_stacks.settings import WebsiteSettings

FULL_ENV = {
    "S3_BUCKET_NAME": "example-site",
    "CUSTOM_DOMAIN": "www.example.com",
    "HOSTED_ZONE_ID": "Z0123456789",
    "RELATIVE_PATH_TO_BUILD_DIR": "./dist",
    "REFERER_SECRET": "s3cr3t",
    "AWS_REGION": "eu-west-1",
    "AWS_PROFILE": "deploy",
    "ENVIRONMENT": "prod",
}


class TestFromEnv:
    def test_reads_every_variable(self):
        settings = WebsiteSettings.from_env(FULL_ENV)
        assert settings == WebsiteSettings(
            bucket_name="example-site",
            custom_domain="www.example.com",
            hosted_zone_id="Z0123456789",
            relative_path_to_build_dir="./dist",
            referer_secret="s3cr3t",
            aws_region="eu-west-1",
            aws_profile="deploy",
            environment="prod",
        )

    def test_defaults(self):
        settings = WebsiteSettings.from_env({})
        assert settings.bucket_name == ""
        assert settings.relative_path_to_build_dir == "../build"
        assert settings.aws_region == "us-east-1"
        assert settings.aws_profile == "default"
        assert settings.environment == "dev"

    def test_empty_value_falls_back_to_default(self):
        settings = WebsiteSettings.from_env({"AWS_REGION": ""})
        assert settings.aws_region == "us-east-1"

    def test_loads_dotenv_file(self, tmp_path, monkeypatch):
        # setenv first so monkeypatch restores whatever load_dotenv writes.
        for name in FULL_ENV:
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        env_file = tmp_path / ".env"
        env_file.write_text("S3_BUCKET_NAME=from-dotenv\nCUSTOM_DOMAIN=docs.example.com\n")
        settings = WebsiteSettings.from_env(env_file=str(env_file))
        assert settings.bucket_name == "from-dotenv"
        assert settings.custom_domain == "docs.example.com"

    def test_process_environment_wins_over_dotenv(self, tmp_path, monkeypatch):
        monkeypatch.setenv("S3_BUCKET_NAME", "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text("S3_BUCKET_NAME=from-dotenv\n")
        settings = WebsiteSettings.from_env(env_file=str(env_file))
        assert settings.bucket_name == "from-env"


class TestRequireComplete:
    def test_complete_settings_pass(self):
        settings = WebsiteSettings.from_env(FULL_ENV)
        assert settings.require_complete() is settings

    def test_lists_missing_env_vars(self):
        settings = WebsiteSettings(bucket_name="example-site")
        with pytest.raises(MissingSettingError) as excinfo:
            settings.require_complete()
        assert excinfo.value.names == ["CUSTOM_DOMAIN", "HOSTED_ZONE_ID"]
        assert "CUSTOM_DOMAIN, HOSTED_ZONE_ID" in str(excinfo.value)

    def test_optional_settings_are_not_required(self):
        settings = WebsiteSettings(
            bucket_name="example-site",
            custom_domain="www.example.com",
            hosted_zone_id="Z0123456789",
        )
        assert settings.missing() == []

    def test_extra_fields_are_required(self):
        settings = WebsiteSettings(
            bucket_name="example-site",
            custom_domain="www.example.com",
            hosted_zone_id="Z0123456789",
        )
        with pytest.raises(MissingSettingError) as excinfo:
            settings.require_complete(("referer_secret",))
        assert excinfo.value.names == ["REFERER_SECRET"]

    def test_extra_fields_that_are_set_pass(self):
        settings = WebsiteSettings.from_env(FULL_ENV)
        assert settings.missing(("referer_secret",)) == []


def test_settings_are_immutable():
    settings = WebsiteSettings.from_env(FULL_ENV)
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.bucket_name = "other"
