"""Tests for S3SinkConfig resolution."""

import logging
from datetime import timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from s3sink.config.s3_sink_config import S3SinkConfig
from s3sink.config.types import (
    CompressionType,
    OutputField,
    OutputFieldEncodingType,
    OutputFieldType,
    TimestampSourceType,
)
from s3sink.core.exceptions import InvalidValueError, MissingRequiredError


def field(field_type, encoding_type):
    return OutputField(field_type=field_type, encoding_type=encoding_type)


class TestRequiredSettings:
    """Tests for the access key, secret key and bucket requirements."""

    def test_current_names(self, required_config):
        """Test configuration with current names is accepted."""
        config = S3SinkConfig(required_config)
        assert config.aws_access_key_id.get_secret_value() == "AKIAEXAMPLE"
        assert config.aws_secret_access_key.get_secret_value() == "secret-example"
        assert config.bucket_name == "exports"

    def test_legacy_names(self, legacy_config):
        """Test configuration with legacy names only is accepted."""
        config = S3SinkConfig(legacy_config)
        assert config.aws_access_key_id.get_secret_value() == "AKIALEGACY"
        assert config.aws_secret_access_key.get_secret_value() == "secret-legacy"
        assert config.bucket_name == "legacy-exports"

    @pytest.mark.parametrize(
        "current_key, legacy_key",
        [
            ("aws.access.key.id", "aws_access_key_id"),
            ("aws.secret.access.key", "aws_secret_access_key"),
            ("aws.s3.bucket.name", "aws_s3_bucket"),
        ],
    )
    def test_missing_pair(self, required_config, current_key, legacy_key):
        """Test missing both names of a required setting fails naming both."""
        del required_config[current_key]
        with pytest.raises(MissingRequiredError) as exc_info:
            S3SinkConfig(required_config)
        message = str(exc_info.value)
        assert current_key in message
        assert legacy_key in message
        assert exc_info.value.current_key == current_key
        assert exc_info.value.legacy_key == legacy_key

    def test_first_missing_pair_reported(self):
        """Test the access key is reported first when everything is missing."""
        with pytest.raises(MissingRequiredError) as exc_info:
            S3SinkConfig({})
        assert exc_info.value.current_key == "aws.access.key.id"

    def test_mixed_generations(self):
        """Test each setting may come from either generation."""
        config = S3SinkConfig(
            {
                "aws.access.key.id": "AKIA",
                "aws_secret_access_key": "secret",
                "aws_s3_bucket": "bucket",
            }
        )
        assert config.aws_secret_access_key.get_secret_value() == "secret"
        assert config.bucket_name == "bucket"

    def test_invalid_value_before_missing(self):
        """Test value validation runs before the required check."""
        with pytest.raises(InvalidValueError):
            S3SinkConfig({"aws.s3.region": "atlantis-1"})


class TestPrecedence:
    """Tests for current-wins-else-legacy-else-default resolution."""

    @pytest.mark.parametrize(
        "current_key, legacy_key, current, legacy, attribute",
        [
            ("aws.s3.bucket.name", "aws_s3_bucket", "new", "old", "bucket_name"),
            (
                "aws.s3.endpoint",
                "aws_s3_endpoint",
                "http://new:9000",
                "http://old:9000",
                "aws_endpoint",
            ),
            ("aws.s3.region", "aws_s3_region", "eu-west-1", "us-west-2", "region"),
            ("aws.s3.prefix", "aws_s3_prefix", "new/", "old/", "prefix"),
        ],
    )
    def test_current_wins(
        self, required_config, current_key, legacy_key, current, legacy, attribute
    ):
        """Test current name wins when both are set, legacy used otherwise."""
        both = S3SinkConfig({**required_config, current_key: current, legacy_key: legacy})
        assert getattr(both, attribute) == current

        only_legacy = dict(required_config)
        only_legacy.pop(current_key, None)
        only_legacy[legacy_key] = legacy
        assert getattr(S3SinkConfig(only_legacy), attribute) == legacy

    def test_secrets_current_wins(self, required_config, legacy_config):
        """Test current credentials win over legacy ones."""
        config = S3SinkConfig({**legacy_config, **required_config})
        assert config.aws_access_key_id.get_secret_value() == "AKIAEXAMPLE"
        assert config.aws_secret_access_key.get_secret_value() == "secret-example"

    def test_optional_defaults(self, required_config):
        """Test optional settings default when neither name is set."""
        config = S3SinkConfig(required_config)
        assert config.aws_endpoint is None
        assert config.prefix == ""
        assert config.region == "us-east-1"
        assert config.compression_type is CompressionType.GZIP
        assert config.output_field_encoding_type is OutputFieldEncodingType.BASE64

    def test_region_invalid(self, required_config):
        """Test unknown region fails listing supported regions."""
        with pytest.raises(InvalidValueError) as exc_info:
            S3SinkConfig({**required_config, "aws.s3.region": "atlantis-1"})
        assert "us-east-1" in str(exc_info.value)

    def test_compression(self, required_config):
        """Test compression from current name wins over the legacy name."""
        config = S3SinkConfig(
            {
                **required_config,
                "file.compression.type": "zstd",
                "output_compression": "none",
            }
        )
        assert config.compression_type is CompressionType.ZSTD

        legacy = S3SinkConfig({**required_config, "output_compression": "none"})
        assert legacy.compression_type is CompressionType.NONE

    def test_invalid_endpoint(self, required_config):
        """Test malformed endpoint fails naming the option."""
        with pytest.raises(InvalidValueError) as exc_info:
            S3SinkConfig({**required_config, "aws_s3_endpoint": "nope"})
        assert exc_info.value.name == "aws_s3_endpoint"

    def test_getters_idempotent(self, required_config):
        """Test repeated reads return equal values."""
        config = S3SinkConfig(
            {
                **required_config,
                "aws.s3.prefix": "{utc_date}data/{topic}/",
                "format.output.fields": "key,value,offset",
                "timestamp.timezone": "Europe/Helsinki",
            }
        )
        for attribute in (
            "aws_access_key_id",
            "aws_secret_access_key",
            "aws_endpoint",
            "bucket_name",
            "region",
            "prefix",
            "prefix_template",
            "compression_type",
            "output_fields",
            "output_field_encoding_type",
            "timezone",
            "timestamp_source",
        ):
            assert getattr(config, attribute) == getattr(config, attribute)


class TestOutputFields:
    """Tests for output field resolution."""

    def test_default(self, required_config):
        """Test unset list resolves to base64 encoded value."""
        config = S3SinkConfig(required_config)
        assert config.output_fields == [
            field(OutputFieldType.VALUE, OutputFieldEncodingType.BASE64)
        ]

    def test_key_value_use_encoding(self, required_config):
        """Test key and value take the default encoding, other fields none."""
        config = S3SinkConfig(
            {**required_config, "format.output.fields": "key,value,offset,timestamp"}
        )
        assert config.output_fields == [
            field(OutputFieldType.KEY, OutputFieldEncodingType.BASE64),
            field(OutputFieldType.VALUE, OutputFieldEncodingType.BASE64),
            field(OutputFieldType.OFFSET, OutputFieldEncodingType.NONE),
            field(OutputFieldType.TIMESTAMP, OutputFieldEncodingType.NONE),
        ]

    def test_configured_encoding(self, required_config):
        """Test the configured encoding applies to key and value."""
        config = S3SinkConfig(
            {
                **required_config,
                "format.output.fields": ["key", "value", "headers"],
                "format.output.fields.value.encoding": "none",
            }
        )
        assert config.output_fields == [
            field(OutputFieldType.KEY, OutputFieldEncodingType.NONE),
            field(OutputFieldType.VALUE, OutputFieldEncodingType.NONE),
            field(OutputFieldType.HEADERS, OutputFieldEncodingType.NONE),
        ]

    def test_legacy_list(self, required_config):
        """Test legacy list is used when the current list is unset."""
        config = S3SinkConfig({**required_config, "output_fields": "key,value"})
        assert config.output_fields == [
            field(OutputFieldType.KEY, OutputFieldEncodingType.BASE64),
            field(OutputFieldType.VALUE, OutputFieldEncodingType.BASE64),
        ]

    def test_current_list_wins(self, required_config):
        """Test current list wins over the legacy list."""
        config = S3SinkConfig(
            {
                **required_config,
                "format.output.fields": "offset",
                "output_fields": "key,value",
            }
        )
        assert config.output_fields == [
            field(OutputFieldType.OFFSET, OutputFieldEncodingType.NONE)
        ]

    def test_invalid_field(self, required_config):
        """Test unknown field name is rejected."""
        with pytest.raises(InvalidValueError):
            S3SinkConfig({**required_config, "output_fields": "key,partition"})


class TestPrefixTemplate:
    """Tests for rendering the storage prefix."""

    def test_no_variables(self, required_config):
        """Test prefix without variables renders unchanged."""
        config = S3SinkConfig({**required_config, "aws.s3.prefix": "cluster-1/"})
        assert config.prefix_template == "cluster-1/"

    def test_empty_prefix(self, required_config):
        """Test unset prefix renders to the empty string."""
        assert S3SinkConfig(required_config).prefix_template == ""

    @pytest.mark.parametrize("variable", ["utc_date", "local_date"])
    def test_deprecated_variables_stripped(self, required_config, variable, caplog):
        """Test deprecated variables render empty and log a warning."""
        config = S3SinkConfig(
            {**required_config, "aws.s3.prefix": f"{{{variable}}}data/"}
        )
        with caplog.at_level(logging.WARNING):
            assert config.prefix_template == "data/"
        assert f"{variable} variable is deprecated" in caplog.text

    def test_unknown_variable_kept(self, required_config):
        """Test variables without binding are left for later stages."""
        config = S3SinkConfig(
            {**required_config, "aws.s3.prefix": "{utc_date}{topic}/{partition}/"}
        )
        assert config.prefix_template == "{topic}/{partition}/"

    def test_raw_prefix_unchanged(self, required_config):
        """Test the raw prefix still contains the deprecated variable."""
        config = S3SinkConfig({**required_config, "aws.s3.prefix": "{utc_date}data/"})
        assert config.prefix == "{utc_date}data/"

    def test_malformed_prefix(self, required_config):
        """Test unmatched brace fails at construction."""
        with pytest.raises(InvalidValueError) as exc_info:
            S3SinkConfig({**required_config, "aws.s3.prefix": "{utc_date/data"})
        assert exc_info.value.name == "aws.s3.prefix"

    def test_malformed_legacy_prefix(self, required_config):
        """Test legacy prefix is validated as a template too."""
        with pytest.raises(InvalidValueError) as exc_info:
            S3SinkConfig({**required_config, "aws_s3_prefix": "data}/"})
        assert exc_info.value.name == "aws_s3_prefix"

    def test_injected_logger(self, required_config, caplog):
        """Test deprecation warnings go through the injected logger."""
        logger = logging.getLogger("test.connector")
        config = S3SinkConfig(
            {**required_config, "aws.s3.prefix": "{local_date}x/"}, logger=logger
        )
        with caplog.at_level(logging.WARNING, logger="test.connector"):
            config.prefix_template
        assert [record.name for record in caplog.records] == ["test.connector"]


class TestTimestamp:
    """Tests for timezone and timestamp source resolution."""

    def test_defaults(self, required_config):
        """Test defaults are UTC and wall-clock."""
        config = S3SinkConfig(required_config)
        assert config.timezone is timezone.utc
        assert config.timestamp_source.type is TimestampSourceType.WALLCLOCK
        assert config.timestamp_source.zone is timezone.utc

    def test_configured(self, required_config):
        """Test configured timezone is used by the timestamp source."""
        config = S3SinkConfig(
            {
                **required_config,
                "timestamp.timezone": "Europe/Helsinki",
                "timestamp.source": "event",
            }
        )
        assert config.timezone == ZoneInfo("Europe/Helsinki")
        assert config.timestamp_source.type is TimestampSourceType.EVENT
        assert config.timestamp_source.zone == ZoneInfo("Europe/Helsinki")

    def test_offset(self, required_config):
        """Test fixed offsets are accepted."""
        config = S3SinkConfig({**required_config, "timestamp.timezone": "+05:30"})
        assert config.timezone == timezone(timedelta(hours=5, minutes=30))

    def test_invalid_timezone(self, required_config):
        """Test unknown timezone is rejected."""
        with pytest.raises(InvalidValueError) as exc_info:
            S3SinkConfig({**required_config, "timestamp.timezone": "Moon/Base"})
        assert exc_info.value.name == "timestamp.timezone"


class TestBotoClientKwargs:
    """Tests for S3 client arguments."""

    def test_without_endpoint(self, required_config):
        """Test credentials and region are passed as plain values."""
        assert S3SinkConfig(required_config).boto_client_kwargs() == {
            "aws_access_key_id": "AKIAEXAMPLE",
            "aws_secret_access_key": "secret-example",
            "region_name": "us-east-1",
        }

    def test_with_endpoint(self, legacy_config):
        """Test custom endpoint is included when set."""
        config = S3SinkConfig({**legacy_config, "aws_s3_endpoint": "http://localhost:4566"})
        kwargs = config.boto_client_kwargs()
        assert kwargs["endpoint_url"] == "http://localhost:4566"
        assert kwargs["aws_access_key_id"] == "AKIALEGACY"


class TestOriginals:
    """Tests for access to the raw configuration."""

    def test_originals_copied(self, required_config):
        """Test later changes to the input do not affect the config."""
        config = S3SinkConfig(required_config)
        required_config["aws.s3.bucket.name"] = "changed"
        assert config.bucket_name == "exports"
        assert config.originals["aws.s3.bucket.name"] == "exports"

    def test_originals_read_only(self, required_config):
        """Test the raw configuration cannot be modified."""
        config = S3SinkConfig(required_config)
        with pytest.raises(TypeError):
            config.originals["aws.s3.bucket.name"] = "x"

    def test_repr_hides_secrets(self, required_config):
        """Test repr does not include credentials."""
        text = repr(S3SinkConfig(required_config))
        assert "exports" in text
        assert "secret-example" not in text
