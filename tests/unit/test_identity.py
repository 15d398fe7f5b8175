import pytest

from edgegrid_provider.errors import ConfigurationError, DecodeError
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.resource_data import ResourceData

POLICY_KEY = CompositeKey(
    KeyField("config_id"), KeyField("version"), KeyField("security_policy_id", str)
)


class TestCompositeKey:
    def test_encode_joins_parts_in_field_order(self):
        identifier = POLICY_KEY.encode(
            {"security_policy_id": "AAAA_81230", "version": 7, "config_id": 43253}
        )

        assert identifier == "43253:7:AAAA_81230"

    def test_decode_returns_typed_parts(self):
        values = POLICY_KEY.decode("43253:7:AAAA_81230")

        assert values == {
            "config_id": 43253,
            "version": 7,
            "security_policy_id": "AAAA_81230",
        }
        assert isinstance(values["config_id"], int)

    @pytest.mark.parametrize(
        "values",
        [
            {"config_id": 1, "version": 1, "security_policy_id": "P1"},
            {"config_id": 43253, "version": 7, "security_policy_id": "AAAA_81230"},
        ],
    )
    def test_decode_inverts_encode(self, values):
        assert POLICY_KEY.decode(POLICY_KEY.encode(values)) == values

    @pytest.mark.parametrize(
        "identifier",
        [
            "",
            "43253",
            "43253:7",
            "43253:7:AAAA_81230:extra",
            "abc:7:AAAA_81230",
            "43253:seven:AAAA_81230",
            "43253::AAAA_81230",
        ],
    )
    def test_decode_rejects_malformed_identifiers(self, identifier):
        with pytest.raises(DecodeError) as exc_info:
            POLICY_KEY.decode(identifier)

        assert "config_id:version:security_policy_id" in str(exc_info.value)

    @pytest.mark.parametrize(
        "identifier",
        [
            "043253:7:AAAA_81230",
            "43253:07:AAAA_81230",
            "43253: 7:AAAA_81230",
            "43253:7 :AAAA_81230",
            "+43253:7:AAAA_81230",
            "-1:7:AAAA_81230",
            "43_253:7:AAAA_81230",
        ],
    )
    def test_decode_rejects_non_canonical_integers(self, identifier):
        with pytest.raises(DecodeError) as exc_info:
            POLICY_KEY.decode(identifier)

        assert identifier in str(exc_info.value)

    @pytest.mark.parametrize(
        "identifier", ["43253:7:AAAA_81230", "0:0:P1", "10:100:0042"]
    )
    def test_encode_inverts_decode(self, identifier):
        assert POLICY_KEY.encode(POLICY_KEY.decode(identifier)) == identifier

    def test_encode_requires_every_mandatory_part(self):
        with pytest.raises(ConfigurationError) as exc_info:
            POLICY_KEY.encode({"config_id": 43253, "security_policy_id": "P1"})

        assert exc_info.value.field == "version"

    def test_encode_rejects_delimiter_in_part(self):
        with pytest.raises(ConfigurationError):
            POLICY_KEY.encode(
                {"config_id": 1, "version": 2, "security_policy_id": "A:B"}
            )

    def test_optional_trailing_field(self):
        key = CompositeKey(
            KeyField("config_id"), KeyField("security_policy_id", str, optional=True)
        )

        assert key.encode({"config_id": 43253}) == "43253"
        assert key.encode({"config_id": 43253, "security_policy_id": "P1"}) == "43253:P1"
        assert key.decode("43253") == {"config_id": 43253}
        assert key.decode("43253:P1") == {"config_id": 43253, "security_policy_id": "P1"}
        assert key.format == "config_id:[security_policy_id]"

    def test_optional_field_must_be_trailing(self):
        with pytest.raises(ValueError):
            CompositeKey(KeyField("a", optional=True), KeyField("b"))

    def test_from_data_derives_identifier_when_parts_are_present(self):
        schema = {
            "config_id": Attribute(AttrType.INT, required=True),
            "version": Attribute(AttrType.INT, optional=True, computed=True),
            "security_policy_id": Attribute(AttrType.STRING, required=True),
        }
        complete = ResourceData(
            schema, {"config_id": 43253, "version": 7, "security_policy_id": "AAAA_81230"}
        )
        partial = ResourceData(schema, {"config_id": 43253, "security_policy_id": "AAAA_81230"})

        assert POLICY_KEY.from_data(complete) == "43253:7:AAAA_81230"
        assert POLICY_KEY.from_data(partial) is None
