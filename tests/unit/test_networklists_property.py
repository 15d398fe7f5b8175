import pytest

from edgegrid_provider.client.networklists import (
    ActivationsResponse,
    CreateActivationsRequest,
    GetActivationsRequest,
    RemoveActivationsRequest,
)
from edgegrid_provider.client.papi import (
    GetLatestVersionRequest,
    GetLatestVersionResponse,
    GetPropertyVersionHostnamesRequest,
    GetPropertyVersionHostnamesResponse,
)
from edgegrid_provider.errors import ConfigurationError, DecodeError
from edgegrid_provider.providers.networklists.activations import Activations
from edgegrid_provider.providers.property.hostnames import PropertyHostnames
from edgegrid_provider.resource_data import ResourceData

NETWORK_LIST_ID = "38069_INTERNALWHITELIST"
EMAILS = ["b@example.com", "a@example.com"]


def activation(activation_id, status="PENDING_ACTIVATION", network="STAGING"):
    return ActivationsResponse(
        activation_id=activation_id,
        action="ACTIVATE",
        activation_status=status,
        network=network,
        unique_id=NETWORK_LIST_ID,
        comments="first",
        notification_recipients=sorted(EMAILS),
    )


@pytest.fixture
def activation_params():
    return {
        "network_list_id": NETWORK_LIST_ID,
        "notes": "first",
        "notification_emails": EMAILS,
    }


class TestActivations:
    def test_create_activates_on_staging_by_default(
        self, context, networklists, activation_params
    ):
        # Arrange
        networklists.expect(
            "create_activations",
            CreateActivationsRequest(
                unique_id=NETWORK_LIST_ID,
                action="ACTIVATE",
                network="STAGING",
                comments="first",
                notification_recipients=["a@example.com", "b@example.com"],
            ),
            returns=activation(12345),
        )
        networklists.expect(
            "get_activations",
            GetActivationsRequest(activation_id=12345),
            returns=activation(12345),
        )
        d = ResourceData(Activations.schema, activation_params)

        # Act
        Activations(context).create(d)

        # Assert
        assert d.id == "12345"
        assert d.get("status") == "PENDING_ACTIVATION"
        assert d.get("network") == "STAGING"
        assert d.to_dict()["notification_emails"] == ["a@example.com", "b@example.com"]

    def test_unknown_network_fails_before_any_call(
        self, context, networklists, activation_params
    ):
        activation_params["network"] = "QA"
        d = ResourceData(Activations.schema, activation_params)

        with pytest.raises(ConfigurationError) as exc_info:
            Activations(context).create(d)

        assert exc_info.value.field == "network"
        assert networklists.calls == []

    def test_update_activates_again_under_new_id(
        self, context, networklists, activation_params
    ):
        # Arrange
        activation_params["network"] = "PRODUCTION"
        networklists.expect(
            "create_activations",
            CreateActivationsRequest(
                unique_id=NETWORK_LIST_ID,
                network="PRODUCTION",
                comments="first",
                notification_recipients=["a@example.com", "b@example.com"],
            ),
            returns=activation(12346, network="PRODUCTION"),
        )
        networklists.expect(
            "get_activations",
            GetActivationsRequest(activation_id=12346),
            returns=activation(12346, status="ACTIVATED", network="PRODUCTION"),
        )
        d = ResourceData(Activations.schema, activation_params, id="12345")

        # Act
        Activations(context).update(d)

        # Assert
        assert d.id == "12346"
        assert d.get("status") == "ACTIVATED"

    def test_delete_deactivates(self, context, networklists, activation_params):
        networklists.expect(
            "remove_activations",
            RemoveActivationsRequest(
                activation_id=12345,
                unique_id=NETWORK_LIST_ID,
                action="DEACTIVATE",
                network="STAGING",
                comments="first",
                notification_recipients=["a@example.com", "b@example.com"],
            ),
        )
        d = ResourceData(Activations.schema, activation_params, id="12345")

        Activations(context).delete(d)

        assert d.id == ""

    def test_non_numeric_id_is_rejected(self, context, networklists, activation_params):
        d = ResourceData(Activations.schema, activation_params, id="abc")

        with pytest.raises(DecodeError):
            Activations(context).read(d)

        assert networklists.calls == []


class TestPropertyHostnames:
    def _latest(self):
        return GetLatestVersionResponse.model_validate(
            {
                "propertyId": "prp_175780",
                "contractId": "ctr_1-1TJZFW",
                "groupId": "grp_15166",
                "versions": {"items": [{"propertyVersion": 3}]},
            }
        )

    def _hostnames(self):
        return GetPropertyVersionHostnamesResponse.model_validate(
            {
                "propertyId": "prp_175780",
                "propertyVersion": 3,
                "hostnames": {
                    "items": [
                        {
                            "cnameType": "EDGE_HOSTNAME",
                            "edgeHostnameId": "ehn_895822",
                            "cnameFrom": "www.example.com",
                            "cnameTo": "www.example.com.edgesuite.net",
                            "certProvisioningType": "DEFAULT",
                            "certStatus": {
                                "validationCname": {
                                    "hostname": "_acme-challenge.www.example.com",
                                    "target": "ac.1234.example.com",
                                },
                                "staging": [{"status": "PENDING"}],
                                "production": [{"status": "PENDING"}],
                            },
                        },
                        {
                            "cnameType": "EDGE_HOSTNAME",
                            "edgeHostnameId": "ehn_895823",
                            "cnameFrom": "api.example.com",
                            "cnameTo": "api.example.com.edgesuite.net",
                            "certProvisioningType": "CPS_MANAGED",
                        },
                    ]
                },
            }
        )

    @pytest.mark.parametrize(
        "params",
        [
            {"group_id": "15166", "contract_id": "1-1TJZFW", "property_id": "175780"},
            {
                "group_id": "grp_15166",
                "contract_id": "ctr_1-1TJZFW",
                "property_id": "prp_175780",
            },
        ],
    )
    def test_read_latest_version(self, context, papi, params):
        # Arrange
        papi.expect(
            "get_latest_version",
            GetLatestVersionRequest(
                property_id="prp_175780", contract_id="ctr_1-1TJZFW", group_id="grp_15166"
            ),
            returns=self._latest(),
        )
        papi.expect(
            "get_property_version_hostnames",
            GetPropertyVersionHostnamesRequest(
                property_id="prp_175780",
                property_version=3,
                contract_id="ctr_1-1TJZFW",
                group_id="grp_15166",
                include_cert_status=True,
            ),
            returns=self._hostnames(),
        )
        d = ResourceData(PropertyHostnames.schema, params)

        # Act
        PropertyHostnames(context).read(d)

        # Assert
        assert d.id == "prp_1757803"
        assert d.get("version") == 3
        assert d.get("property_id") == "prp_175780"
        first, second = d.get("hostnames")
        assert first["cname_from"] == "www.example.com"
        assert first["cert_status"] == [
            {
                "hostname": "_acme-challenge.www.example.com",
                "target": "ac.1234.example.com",
                "staging_status": "PENDING",
                "production_status": "PENDING",
            }
        ]
        assert second["cert_status"] == []

    def test_blank_ids_are_rejected(self, context, papi):
        d = ResourceData(
            PropertyHostnames.schema,
            {"group_id": " ", "contract_id": "ctr_1", "property_id": "prp_1"},
        )

        with pytest.raises(ConfigurationError) as exc_info:
            PropertyHostnames(context).read(d)

        assert exc_info.value.field == "group_id"
        assert papi.calls == []
