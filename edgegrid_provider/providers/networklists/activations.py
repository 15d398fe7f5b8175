from edgegrid_provider.client.networklists import (
    CreateActivationsRequest,
    GetActivationsRequest,
    RemoveActivationsRequest,
)
from edgegrid_provider.identity import CompositeKey, KeyField
from edgegrid_provider.interfaces.resource import BaseResource
from edgegrid_provider.models import Attribute, AttrType
from edgegrid_provider.resource_data import ResourceData

NETWORKS = ("STAGING", "PRODUCTION")


class Activations(BaseResource):
    """
    The activation of a network list on the staging or production network.

    Each activation request produces a new activation id, so changing any
    attribute activates again and re-keys the object. Delete deactivates the
    list on the same network.
    """

    type_name = "networklist_activations"
    description = "Activate a network list on the staging or production network."
    key = CompositeKey(KeyField("activation_id", int))
    schema = {
        "network_list_id": Attribute(
            AttrType.STRING, required=True, description="Unique identifier of the network list."
        ),
        "network": Attribute(
            AttrType.STRING,
            optional=True,
            default="STAGING",
            choices=NETWORKS,
            description="The network to activate the list on.",
        ),
        "notes": Attribute(
            AttrType.STRING,
            optional=True,
            default="",
            description="Comments recorded with the activation.",
        ),
        "notification_emails": Attribute(
            AttrType.SET,
            required=True,
            elem=AttrType.STRING,
            description="Email addresses notified when the activation completes.",
        ),
        "status": Attribute(
            AttrType.STRING, computed=True, description="Status of the activation."
        ),
    }

    @property
    def networklists(self):
        return self.context.networklists

    def create(self, d: ResourceData) -> None:
        d.validate()
        self._activate(d)
        self.read(d)

    def read(self, d: ResourceData) -> None:
        activation_id = self.decode_id(d)["activation_id"]
        response = self.call(
            self.networklists.get_activations,
            GetActivationsRequest(activation_id=activation_id),
        )
        if response.unique_id:
            d.set("network_list_id", response.unique_id)
        if response.network:
            d.set("network", response.network)
        d.set("notes", response.comments)
        d.set("notification_emails", response.notification_recipients)
        d.set("status", response.activation_status)

    def update(self, d: ResourceData) -> None:
        d.validate()
        self.decode_id(d)
        self._activate(d)
        self.read(d)

    def delete(self, d: ResourceData) -> None:
        activation_id = self.decode_id(d)["activation_id"]
        self.call(
            self.networklists.remove_activations,
            RemoveActivationsRequest(
                activation_id=activation_id,
                unique_id=d.get_str("network_list_id"),
                action="DEACTIVATE",
                network=d.get("network"),
                comments=d.get("notes"),
                notification_recipients=sorted(d.get_set("notification_emails")),
            ),
        )
        d.clear_id()

    def _activate(self, d: ResourceData) -> None:
        response = self.call(
            self.networklists.create_activations,
            CreateActivationsRequest(
                unique_id=d.get_str("network_list_id"),
                action="ACTIVATE",
                network=d.get("network"),
                comments=d.get("notes"),
                notification_recipients=sorted(d.get_set("notification_emails")),
            ),
        )
        d.set_id(self.key.encode({"activation_id": response.activation_id}))
