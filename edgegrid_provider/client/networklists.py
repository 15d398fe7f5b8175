"""The network lists API, limited to list activations."""

from abc import ABC, abstractmethod
from typing import List

from edgegrid_provider.client.base import ApiModel, HttpClient

BASE_PATH = "/network-list/v2/network-lists"


class CreateActivationsRequest(ApiModel):
    unique_id: str
    action: str = "ACTIVATE"
    network: str = "STAGING"
    comments: str = ""
    notification_recipients: List[str] = []


class GetActivationsRequest(ApiModel):
    activation_id: int


class RemoveActivationsRequest(ApiModel):
    activation_id: int
    unique_id: str
    action: str = "DEACTIVATE"
    network: str = "STAGING"
    comments: str = ""
    notification_recipients: List[str] = []


class ActivationsResponse(ApiModel):
    activation_id: int
    action: str = ""
    activation_status: str = ""
    network: str = ""
    unique_id: str = ""
    comments: str = ""
    notification_recipients: List[str] = []


class NetworkListsClient(ABC):
    @abstractmethod
    def create_activations(
        self, request: CreateActivationsRequest
    ) -> ActivationsResponse: ...

    @abstractmethod
    def get_activations(self, request: GetActivationsRequest) -> ActivationsResponse: ...

    @abstractmethod
    def remove_activations(
        self, request: RemoveActivationsRequest
    ) -> ActivationsResponse: ...


class NetworkListsHttpClient(HttpClient, NetworkListsClient):
    """`NetworkListsClient` over the network lists REST API."""

    def create_activations(self, request):
        return self._write(
            "POST",
            BASE_PATH + "/{unique_id}/environments/{network}/activate",
            ActivationsResponse,
            data={
                "comments": request.comments,
                "notificationRecipients": request.notification_recipients,
            },
            path_params={"unique_id": request.unique_id, "network": request.network},
        )

    def get_activations(self, request):
        return self._get(
            "/network-list/v2/activations/{activation_id}",
            ActivationsResponse,
            path_params={"activation_id": request.activation_id},
        )

    def remove_activations(self, request):
        return self._write(
            "POST",
            BASE_PATH + "/{unique_id}/environments/{network}/deactivate",
            ActivationsResponse,
            data={
                "comments": request.comments,
                "notificationRecipients": request.notification_recipients,
            },
            path_params={"unique_id": request.unique_id, "network": request.network},
        )
