from edgegrid_provider.client.appsec import AppSecClient, AppSecHttpClient
from edgegrid_provider.client.iam import IAMClient, IAMHttpClient
from edgegrid_provider.client.networklists import (
    NetworkListsClient,
    NetworkListsHttpClient,
)
from edgegrid_provider.client.papi import PapiClient, PapiHttpClient
from edgegrid_provider.client.session import Session

__all__ = [
    "AppSecClient",
    "AppSecHttpClient",
    "IAMClient",
    "IAMHttpClient",
    "NetworkListsClient",
    "NetworkListsHttpClient",
    "PapiClient",
    "PapiHttpClient",
    "Session",
]
