import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from edgegrid_provider.client import (
    AppSecClient,
    AppSecHttpClient,
    IAMClient,
    IAMHttpClient,
    NetworkListsClient,
    NetworkListsHttpClient,
    PapiClient,
    PapiHttpClient,
    Session,
)
from edgegrid_provider.config import ProviderConfig
from edgegrid_provider.errors import OperationCancelled


@dataclass
class ProviderContext:
    """
    Everything a mapper needs besides its own attributes.

    The context is passed explicitly into every mapper. It carries the
    upstream clients, a cache shared by the calls made through it, and the
    cancellation signal of the calling framework. Clients a given run does not
    use may be left unset.
    """

    appsec: Optional[AppSecClient] = None
    iam: Optional[IAMClient] = None
    networklists: Optional[NetworkListsClient] = None
    papi: Optional[PapiClient] = None

    # Cross-call cache, e.g. the modifiable version resolved per configuration.
    cache: Dict[str, Any] = field(default_factory=dict)

    # Set by the calling framework to abort before the next upstream call.
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "ProviderContext":
        """Builds a context whose clients talk to the configured API host."""
        session = Session(config)
        return cls(
            appsec=AppSecHttpClient(session),
            iam=IAMHttpClient(session),
            networklists=NetworkListsHttpClient(session),
            papi=PapiHttpClient(session),
        )

    def cancel(self) -> None:
        self.cancel_event.set()

    def check_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise OperationCancelled("operation cancelled before the next upstream call")
