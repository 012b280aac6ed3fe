"""
Provider — holds one StorageClient and one QueueClient.

Pure wiring: both clients are independent and share only the settings
object.

    provider = Provider("attachments-bucket", "alfred", "ons-123", "production", "work-items")
    key = await provider.storage.put_attachment("user@example.com/", files)
    await provider.queue.send({"attachments": key})
"""
from __future__ import annotations

import dataclasses

from courier.config import CourierSettings, get_settings
from courier.core.queue import QueueClient
from courier.core.storage import StorageClient


@dataclasses.dataclass
class Provider:
    """
    Parameters
    ----------
    bucket_name : attachment bucket
    app_name, slice, environment, queue_name : queue naming inputs, all required
    settings    : shared by both clients; process settings if omitted
    """

    bucket_name: str
    app_name: str
    slice: str
    environment: str
    queue_name: str
    settings: CourierSettings | None = None

    storage: StorageClient = dataclasses.field(init=False)
    queue: QueueClient = dataclasses.field(init=False)

    def __post_init__(self) -> None:
        if self.settings is None:
            self.settings = get_settings()
        self.storage = StorageClient(self.bucket_name, settings=self.settings)
        self.queue = QueueClient(
            self.app_name,
            self.slice,
            self.environment,
            self.queue_name,
            settings=self.settings,
        )
