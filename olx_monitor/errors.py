from __future__ import annotations


class MonitorError(Exception):
    """Base class for failures raised by the scrape pipeline components."""


class FetchError(MonitorError):
    """A source page could not be retrieved."""


class ExtractError(MonitorError):
    """A fetched page does not have the expected listing structure."""


class StoreError(MonitorError):
    """The seen-set store is unreachable or rejected a command."""


class NotifyError(MonitorError):
    """A notification could not be delivered."""
