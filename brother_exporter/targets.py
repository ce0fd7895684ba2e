"""Strategies deciding which printers a scrape request polls."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from urllib.parse import parse_qs

from brother_exporter.errors import MissingTargetError


class TargetResolver(ABC):
    """Resolve the printers to poll for one scrape request."""

    @abstractmethod
    def resolve(self, query_string: str) -> list[str]:
        """Get the targets for a request.

        Args:
            query_string: Raw query string of the scrape request

        Returns:
            Printer addresses, in polling order

        Raises:
            MissingTargetError: If the request names no target
        """


class StaticTargets(TargetResolver):
    """Poll a fixed list of printers loaded at startup."""

    def __init__(self, targets: Iterable[str]):
        self.targets = tuple(targets)

    def resolve(self, query_string: str) -> list[str]:
        return list(self.targets)


class QueryTarget(TargetResolver):
    """Poll the single printer named by a query parameter."""

    def __init__(self, param: str = "host"):
        self.param = param

    def resolve(self, query_string: str) -> list[str]:
        values = parse_qs(query_string).get(self.param, [])
        host = values[0].strip() if values else ""
        if not host:
            raise MissingTargetError(f"Query parameter '{self.param}' is required")
        return [host]
