"""Factories for test requests and body streams."""

from crumb.factory.request import ServerRequestFactory
from crumb.factory.stream import StreamFactory

__all__ = ["ServerRequestFactory", "StreamFactory"]
