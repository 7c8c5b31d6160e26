# REST client, remote repositories and client flows

from stresscheck.client.api_client import DiagnosticApiClient
from stresscheck.client.flow import DiagnosticFlow, HistoryBrowser
from stresscheck.client.repository import HistoryRepository, RemoteHistoryRepository

__all__ = [
    "DiagnosticApiClient",
    "DiagnosticFlow",
    "HistoryBrowser",
    "HistoryRepository",
    "RemoteHistoryRepository",
]
