"""
MS Graph client setup.

The client is built once at application startup and handed to the calendar
backend; nothing here caches it at module level.
"""

from azure.identity import ClientSecretCredential
from msgraph import GraphServiceClient

from core.config import GRAPH_APP_ID, GRAPH_CLIENT_SECRET, GRAPH_TENANT_ID


def create_graph_client(
    tenant_id: str = GRAPH_TENANT_ID,
    app_id: str = GRAPH_APP_ID,
    client_secret: str = GRAPH_CLIENT_SECRET,
) -> GraphServiceClient:
    """Create an app-only MS Graph client from client-secret credentials."""
    credential = ClientSecretCredential(
        tenant_id=tenant_id,
        client_id=app_id,
        client_secret=client_secret,
    )
    return GraphServiceClient(credentials=credential)
