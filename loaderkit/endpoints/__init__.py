"""
Loaderkit Endpoints - package sources the provisioning pipeline downloads from.
"""

import httpx

from ..settings import LoaderkitSettings
from .base import Endpoint, EndpointRegistry, extract_tarball
from .github import GithubEndpoint
from .npm import NpmEndpoint


def default_registry(
    settings: LoaderkitSettings, client: httpx.AsyncClient
) -> EndpointRegistry:
    """Registry with the ``github`` and ``npm`` endpoints configured from settings."""
    return EndpointRegistry(
        {
            "github": GithubEndpoint(
                client, api_url=settings.github_api_url, token=settings.github_token
            ),
            "npm": NpmEndpoint(client, registry_url=settings.npm_registry_url),
        }
    )


__all__ = [
    "Endpoint",
    "EndpointRegistry",
    "GithubEndpoint",
    "NpmEndpoint",
    "default_registry",
    "extract_tarball",
]
