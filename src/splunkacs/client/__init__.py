"""ACS API client."""

from splunkacs.client.acs import AcsClient, ApiResponse, stack_url

__all__ = ["AcsClient", "ApiResponse", "stack_url"]
