# This file is intended to hold the setup for the authenticated githubkit client.

"""Sets up the authenticated githubkit client."""

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy


def get_github_token_client(github_token: str, github_api_url: str, timeout_seconds: float) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using a personal access token.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if no token is provided.
    """
    if not github_token:
        raise RuntimeError("GitHub token authentication requires GITHUB_TOKEN in config.")
    # Disable HTTP caching and automatic retries; a workflow dispatch must be
    # issued at most once per invocation.
    return GitHub(
        auth=TokenAuthStrategy(github_token),
        base_url=github_api_url,
        http_cache=False,
        auto_retry=False,
        timeout=timeout_seconds,
    )
