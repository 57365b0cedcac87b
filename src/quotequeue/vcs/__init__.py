"""Version control access for the canonical quote files."""

from quotequeue.vcs.gateway import GatewayStatus, GitCommandError, GitGateway, open_gateway

__all__ = ["GatewayStatus", "GitCommandError", "GitGateway", "open_gateway"]
