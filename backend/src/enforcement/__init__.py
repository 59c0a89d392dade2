"""HTTP enforcement of business rules.

The request governor middleware matches mutation requests against a static
route table, evaluates them, and blocks (409), fails closed (500) or passes
them downstream with any warnings attached.
"""

from .middleware import RequestGovernorMiddleware
from .routes import GovernedRoute, default_routes, policy_from_settings

__all__ = [
    "GovernedRoute",
    "RequestGovernorMiddleware",
    "default_routes",
    "policy_from_settings",
]
