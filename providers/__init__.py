from providers.base import StatusProvider
from providers.statuspage_provider import StatuspageProvider

__all__ = ["StatusProvider", "StatuspageProvider"]
