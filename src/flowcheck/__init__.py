"""flowcheck - validation for chatflow automations and WhatsApp Flows.

flowcheck decides whether a chatflow node/edge graph is structurally and
semantically sound enough to save or publish, and checks WhatsApp Flow JSON
documents before they are sent to Meta.
"""

__version__ = "0.1.0"
__author__ = "kabar.in"
__email__ = "dev@kabar.in"
__description__ = "Validation for chatflow automations and WhatsApp Flows"

from flowcheck.config import FlowcheckConfig
from flowcheck.validation import ValidationResult, validate_chatflow

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "__description__",
    "FlowcheckConfig",
    "ValidationResult",
    "validate_chatflow",
]
