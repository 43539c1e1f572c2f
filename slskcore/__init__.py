"""Building blocks for a Soulseek client: transfer state, registry, upload queue, message routing and slot limits."""

__version__ = "0.1.0"

__all__ = [
    "options",
    "queue_manager",
    "router",
    "slots",
    "transfer",
    "transfer_errors",
    "transfer_registry",
    "transfer_state",
]