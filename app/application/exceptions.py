class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class StoreError(RuntimeError):
    """Raised when a session or appointment store cannot read or write."""
    pass


class MessageDeliveryError(RuntimeError):
    """Raised when the messaging provider rejects an outbound message."""
    pass
