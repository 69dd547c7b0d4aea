"""Exceptions raised while assembling and dispatching purchase confirmations."""


class OrderNotFoundError(LookupError):
    """The order identifier does not resolve to an order."""

    def __init__(self, order_id: int):
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class ChannelError(Exception):
    """A confirmation could not be delivered through a channel."""


class ChannelDeliveryError(ChannelError):
    """The channel accepted the request but delivery failed."""


class ChannelConfigurationError(ChannelError):
    """The channel is missing configuration needed to deliver (e.g. recipients)."""
