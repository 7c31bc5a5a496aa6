"""
PDV Event Bus - Errors
========================
Raised at subscription time only. Dispatch itself never raises.
"""


class EventBusError(Exception):
    pass


class InvalidEventTypeFormat(EventBusError):
    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"Invalid event type '{event_type}': expected dotted "
            f"engine.entity.action, or '*'."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, handler_name: str):
        self.event_type = event_type
        self.handler_name = handler_name
        super().__init__(f"{handler_name} is already subscribed to {event_type}.")
