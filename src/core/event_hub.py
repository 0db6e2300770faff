import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# Published by the polling scheduler with the new DashboardState after every change
DASHBOARD_UPDATE = "dashboard_update"


class EventHub:
    """
    In-process pub/sub. Handlers are plain callables `handler(topic, message)`
    invoked synchronously by the publisher, on the event loop thread.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = {}

    def subscribe(self, topic: str, handler: Callable[[str, Any], None]):
        handlers = self._subscribers.setdefault(topic, [])
        if handler not in handlers:
            handlers.append(handler)
        logger.debug(f"Subscribed to {topic}")

    def unsubscribe(self, topic: str, handler: Callable[[str, Any], None]):
        if handler in self._subscribers.get(topic, []):
            self._subscribers[topic].remove(handler)
            logger.debug(f"Unsubscribed from {topic}")

    def unsubscribe_all(self):
        self._subscribers.clear()

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    def send_all_on_topic(self, topic: str, message: Any):
        # Copy so handlers may unsubscribe while being called
        for handler in list(self._subscribers.get(topic, [])):
            try:
                handler(topic, message)
            except Exception as e:
                logger.error(f"Error handling message on topic {topic}: {e}")


# Global instance
event_hub = EventHub()
