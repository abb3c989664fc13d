from typing import Dict, List, Callable, Optional
from dataclasses import dataclass
from collections import deque
from enum import Enum
import logging
import threading


class EventType(Enum):
    # Catalog events
    FILTERS_APPLIED = "filters_applied"    # A FilterEngine run finished and views were synced
    CATALOG_LOADED = "catalog_loaded"      # A scan result replaced the catalog contents

    # View events
    VIEW_MODE_CHANGED = "view_mode_changed"
    SELECTION_CHANGED = "selection_changed"

    # User-facing messages
    STATUS_MESSAGE = "status_message"
    FOLDER_WARNING = "folder_warning"      # User enabled a folder that does not exist


@dataclass
class EventData:
    event_type: EventType
    source: str  # Source component name
    timestamp: float


@dataclass
class StatusMessageEventData(EventData):
    message: str
    timeout: int = 0  # ms; 0 = until replaced


@dataclass
class FolderWarningEventData(EventData):
    folder_kind: str
    path: str
    message: str


@dataclass
class FiltersAppliedEventData(EventData):
    visible_count: int
    passes_folder_filter: int
    total: int


@dataclass
class ViewModeEventData(EventData):
    grid_mode: bool


@dataclass
class SelectionChangedEventData(EventData):
    asset_id: Optional[int]


@dataclass
class CatalogLoadedEventData(EventData):
    asset_count: int
    cancelled: bool = False


class EventSystem:
    def __init__(self):
        self._subscribers: Dict[EventType, List[Callable]] = {}
        self._event_history: deque[EventData] = deque(maxlen=200)
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType, callback: Callable[[EventData], None]):
        with self._lock:
            if event_type not in self._subscribers:
                self._subscribers[event_type] = []
            self._subscribers[event_type].append(callback)
        logging.debug(f"Subscribed to {event_type.value}: {getattr(callback, '__name__', callback)}")

    def unsubscribe(self, event_type: EventType, callback: Callable[[EventData], None]):
        with self._lock:
            if event_type in self._subscribers:
                try:
                    self._subscribers[event_type].remove(callback)
                    logging.debug(f"Unsubscribed from {event_type.value}: {getattr(callback, '__name__', callback)}")
                except ValueError:
                    logging.warning(f"Callback not found for {event_type.value}")

    def publish(self, event_data: EventData):
        with self._lock:
            event_type = event_data.event_type
            self._event_history.append(event_data)
            # Snapshot the subscriber list so callbacks can safely call subscribe/unsubscribe.
            callbacks = list(self._subscribers.get(event_type, []))

        for callback in callbacks:
            try:
                callback(event_data)
            except Exception as e:
                # why: isolate handler crashes so one broken subscriber can't block others
                logging.error(f"Error in event callback for {event_type.value}: {e}", exc_info=True)

        logging.debug("Published event: %s from %s", event_type.value, event_data.source)

    def get_event_history(self, event_type: Optional[EventType] = None) -> List[EventData]:
        if event_type:
            return [e for e in self._event_history if e.event_type == event_type]
        return list(self._event_history)

    def clear_history(self):
        self._event_history.clear()


event_system = EventSystem()
