# ABOUTME: Service layer for subscriber and configuration management.
# ABOUTME: Wraps repositories with validation, grouping and logging.

from translated_newsletter.services.configuration_service import (
    ConfigurationService,
    load_configuration,
)
from translated_newsletter.services.subscriber_service import (
    DatabaseSubscriberStore,
    SubscriberService,
    group_users,
)

__all__ = [
    "ConfigurationService",
    "DatabaseSubscriberStore",
    "SubscriberService",
    "group_users",
    "load_configuration",
]
