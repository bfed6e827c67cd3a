from shortlinks.services.resolver import LinkResolver
from shortlinks.services.management import LinkManager
from shortlinks.services.analytics import LinkAnalytics
from shortlinks.services.sweeper import RetentionSweeper


__all__ = [
    'LinkResolver',
    'LinkManager',
    'LinkAnalytics',
    'RetentionSweeper',
]
