"""Detect whether a handler runs under `sam local` rather than in AWS Lambda"""

import os

from shortlinks.constants import ENV


def running_locally() -> bool:
    """True for APP_ENV=local, or when SAM CLI sets AWS_SAM_LOCAL=true

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> os.environ['AWS_SAM_LOCAL'] = 'true'
        >>> running_locally()
        True
    """
    if os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true':
        return True
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local'
