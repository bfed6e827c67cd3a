# Logging event codes
UNSUPPORTED_ROUTE = 'UNSUPPORTED_ROUTE'
LINKS_LISTED = 'LINKS_LISTED'
LINK_FETCHED = 'LINK_FETCHED'
LINK_DELETED = 'LINK_DELETED'
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
INVALID_REQUEST = 'INVALID_REQUEST'
MANAGEMENT_FAILED = 'MANAGEMENT_FAILED'
