from shortlinks.dao.base.link_base_dao import LinkBaseDAO
from shortlinks.dao.base.click_event_base_dao import ClickEventBaseDAO


__all__ = [
    'LinkBaseDAO',
    'ClickEventBaseDAO',
]
