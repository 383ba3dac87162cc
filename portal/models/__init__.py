# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import portal_setting

from .portal_setting import PortalSetting

__all__ = [
    "PortalSetting",
]
