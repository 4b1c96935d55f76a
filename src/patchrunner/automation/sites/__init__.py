from .base_site import AdminSite
from .joomla import JoomlaAdmin

__all__ = ['AdminSite', 'JoomlaAdmin']
