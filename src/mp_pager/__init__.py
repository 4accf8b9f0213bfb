"""
mp_pager – request-scoped pagination state for tabular listings.

Import path convention::

    from mp_pager.application.pagination import Pager, PagerRequest
    from mp_pager.application.pagination import PageWindowPlanner, StateCodec
    from mp_pager.kernel.errors import SortNotAllowedError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
