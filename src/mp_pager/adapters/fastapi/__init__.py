"""FastAPI adapter – PagerRequest dependency and error mapping."""
from mp_pager.adapters.fastapi.deps import FastAPIPagerRequestDep, pager_request_dependency
from mp_pager.adapters.fastapi.exception_mapper import FastAPIExceptionMapper

__all__ = ["FastAPIExceptionMapper", "FastAPIPagerRequestDep", "pager_request_dependency"]
