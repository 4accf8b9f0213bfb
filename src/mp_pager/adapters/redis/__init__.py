"""Redis adapter – sticky pager session store."""
from mp_pager.adapters.redis.session import RedisSessionStore

__all__ = ["RedisSessionStore"]
