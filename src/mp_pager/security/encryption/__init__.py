"""Security encryption – authenticated token sealing."""
from mp_pager.security.encryption.fernet import FernetTokenSealer

__all__ = ["FernetTokenSealer"]
