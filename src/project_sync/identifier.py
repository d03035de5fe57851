from __future__ import annotations

import hashlib
import uuid


def project_guid(name: str) -> str:
    """Deterministic GUID for a unit name.

    MD5 over the UTF-8 name, read with the byte layout of .NET's ``new Guid(byte[])`` so
    the value matches what the editor-side generator writes for the same assembly.
    """
    digest = hashlib.md5(name.encode("utf-8")).digest()
    return str(uuid.UUID(bytes_le=digest)).upper()


def braced_guid(name: str) -> str:
    return "{" + project_guid(name) + "}"
