"""Checksums in the quoted hex form used for download verification."""

import hashlib

_ALGORITHMS = {
    "md5": hashlib.md5,
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


def hex_value_for_bytes(algorithm, content):
    """Return the digest of ``content`` as lower-case hex wrapped in double quotes.

    Supported algorithms are md5, sha1 and sha256; anything else raises ValueError.
    """
    try:
        factory = _ALGORITHMS[algorithm]
    except KeyError:
        raise ValueError(f"{algorithm} not valid") from None
    return f'"{factory(bytes(content)).hexdigest()}"'