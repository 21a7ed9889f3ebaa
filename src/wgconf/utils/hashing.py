"""
Hashing utilities for content identities.
All hashing is deterministic and uses SHA-256.
"""

import hashlib

from ..config import HASH_ALGORITHM, IDENTITY_LENGTH


def hash_bytes(data: bytes) -> str:
    """
    Hash bytes using SHA-256.
    
    Args:
        data: Raw bytes to hash
        
    Returns:
        Hex-encoded hash string (64 characters)
    """
    if not isinstance(data, bytes):
        raise TypeError(f"Expected bytes, got {type(data)}")
    
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(data)
    return hasher.hexdigest()


def hash_string(data: str) -> str:
    """
    Hash a string using SHA-256.
    
    Args:
        data: String to hash (will be UTF-8 encoded)
        
    Returns:
        Hex-encoded hash string (64 characters)
    """
    if not isinstance(data, str):
        raise TypeError(f"Expected str, got {type(data)}")
    
    return hash_bytes(data.encode('utf-8'))


def verify_hash(data: str, expected_hash: str) -> bool:
    """
    Verify that text matches the expected identity hash.
    
    Args:
        data: Text to hash
        expected_hash: Expected hex-encoded hash
        
    Returns:
        True if hashes match, False otherwise
    """
    if not isinstance(expected_hash, str):
        raise TypeError(f"Expected str for hash, got {type(expected_hash)}")
    
    if len(expected_hash) != IDENTITY_LENGTH:
        raise ValueError(
            f"Invalid hash length: {len(expected_hash)}, expected {IDENTITY_LENGTH}"
        )
    
    return hash_string(data) == expected_hash
