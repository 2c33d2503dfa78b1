"""
ETL Fingerprinting Utilities

The input file hash is recorded on the RunContext so two report runs
can be tied to the same source snapshot.
"""
import hashlib


def compute_file_sha256(filepath: str, chunk_size: int = 1 << 20) -> str:
    """
    Compute SHA256 hash of entire file, reading it in chunks.

    Args:
        filepath: Path to file
        chunk_size: Bytes per read

    Returns:
        64-character hex SHA256 hash
    """
    sha256 = hashlib.sha256()
    with open(filepath, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            sha256.update(chunk)
    return sha256.hexdigest()
