#!/usr/bin/env python3
# Read 1 MiB from the a file at a time
BLOCK_SIZE = (1 << 20)

def filepath_bytes(filepath, block_size = BLOCK_SIZE):
    """Generator function for reading bytes from a filepath in a for loop.

    Params:
        filepath   - file path to read from
        block_size - the maximum number of bytes to read from the file at a time

    Returns:
        The iterator for reading bytes from a file.
    """
    with open(filepath, 'rb') as file:
        yield from file_bytes(file, block_size)


def file_bytes(file, block_size = BLOCK_SIZE):
    """Generator function for reading bytes from a file object in a for loop.

    Params:
        file       - file object to read from
        block_size - the maximum number of bytes to read from the file at a time

    Returns:
        The iterator for reading bytes from a file.
    """
    buffer = bytearray(block_size)

    while True:
        read_size = file.readinto(buffer)

        # Copy out the chunk so the buffer can be reused for the next read
        yield from bytes(buffer[:read_size])

        if read_size != block_size:
            break


def read_bytes(filepath) -> bytes:
    """Read the whole contents of a file.

    Params:
        filepath - file path to read from

    Returns:
        The file contents.
    """
    with open(filepath, 'rb') as file:
        return file.read()


def write_bytes(filepath, data: bytes):
    """Replace the contents of a file with the given data.

    Params:
        filepath - file path to write to
        data     - bytes to write
    """
    with open(filepath, 'wb') as file:
        file.write(data)


def ratio(old_size: int, new_size: int) -> float:
    """Return the compression ratio of a transform from old_size to new_size.

    An empty output only comes from an empty input, which counts as 1:1.
    """
    if new_size == 0:
        return 1.0

    return old_size / new_size


def size_fmt(size: int, scale: int = 1024) -> str:
    """Format a size into a more human readable format.

    Params:
        size  - integer number to scale
        scale - the scaling factor between units

    Returns:
        The formatted size string.
    """
    for unit in ['', 'K', 'M', 'G', 'T', 'P', 'E', 'Z']:
        if abs(size) < scale:
            return '%3.1f %s' % (size, unit)

        size /= scale

    return '%.1f Y' % (size)
