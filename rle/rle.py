"""Pipe delimited run-length encoding codec.

Run as `python -m rle` or through the `rle` console script.
"""
import sys
import argparse
import functools
from collections import namedtuple

from shared import codec
from shared import utility as util

# Delimiter on both sides of an encoded run token
SENTINEL = ord('|')

# Symbols whose long runs are replaced by tokens
TRIGGERS = b'f0'

# Runs must be strictly longer than this to be encoded
THRESHOLD = 4

EXTENSION = '.rle'

Report = namedtuple('Report', ['original_size', 'compressed_size', 'ratio', 'saved', 'verified'])


class MalformedEncoding(codec.CodecError):
    """Raised when encoded data contains a broken run token."""


def check_config(triggers, threshold):
    """Validate a trigger set and threshold.

    Params:
        triggers  - bytes of symbols eligible for run tokens
        threshold - run length that must be exceeded for a token

    Returns:
        The trigger set as a frozenset of byte values.
    """
    triggers = frozenset(triggers)

    if SENTINEL in triggers:
        raise ValueError('trigger set may not contain the sentinel %r' % chr(SENTINEL))

    if threshold < 0:
        raise ValueError('threshold may not be negative: %d' % threshold)

    return triggers


def encode(data, triggers=TRIGGERS, threshold=THRESHOLD) -> bytes:
    """Encode a sequence of bytes using the RLE codec.

    Runs of a trigger symbol longer than threshold become |<symbol><length>|,
    every other run is copied through as is.

    Params:
        data      - iterable of byte values to encode
        triggers  - bytes of symbols eligible for run tokens
        threshold - run length that must be exceeded for a token

    Returns:
        The encoded bytes.
    """
    triggers = check_config(triggers, threshold)
    encoded = bytearray()

    def emit(symbol, count):
        if symbol in triggers and count > threshold:
            encoded.extend(b'%c%c%d%c' % (SENTINEL, symbol, count, SENTINEL))
        else:
            encoded.extend(bytes([symbol]) * count)

    # Initialize sequence tracker and counter
    start = None
    count = 0

    # Scan input for sequences of repeated symbols
    for symbol in data:
        if symbol == start:
            count += 1
        else:
            if count > 0:
                emit(start, count)

            (start, count) = (symbol, 1)

    # Output final sequence
    if count > 0:
        emit(start, count)

    return bytes(encoded)


def decode(data: bytes) -> bytes:
    """Decode bytes produced by encode.

    Params:
        data - encoded bytes

    Returns:
        The decoded bytes.
    """
    decoded = bytearray()
    size = len(data)
    i = 0

    while i < size:
        if data[i] != SENTINEL:
            decoded.append(data[i])
            i += 1
            continue

        # Token layout: sentinel, symbol, decimal length, sentinel
        if i + 1 >= size:
            raise MalformedEncoding('missing run symbol at offset %d' % i)

        end = data.find(SENTINEL, i + 2)
        if end < 0:
            raise MalformedEncoding('unterminated run token at offset %d' % i)

        length = data[i + 2:end]
        if not length.isdigit():
            raise MalformedEncoding('bad run length %r at offset %d' % (bytes(length), i))

        try:
            count = int(length)
            if count > sys.maxsize:
                raise OverflowError(count)

            decoded.extend(data[i + 1:i + 2] * count)
        except (ValueError, OverflowError, MemoryError):
            raise MalformedEncoding('bad run length %r at offset %d' % (bytes(length), i)) from None

        i = end + 1

    return bytes(decoded)


def rle_encode(inpath, outpath, triggers=TRIGGERS, threshold=THRESHOLD):
    """
    Encode the input file using the RLE codec.

    Params:
        inpath  - path to input file to read and encode
        outpath - path to output file to write encoded data
    """
    util.write_bytes(outpath, encode(util.filepath_bytes(inpath), triggers, threshold))


def rle_decode(inpath, outpath):
    """
    Decode the input file using the RLE codec.

    Params:
        infile  - path to input file to read and decode
        outfile - path to output file to write decoded data
    """
    util.write_bytes(outpath, decode(util.read_bytes(inpath)))


def rle_check(inpath, outpath, triggers=TRIGGERS, threshold=THRESHOLD, strip=False):
    """
    Encode the input file, print compression statistics, save the encoding
    when it is smaller than the input and verify that it decodes back.

    Params:
        inpath    - path to input file to read and encode
        outpath   - path to write encoded data to when it compresses
        triggers  - bytes of symbols eligible for run tokens
        threshold - run length that must be exceeded for a token
        strip     - trim surrounding whitespace from the input first

    Returns:
        A Report of the sizes, the ratio and the outcome.
    """
    data = util.read_bytes(inpath)
    if strip:
        data = data.strip()

    encoded = encode(data, triggers, threshold)

    if codec.VERBOSITY > 1:
        print('Original Data:')
        print(data.decode(errors='replace'))
        print('\nCompressed Data:')
        print(encoded.decode(errors='replace'))
        print()

    r = util.ratio(len(data), len(encoded))

    print('Original Size: %d bytes' % len(data))
    print('Compressed Size: %d bytes' % len(encoded))
    print('Compression Ratio: %.2f' % r)

    saved = len(encoded) < len(data)
    if saved:
        util.write_bytes(outpath, encoded)
        print(f'Compressed data saved to {outpath}')
    else:
        print('Compression ratio is not better than 1. Compressed data not saved.')

    decoded = decode(encoded)

    if codec.VERBOSITY > 1:
        print('\nDecompressed Data:')
        print(decoded.decode(errors='replace'))
        print()

    verified = decoded == data
    if verified:
        print('Decompression successful, original data matches decompressed data.')
    else:
        print('Decompression failed, original data does not match decompressed data.')

    return Report(len(data), len(encoded), r, saved, verified)


def trigger_set(value):
    """argparse type for --triggers."""
    try:
        triggers = value.encode('ascii')
    except UnicodeEncodeError:
        triggers = None

    if triggers is None or SENTINEL in triggers:
        raise argparse.ArgumentTypeError(f'invalid trigger set: {value!r}')

    return triggers


def threshold_count(value):
    """argparse type for --threshold."""
    if not value.isdigit():
        raise argparse.ArgumentTypeError(f'invalid threshold: {value!r}')

    return int(value)


def main(argv=None):
    parser = codec.codec_parser('RLE')
    parser.add_argument('--triggers', metavar='CHARS', type=trigger_set, default=TRIGGERS.decode(), help='symbols whose long runs are encoded (default: %(default)s)')
    parser.add_argument('--threshold', metavar='N', type=threshold_count, default=THRESHOLD, help='encode runs longer than %(metavar)s (default: %(default)s)')
    parser.add_argument('-s', '--strip', action='store_true', default=False, help='trim surrounding whitespace before testing')
    args = parser.parse_args(argv)

    encoder = functools.partial(rle_encode, triggers=args.triggers, threshold=args.threshold)
    checker = functools.partial(rle_check, triggers=args.triggers, threshold=args.threshold, strip=args.strip)

    return codec.codec_main('RLE', EXTENSION, encoder, rle_decode, checker, args)
