#!/usr/bin/env python3
import os
import time
import argparse
import itertools

from shared import utility as util

VERBOSITY = 0

# Process exit codes returned by codec_main
EXIT_OK = 0
EXIT_ENCODED = 1
EXIT_NOT_ENCODED = 2
EXIT_IO = 3
EXIT_MALFORMED = 4
EXIT_MISMATCH = 5


class CodecError(Exception):
    """Raised by a decoder when its input is not a valid encoding."""


def codec_parser(codec_name):
    """Build the argument parser shared by every codec interface.

    Params:
        codec_name - string of the codec being used

    Returns:
        An argparse parser that codecs may extend with their own options.
    """
    parser = argparse.ArgumentParser(prog=codec_name.lower())
    parser.add_argument('infile', metavar='INFILE', nargs='+', default=[], help='file(s) to encode or decode')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('-d', '--decode', action='store_true', default=False, help='decode file(s) in list')
    mode.add_argument('-t', '--test', action='store_true', default=False, help='encode file(s), report statistics and verify the round trip')
    parser.add_argument('-c', '--clobber', action='store_true', default=False, help='remove original file(s) when finished')
    parser.add_argument('-o', '--outfile', metavar='OUTFILE', nargs='+', default=[], help='rename output file to %(metavar)s')
    parser.add_argument('-v', '--verbosity', action='count', default=0, help='increase output verbosity')
    return parser


def codec_main(codec_name, codec_extension, encoder, decoder, checker=None, args=None):
    """Common handling and argument parsing for a codec interface.

    Params:
        codec_name - string of the codec being used
        codec_extension - the filename extension to use for this codec
        encoder - function that will encode a input file to a output file
        decoder - function that will decode a input file to a output file
        checker - function that will encode a input file, report on it and
                  return a result with 'saved' and 'verified' flags
        args - already parsed arguments (parsed from sys.argv when omitted)

    Returns:
        The process exit code.
    """
    global VERBOSITY

    if args is None:
        args = codec_parser(codec_name).parse_args()

    VERBOSITY = args.verbosity

    # Loop through file list
    for (inpath, outpath) in itertools.zip_longest(args.infile, args.outfile):
        if inpath is None or not os.path.isfile(inpath):
            continue

        if outpath is None:
            outpath = inpath

        # Save start time and starting file size
        old_size = os.path.getsize(inpath)
        timediff = time.time()

        try:
            # Encode file using codec encoder
            if not args.decode:
                if inpath.endswith(codec_extension):
                    print(f'{codec_name} error: attempting to encode already encoded file')
                    return EXIT_ENCODED

                if not outpath.endswith(codec_extension):
                    outpath += codec_extension

                if args.test and checker is not None:
                    report = checker(inpath, outpath)
                    if not report.verified:
                        print(f'{codec_name} error: {inpath} does not survive the round trip')
                        return EXIT_MISMATCH

                    # Nothing else to report when the checker chose not to save
                    if not report.saved:
                        continue

                else:
                    encoder(inpath, outpath)

            # Decode file using codec decoder
            else:
                if not inpath.endswith(codec_extension):
                    print(f'{codec_name} error: attempting to decode non \'{codec_extension}\' file')
                    return EXIT_NOT_ENCODED

                if outpath == inpath:
                    outpath = outpath.rsplit('.', 1)[0]

                decoder(inpath, outpath)

        except CodecError as e:
            print(f'{codec_name} error: {inpath}: {e}')
            return EXIT_MALFORMED

        except OSError as e:
            print(f'{codec_name} error: {e}')
            return EXIT_IO

        # Remove old file if necessary
        if args.clobber and not args.test:
            os.remove(inpath)

        # Calculate elapsed time and new file size
        timediff = time.time() - timediff
        new_size = os.path.getsize(outpath)

        if VERBOSITY > 0:
            out_str = f'{inpath} {old_size}B -> <{codec_name}> -> {outpath} {new_size}B'

            if VERBOSITY > 1:
                r = util.ratio(max(old_size, new_size), min(old_size, new_size))

                out_str += ' (%.0f:1) [%.1f%% delta]' % (r, (1 - (1.0 / r)) * 100)
                out_str += ' [%.2f s (%sB/s)]' % (timediff, util.size_fmt(max(old_size, new_size) / max(timediff, 1e-9)))

            print(out_str)

    return EXIT_OK
