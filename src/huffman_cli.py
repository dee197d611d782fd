# filename: huffman_cli.py

import argparse
import logging
import sys

import huffman_settings
from huffman_core import HuffmanError
from huffman_service import HuffmanService, load_frequencies, save_frequencies

logger = logging.getLogger(__name__)


def _printable(symbol):
    char = chr(symbol)
    return repr(char) if char.isprintable() else f"0x{symbol:02x}"


def cmd_freqs(service, args):
    frequencies = service.make_sorted_list_from_file(args.input_file)
    if not frequencies:
        return 1
    return 0 if save_frequencies(args.output_file, frequencies) else 1


def cmd_codes(service, args):
    frequencies = service.make_sorted_list_from_file(args.input_file)
    if not frequencies:
        return 1
    service.load(frequencies)
    for symbol, code in enumerate(service.codes):
        if code is not None:
            print(f"{_printable(symbol):>6} {code}")
    return 0


def cmd_encode(service, args):
    frequencies = service.make_sorted_list_from_file(args.input_file)
    if not frequencies:
        return 1
    service.load(frequencies)
    if args.freqs_out is not None and not save_frequencies(args.freqs_out, frequencies):
        return 1
    return 0 if service.encode_file(service.codes, args.input_file, args.output_file) else 1


def cmd_decode(service, args):
    if args.freqs is not None:
        frequencies = load_frequencies(args.freqs)
    else:
        frequencies = service.make_sorted_list_from_file(args.reference)
    if not frequencies:
        return 1
    root = service.load(frequencies)
    return 0 if service.decode_file(args.input_file, root, args.output_file) else 1


def build_parser():
    parser = argparse.ArgumentParser(prog="huffman", description="Static Huffman encoder/decoder")
    parser.add_argument("--alphabet-size", type=int, default=None,
                        help=f"number of symbols in the alphabet (default: {huffman_settings.ALPHABET_SIZE})")
    sub = parser.add_subparsers(dest="mode", required=True)

    p = sub.add_parser("freqs", help="write the sorted frequency list of a file as JSON")
    p.add_argument("input_file")
    p.add_argument("output_file")
    p.set_defaults(func=cmd_freqs)

    p = sub.add_parser("codes", help="print the code table built from a file")
    p.add_argument("input_file")
    p.set_defaults(func=cmd_codes)

    p = sub.add_parser("encode", help="encode a file into a packed bitstream")
    p.add_argument("input_file")
    p.add_argument("output_file")
    p.add_argument("--freqs-out", help="also save the frequency list needed for decoding")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("decode", help="decode a packed bitstream")
    p.add_argument("input_file")
    p.add_argument("output_file")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--freqs", help="frequency list written by 'freqs' or 'encode --freqs-out'")
    source.add_argument("--reference", help="original text to rebuild the tree from")
    p.set_defaults(func=cmd_decode)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=huffman_settings.LOG_LEVEL.upper(),
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        service = HuffmanService(args.alphabet_size)
        return args.func(service, args)
    except HuffmanError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
