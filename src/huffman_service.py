# filename: huffman_service.py

import json
import logging
import os
import tempfile
from collections import Counter

import huffman_settings
from bitstream import pack_bits, unpack_bits
from huffman_core import HuffmanError, HuffmanLogic, SymbolFrequency, as_symbols, sort_frequencies

logger = logging.getLogger(__name__)


def save_frequencies(path, frequencies):
    """Write a frequency list as JSON ``[[symbol, probability], ...]``."""
    payload = json.dumps([[entry.symbol, entry.probability] for entry in frequencies])
    return _write_destination(path, [payload.encode("ascii")])


def load_frequencies(path):
    try:
        with open(path) as f:
            pairs = json.load(f)
        return sort_frequencies([SymbolFrequency(symbol, float(probability))
                                 for symbol, probability in pairs])
    except (OSError, ValueError, TypeError) as e:
        logger.error("cannot read source %s: %s", path, e)
        return []


def _read_source(path):
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        logger.error("cannot read source %s: %s", path, e)
        return None


def _current_umask():
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _write_destination(path, chunks):
    """Write byte chunks to ``path`` through a temporary file in the same directory.

    The destination only appears once every chunk has been written, so a
    failure never leaves a partial file behind.
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    done = False
    try:
        with tempfile.NamedTemporaryFile("wb", dir=directory, delete=False) as tmp:
            tmp_path = tmp.name
            for chunk in chunks:
                tmp.write(chunk)
        # temporary files are owner-only; give the result the usual open() mode
        os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
        done = True
    except OSError as e:
        logger.error("cannot write destination %s: %s", path, e)
    finally:
        if not done and tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)
    return done


class HuffmanService:
    def __init__(self, alphabet_size=None):
        self.logic = HuffmanLogic(alphabet_size)
        self.frequencies = []
        self.tree = None
        self.codes = self.logic.generate_codes(None)

    def load(self, frequencies):
        """Rebuild tree and code table from a sorted frequency list."""
        frequencies = list(frequencies)
        for entry in frequencies:
            self.logic.check_symbol(entry.symbol)
        self.frequencies = frequencies
        self.tree = self.logic.build_tree(self.frequencies)
        self.codes = self.logic.generate_codes(self.tree)
        return self.tree

    def encode_bits(self, data, codes=None):
        if codes is None:
            codes = self.codes
        parts = []
        for symbol in as_symbols(data):
            self.logic.check_symbol(symbol)
            code = codes[symbol]
            if code is None:
                raise HuffmanError(f"no code for symbol {symbol}")
            parts.append(code)
        return "".join(parts)

    def encoded_length(self, counts, codes=None):
        """Total number of bits needed to encode ``counts`` (symbol -> occurrences)."""
        if codes is None:
            codes = self.codes
        return sum(count * len(codes[symbol]) for symbol, count in counts.items() if count)

    def compress(self, data):
        self.load(self.logic.make_sorted_list(data))
        return pack_bits(self.encode_bits(data))

    def decompress(self, packed, frequencies=None):
        if frequencies is not None:
            self.load(frequencies)
        bits = unpack_bits(packed)
        return bytes(self.logic.walk(bits, self.tree))

    # ----- file-level operations -----
    def make_sorted_list_from_file(self, path):
        counts = Counter()
        try:
            with open(path, "rb") as f:
                block = f.read(huffman_settings.READ_BLOCK)
                while block:
                    self.logic.count_symbols(block, counts)
                    block = f.read(huffman_settings.READ_BLOCK)
        except OSError as e:
            logger.error("cannot read source %s: %s", path, e)
            return []
        return self.logic.sorted_list_from_counts(counts)

    def write_bit_string(self, path, bits):
        # Packing raises on a bad digit before the destination is touched
        packed = pack_bits(bits)
        return _write_destination(path, [packed])

    def read_bit_string(self, path):
        data = _read_source(path)
        if data is None:
            return ""
        return unpack_bits(data)

    def encode_file(self, codes, text_path, encoded_path):
        data = _read_source(text_path)
        if data is None:
            return False
        return self.write_bit_string(encoded_path, self.encode_bits(data, codes))

    def decode_file(self, encoded_path, root, decoded_path):
        data = _read_source(encoded_path)
        if data is None:
            return False
        bits = unpack_bits(data)
        symbols = self.logic.walk(bits, root)
        return _write_destination(decoded_path, (bytes((symbol,)) for symbol in symbols))
