# filename: huffman_settings.py

from decouple import config

# 7-bit ASCII by default; symbols at or above this value are rejected
ALPHABET_SIZE = config('HUFFMAN_ALPHABET_SIZE', default=128, cast=int)

# Block size used when scanning files for frequency analysis
READ_BLOCK = config('HUFFMAN_READ_BLOCK', default=4096, cast=int)

LOG_LEVEL = config('HUFFMAN_LOG_LEVEL', default='WARNING')
