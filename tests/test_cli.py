import os
import sys

SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
	sys.path.insert(0, SRC)

import huffman_cli  # noqa: E402

TEXT = b"the quick brown fox jumps over the lazy dog\n" * 10


def test_encode_then_decode_with_saved_frequencies(tmp_path):
	src = tmp_path / "input.txt"
	src.write_bytes(TEXT)
	encoded = tmp_path / "input.huf"
	freqs = tmp_path / "freqs.json"
	decoded = tmp_path / "output.txt"

	assert huffman_cli.main(["encode", str(src), str(encoded), "--freqs-out", str(freqs)]) == 0
	assert freqs.exists()
	assert huffman_cli.main(["decode", str(encoded), str(decoded), "--freqs", str(freqs)]) == 0
	assert decoded.read_bytes() == TEXT


def test_decode_with_reference_text(tmp_path):
	src = tmp_path / "input.txt"
	src.write_bytes(b"aaaa")
	encoded = tmp_path / "input.huf"
	decoded = tmp_path / "output.txt"

	assert huffman_cli.main(["encode", str(src), str(encoded)]) == 0
	assert encoded.read_bytes() == b"\x1f"
	assert huffman_cli.main(["decode", str(encoded), str(decoded), "--reference", str(src)]) == 0
	assert decoded.read_bytes() == b"aaaa"


def test_freqs_mode_writes_json(tmp_path):
	src = tmp_path / "input.txt"
	src.write_bytes(b"aaaaabbcd")
	out = tmp_path / "freqs.json"
	assert huffman_cli.main(["freqs", str(src), str(out)]) == 0
	assert out.read_text().startswith("[[99, ")


def test_codes_mode_prints_table(tmp_path, capsys):
	src = tmp_path / "input.txt"
	src.write_bytes(b"aaaaabbcd")
	assert huffman_cli.main(["codes", str(src)]) == 0
	lines = capsys.readouterr().out.splitlines()
	assert [line.split() for line in lines] == [["'a'", "1"], ["'b'", "00"], ["'c'", "010"], ["'d'", "011"]]


def test_missing_input_fails(tmp_path):
	assert huffman_cli.main(["encode", str(tmp_path / "nope.txt"), str(tmp_path / "out.huf")]) == 1
	assert not (tmp_path / "out.huf").exists()


def test_out_of_alphabet_input_fails(tmp_path):
	src = tmp_path / "input.bin"
	src.write_bytes(bytes([65, 250]))
	assert huffman_cli.main(["encode", str(src), str(tmp_path / "out.huf")]) == 1
	assert huffman_cli.main(["--alphabet-size", "256", "encode", str(src), str(tmp_path / "out.huf")]) == 0


def test_decode_with_malformed_frequency_file_fails(tmp_path):
	src = tmp_path / "input.txt"
	src.write_bytes(b"abc")
	encoded = tmp_path / "input.huf"
	assert huffman_cli.main(["encode", str(src), str(encoded)]) == 0

	bad = tmp_path / "bad.json"
	bad.write_text("not json")
	assert huffman_cli.main(["decode", str(encoded), str(tmp_path / "out.txt"), "--freqs", str(bad)]) == 1

	bad.write_text("[[-1, 0.5], [97, 0.5]]")
	assert huffman_cli.main(["decode", str(encoded), str(tmp_path / "out.txt"), "--freqs", str(bad)]) == 1
	assert not (tmp_path / "out.txt").exists()


def test_oversized_alphabet_fails(tmp_path):
	src = tmp_path / "input.txt"
	src.write_bytes(b"abc")
	assert huffman_cli.main(["--alphabet-size", "300", "codes", str(src)]) == 1
