import importlib.util
import os

EVALUATION = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'evaluation', 'evaluation.py'))

_spec = importlib.util.spec_from_file_location("huffman_evaluation", EVALUATION)
evaluation = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(evaluation)


def test_parse_pytest_verbose_output():
	output = "\n".join([
		"tests/test_bitstream.py::test_pack_known_values PASSED                  [ 10%]",
		"tests/test_bitstream.py::test_unpack_empty FAILED                       [ 20%]",
		"tests/test_cli.py::test_codes_mode_prints_table SKIPPED (no tty)        [ 30%]",
		"collected 3 items",
	])
	tests = evaluation.parse_pytest_verbose_output(output)
	assert [t["outcome"] for t in tests] == ["passed", "failed", "skipped"]
	assert tests[0]["name"] == "test_pack_known_values"
	assert evaluation.summarize(tests) == {"total": 3, "passed": 1, "failed": 1, "error": 0, "skipped": 1}


def test_measure_compression_roundtrips():
	results = evaluation.measure_compression({"skewed": "a" * 90 + "b" * 9 + "c"})
	skewed = results["skewed"]
	assert skewed["roundtrip_ok"]
	assert skewed["encoded_bits"] == 90 + 9 * 2 + 2
	assert skewed["packed_bytes"] == (skewed["encoded_bits"] + skewed["padding_bits"]) // 8


def test_main_writes_report(tmp_path):
	report = tmp_path / "report.json"
	assert evaluation.main(["--skip-tests", "--output", str(report)]) == 0
	assert report.exists()
