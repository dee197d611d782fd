#!/usr/bin/env python3
"""
Evaluation runner for the static Huffman codec.

This evaluation script:
- Runs pytest on the tests/ folder and collects individual test outcomes
- Compresses a few sample corpora and records sizes and compression ratios
- Generates a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output PATH]
"""
import os
import sys
import json
import uuid
import platform
import subprocess
from collections import Counter
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from bitstream import padding_length  # noqa: E402
from huffman_service import HuffmanService  # noqa: E402

SAMPLES = {
    "single_symbol": "a" * 4096,
    "skewed": "a" * 3000 + "b" * 700 + "c" * 250 + "d" * 46,
    "uniform": "".join(chr(32 + i % 95) for i in range(4096)),
    "english": ("It was the best of times, it was the worst of times, it was the age of "
                "wisdom, it was the age of foolishness, it was the epoch of belief.\n") * 30,
}


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    commands = {
        "git_commit": ["git", "rev-parse", "HEAD"],
        "git_branch": ["git", "rev-parse", "--abbrev-ref", "HEAD"],
    }
    for key, cmd in commands.items():
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=5)
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value
    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def parse_pytest_verbose_output(output):
    """Parse pytest verbose output to extract test results."""
    tests = []
    status_words = {" PASSED": "passed", " FAILED": "failed", " ERROR": "error", " SKIPPED": "skipped"}

    for line in output.split('\n'):
        line_stripped = line.strip()
        # Match lines like: tests/test_huffman_core.py::test_concrete_tree PASSED
        if '::' not in line_stripped:
            continue
        for status_word, outcome in status_words.items():
            if status_word in line_stripped:
                nodeid = line_stripped.split(status_word)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break

    return tests


def summarize(tests):
    summary = {"total": len(tests)}
    for outcome in ("passed", "failed", "error", "skipped"):
        summary[outcome] = sum(1 for t in tests if t["outcome"] == outcome)
    return summary


def run_pytest(tests_dir, timeout=300):
    """Run pytest on the tests/ folder with src/ on PYTHONPATH."""
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")

    cmd = [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"]
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("❌ Test execution timed out")
        return {"success": False, "exit_code": -1, "tests": [],
                "summary": {"error": "Test execution timed out"}, "stdout": "", "stderr": ""}

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize(tests)
    print(f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
          f"{summary['error']} errors, {summary['skipped']} skipped (total: {summary['total']})")

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def measure_compression(samples):
    """Compress each sample, check the round trip and record sizes."""
    print(f"\n{'=' * 60}")
    print("COMPRESSION RATIOS")
    print(f"{'=' * 60}")

    results = {}
    for name, text in samples.items():
        service = HuffmanService()
        packed = service.compress(text)
        restored = service.decompress(packed)
        bits = service.encoded_length(Counter(text.encode("ascii")))
        results[name] = {
            "input_bytes": len(text),
            "encoded_bits": bits,
            "padding_bits": padding_length(bits),
            "packed_bytes": len(packed),
            "ratio": round(len(packed) / len(text), 4) if text else None,
            "roundtrip_ok": restored == text.encode("ascii"),
        }
        print(f"  {name}: {len(text)} -> {len(packed)} bytes "
              f"(ratio {results[name]['ratio']}, roundtrip {'ok' if results[name]['roundtrip_ok'] else 'FAILED'})")
    return results


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the Huffman codec evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )
    parser.add_argument("--skip-tests", action="store_true", help="only measure compression")
    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()
    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    tests = None if args.skip_tests else run_pytest(PROJECT_ROOT / "tests")
    compression = measure_compression(SAMPLES)

    success = (tests is None or tests["success"]) and all(r["roundtrip_ok"] for r in compression.values())
    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "environment": get_environment_info(),
        "results": {"tests": tests, "compression": compression},
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
