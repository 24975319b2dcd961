# config.py
# Environment-driven defaults. Values may come from a local .env file.
# Command-line flags override everything here.
#
# Numeric settings stay as raw strings; BenchConfig validates them so a bad
# value is reported by the entry point instead of failing at import.

import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("MERKLE_LOG_LEVEL", "WARNING")

BENCH_CSV = os.getenv("MERKLE_BENCH_CSV", "output_merkle.csv")
BENCH_N = os.getenv("MERKLE_BENCH_N", "16")
BENCH_RUNS = os.getenv("MERKLE_BENCH_RUNS", "5")
BENCH_SEED = os.getenv("MERKLE_BENCH_SEED", "42")
