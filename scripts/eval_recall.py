"""Offline evaluation of fitmemory recall quality.

Seeds a memory log with dated workouts, runs natural-language questions
against ground truth, and reports normalized metrics so ranking tweaks
are directly comparable.

Metrics:
    - Top-1 Accuracy: Is the best result correct?
    - MRR (Mean Reciprocal Rank): 1/rank of first correct result (higher = better)
    - P@3 (Precision at 3): Fraction of top-3 results that are relevant

Usage:
    uv run python scripts/eval_recall.py
    uv run python scripts/eval_recall.py --quiet
    uv run python scripts/eval_recall.py --tolerance 0.2 --keyword-bonus 0.5
    uv run --extra postgres python scripts/eval_recall.py --db postgresql+psycopg://...

No API keys needed; summarization is not evaluated here.
"""
import argparse
import time
from datetime import datetime, timedelta, timezone

from fitmemory import MemoryEngine, RankingConfig, SQLMemoryLog


# ── Seed data: (text, days ago) ───────────────────────────────────────

SEED_WORKOUTS = [
    ("leg day: squats 5x5 and lunges", 0),
    ("chest day, bench press 4x8 and pecs felt great", 1),
    ("back day: deadlift 3x5, barbell rows", 3),
    ("30 min on the treadmill, easy cardio", 4),
    ("arm day: bicep curls and tricep extensions", 6),
    ("shoulders: overhead press 3x10, lateral raises", 9),
    ("core session: planks and crunches", 12),
    ("hip thrusts and glute bridges", 20),
    ("full body crossfit class", 30),
]

# ── Ground truth: query → set of relevant workout texts ───────────────

GROUND_TRUTH: dict[str, set[str]] = {
    "what did I do today": {
        "leg day: squats 5x5 and lunges",
    },
    "what did I train yesterday": {
        "chest day, bench press 4x8 and pecs felt great",
    },
    "show me my chest workouts": {
        "chest day, bench press 4x8 and pecs felt great",
    },
    "when did I last deadlift": {
        "back day: deadlift 3x5, barbell rows",
    },
    "any cardio recently": {
        "30 min on the treadmill, easy cardio",
    },
    "what did I do last week": {
        "leg day: squats 5x5 and lunges",
        "chest day, bench press 4x8 and pecs felt great",
        "back day: deadlift 3x5, barbell rows",
        "30 min on the treadmill, easy cardio",
        "arm day: bicep curls and tricep extensions",
    },
    "glutes": {
        "hip thrusts and glute bridges",
    },
    "core abs planks": {
        "core session: planks and crunches",
    },
}

TEST_QUERIES = list(GROUND_TRUTH.keys())


# ── Metrics ───────────────────────────────────────────────────────────

def compute_metrics(results: list, relevant: set[str]) -> dict:
    """Compute normalized metrics for one query's results."""
    texts = [r.entry.source_text for r in results]

    top1_correct = texts[0] in relevant if texts else False

    mrr = 0.0
    for i, t in enumerate(texts):
        if t in relevant:
            mrr = 1.0 / (i + 1)
            break

    top3_relevant = sum(1 for t in texts[:3] if t in relevant)
    p_at_3 = top3_relevant / min(3, len(texts)) if texts else 0.0

    return {
        "top1_correct": top1_correct,
        "top1_text": texts[0] if texts else "-",
        "mrr": mrr,
        "p_at_3": p_at_3,
    }


# ── Core eval ─────────────────────────────────────────────────────────

def run_eval(db_url: str, ranking: RankingConfig, *, verbose: bool = True) -> dict:
    now = datetime.now(timezone.utc)
    log = SQLMemoryLog(db_url, table_name="eval_recall")
    collect: dict = {}

    try:
        log.init()
        log.delete_user("eval_user")
        engine = MemoryEngine(log=log, ranking=ranking, clock=lambda: now)

        t0 = time.perf_counter()
        for text, days in SEED_WORKOUTS:
            engine.store("eval_user", text, timestamp=now - timedelta(days=days))
        seed_time = time.perf_counter() - t0
        if verbose:
            print(f"Seeded {log.count('eval_user')} workouts in {seed_time*1000:.1f}ms\n")

        for query_text in TEST_QUERIES:
            relevant = GROUND_TRUTH[query_text]

            t0 = time.perf_counter()
            results = engine.search("eval_user", query_text, limit=5)
            query_time = time.perf_counter() - t0

            metrics = compute_metrics(results, relevant)
            metrics["query_time_ms"] = query_time * 1000
            collect[query_text] = metrics

            if verbose:
                print(f"{'─' * 70}")
                print(f"  QUERY: {query_text!r}  ({query_time*1000:.1f}ms)")
                print(f"{'─' * 70}")
                for r in results:
                    tag = "HIT " if r.entry.source_text in relevant else "    "
                    print(
                        f"  [{tag}] rel={r.relevance:.2f} "
                        f"{r.entry.activity_date.isoformat()} | {r.entry.source_text!r}"
                    )
                status = "PASS" if metrics["top1_correct"] else "MISS"
                print(f"  >> {status} | MRR={metrics['mrr']:.2f} P@3={metrics['p_at_3']:.2f}\n")

        log.delete_user("eval_user")
    finally:
        log.close()

    return collect


def print_summary(collect: dict, ranking: RankingConfig):
    n = len(collect)
    if not n:
        return
    top1_acc = sum(1 for m in collect.values() if m["top1_correct"]) / n
    avg_mrr = sum(m["mrr"] for m in collect.values()) / n
    avg_p3 = sum(m["p_at_3"] for m in collect.values()) / n
    avg_q = sum(m["query_time_ms"] for m in collect.values()) / n

    print(f"{'=' * 70}")
    print("  AGGREGATE METRICS")
    print(f"{'=' * 70}")
    print(
        f"  keyword_bonus={ranking.keyword_bonus}, tie_tolerance={ranking.tie_tolerance}, "
        f"{n} queries, {len(SEED_WORKOUTS)} workouts\n"
    )
    print(f"  {'Top-1 Acc':>9} {'Avg MRR':>8} {'Avg P@3':>8} {'Avg Q':>8}")
    print(f"  {'─' * 36}")
    print(f"  {top1_acc:>8.0%} {avg_mrr:>8.3f} {avg_p3:>8.3f} {avg_q:>6.1f}ms\n")


def main():
    parser = argparse.ArgumentParser(description="fitmemory recall quality eval")
    parser.add_argument("--db", default="sqlite://", help="SQLAlchemy URL (default: in-memory SQLite)")
    parser.add_argument("--keyword-bonus", type=float, default=None)
    parser.add_argument("--tolerance", type=float, default=None, help="Near-tie tolerance")
    parser.add_argument("--quiet", action="store_true", help="Only print aggregate metrics")
    args = parser.parse_args()

    ranking = RankingConfig()
    if args.keyword_bonus is not None:
        ranking.keyword_bonus = args.keyword_bonus
    if args.tolerance is not None:
        ranking.tie_tolerance = args.tolerance

    collect = run_eval(args.db, ranking, verbose=not args.quiet)
    print_summary(collect, ranking)


if __name__ == "__main__":
    main()
