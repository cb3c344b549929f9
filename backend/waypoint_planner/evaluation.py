"""Prompt evaluation harness for the relevance filter.

Runs labelled place lists through the live LLM with each prompt style and
scores the returned indices by precision, recall and F1.

Usage:
    python -m waypoint_planner.evaluation              # all styles
    python -m waypoint_planner.evaluation pattern      # one style
    python -m waypoint_planner.evaluation --dry-run    # show cases only
"""

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field

from waypoint_planner.models import PlaceCandidate
from waypoint_planner.services.llm import LLMService, create_llm_service
from waypoint_planner.services.relevance_filter import PROMPT_TEMPLATES, LLMRelevanceFilter

logger = logging.getLogger(__name__)


@dataclass
class EvalCase:
    name: str
    query: str
    places: list[tuple[str, list[str]]]
    expected: list[int]

    def candidates(self) -> list[PlaceCandidate]:
        return [PlaceCandidate(name=n, category_tags=tags) for n, tags in self.places]


@dataclass
class Metrics:
    precision: float
    recall: float
    f1: float
    true_positives: int
    false_positives: list[int] = field(default_factory=list)
    false_negatives: list[int] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.f1 == 1.0


@dataclass
class StyleReport:
    style: str
    metrics: list[Metrics]
    errors: int = 0

    @property
    def passed_count(self) -> int:
        return sum(1 for m in self.metrics if m.passed)

    def _mean(self, attr: str) -> float:
        if not self.metrics:
            return 0.0
        return sum(getattr(m, attr) for m in self.metrics) / len(self.metrics)

    @property
    def avg_f1(self) -> float:
        return self._mean("f1")

    @property
    def avg_precision(self) -> float:
        return self._mean("precision")

    @property
    def avg_recall(self) -> float:
        return self._mean("recall")


EVAL_CASES = [
    EvalCase(
        "coffee: shops vs restaurants", "coffee",
        [("Starbucks", ["cafe", "food"]), ("Denny's", ["restaurant", "food"]),
         ("IHOP", ["restaurant", "food"]), ("Dunkin Donuts", ["cafe", "bakery"]),
         ("Peet's Coffee", ["cafe"])],
        [0, 3, 4],
    ),
    EvalCase(
        "coffee: exclude convenience stores", "coffee shop",
        [("7-Eleven", ["convenience_store", "gas_station"]),
         ("Kwik Trip", ["convenience_store", "gas_station"]), ("Starbucks", ["cafe"]),
         ("Speedway", ["gas_station", "convenience_store"]), ("Caribou Coffee", ["cafe"])],
        [2, 4],
    ),
    EvalCase(
        "coffee: bakery hybrids", "coffee",
        [("Starbucks", ["cafe"]), ("Panera Bread", ["bakery", "cafe", "restaurant"]),
         ("Blue Bottle Coffee", ["cafe"]), ("Corner Bakery Cafe", ["bakery", "restaurant"])],
        [0, 2],
    ),
    EvalCase(
        "craft: vs hardware stores", "craft store",
        [("Michaels", ["store", "home_goods_store"]), ("Home Depot", ["hardware_store", "store"]),
         ("Joann Fabrics", ["store", "home_goods_store"]), ("Ace Hardware", ["hardware_store"]),
         ("Hobby Lobby", ["store", "home_goods_store"])],
        [0, 2, 4],
    ),
    EvalCase(
        "craft: misleading names (craft beer)", "craft store",
        [("The Craft House", ["bar", "restaurant"]), ("Blick Art Materials", ["store"]),
         ("Craft Beer Cellar", ["liquor_store"]), ("A.C. Moore Arts & Crafts", ["store"])],
        [1, 3],
    ),
    EvalCase(
        "grocery: vs convenience stores", "grocery store",
        [("Kroger", ["grocery_or_supermarket", "store"]), ("7-Eleven", ["convenience_store"]),
         ("Whole Foods", ["grocery_or_supermarket", "store"]),
         ("Walgreens", ["pharmacy", "convenience_store"]),
         ("Trader Joe's", ["grocery_or_supermarket"])],
        [0, 2, 4],
    ),
    EvalCase(
        "grocery: warehouse clubs", "grocery",
        [("Costco", ["store", "grocery_or_supermarket"]), ("Aldi", ["grocery_or_supermarket"]),
         ("Sam's Club", ["store"]),
         ("Walmart Supercenter", ["department_store", "grocery_or_supermarket"]),
         ("Target", ["department_store"])],
        [0, 1, 2, 3],
    ),
    EvalCase(
        "bank: financial vs other meanings", "bank",
        [("Chase Bank", ["bank", "finance"]), ("River Bank Park", ["park"]),
         ("Wells Fargo", ["bank", "atm"]), ("West Bank Cafe", ["restaurant"]),
         ("Bank of America", ["bank", "finance"])],
        [0, 2, 4],
    ),
    EvalCase(
        "coffee: missing types (name only)", "coffee",
        [("Starbucks", []), ("Random Place", []), ("Dunkin Donuts", [])],
        [0, 2],
    ),
    EvalCase(
        "misspelled: coffe", "coffe",
        [("Starbucks", ["cafe"]), ("Panera", ["restaurant"]), ("Dunkin", ["cafe"])],
        [0, 2],
    ),
    EvalCase(
        "coffee: regional chains", "coffee",
        [("Dutch Bros", ["cafe"]), ("Caribou Coffee", ["cafe"]),
         ("Wawa", ["convenience_store", "cafe"]), ("Colectivo Coffee", ["cafe"]),
         ("Philz Coffee", ["cafe"])],
        [0, 1, 3, 4],
    ),
    EvalCase(
        "brand: World Market", "World Market",
        [("Cost Plus World Market", ["furniture_store", "grocery_or_supermarket"]),
         ("Milwaukee Public Market", ["grocery_or_supermarket", "food"]),
         ("Farmers Market", ["grocery_or_supermarket"]),
         ("World Market Center", ["furniture_store"])],
        [0],
    ),
]


def calculate_metrics(actual: list[int], expected: list[int]) -> Metrics:
    """Score returned indices against the labelled ones."""
    expected_set = set(expected)
    actual_set = set(actual)
    true_positives = sum(1 for idx in actual if idx in expected_set)

    precision = true_positives / len(actual) if actual else 0.0
    recall = true_positives / len(expected) if expected else 0.0
    f1 = 2 * precision * recall / (precision + recall) if precision + recall > 0 else 0.0

    return Metrics(
        precision=precision,
        recall=recall,
        f1=f1,
        true_positives=true_positives,
        false_positives=[i for i in actual if i not in expected_set],
        false_negatives=[i for i in expected if i not in actual_set],
    )


def _names(case: EvalCase, indices: list[int]) -> str:
    return ", ".join(
        case.places[i][0] if 0 <= i < len(case.places) else f"?{i}" for i in indices
    )


async def evaluate_style(
    llm: LLMService, style: str, cases: list[EvalCase], delay: float = 0.2
) -> StyleReport:
    relevance_filter = LLMRelevanceFilter(llm, prompt_style=style)
    report = StyleReport(style=style, metrics=[])
    print(f"\n{'=' * 60}\nEVALUATING: {style.upper()}\n{'=' * 60}")

    for case in cases:
        try:
            indices = await relevance_filter.filter_indices(case.query, case.candidates())
        except Exception as e:
            logger.warning(f"[EVAL] {case.name}: {e}")
            report.errors += 1
            indices = []

        metrics = calculate_metrics(indices, case.expected)
        report.metrics.append(metrics)
        mark = "✓" if metrics.passed else "✗"
        print(
            f"  {case.name}... {mark} F1={metrics.f1:.2f} "
            f"(P={metrics.precision:.2f}, R={metrics.recall:.2f})"
        )
        if not metrics.passed:
            print(f"      Expected: {case.expected}")
            print(f"      Got:      {indices}")
            if metrics.false_positives:
                print(f"      False+:   {_names(case, metrics.false_positives)}")
            if metrics.false_negatives:
                print(f"      Missed:   {_names(case, metrics.false_negatives)}")
        await asyncio.sleep(delay)

    print(f"\n  SUMMARY for {style}:")
    print(f"    Passed: {report.passed_count}/{len(cases)}")
    print(
        f"    Avg F1: {report.avg_f1:.3f}  Precision: {report.avg_precision:.3f}  "
        f"Recall: {report.avg_recall:.3f}"
    )
    return report


def print_cases(cases: list[EvalCase]) -> None:
    for n, case in enumerate(cases, 1):
        print(f"{n}. {case.name}")
        print(f'   Query: "{case.query}"')
        print(f"   Expected: {case.expected}")
        for j, (name, _) in enumerate(case.places):
            marker = "✓" if j in case.expected else " "
            print(f"   {marker} {j}. {name}")
        print()


def print_comparison(reports: list[StyleReport], case_count: int) -> None:
    ranked = sorted(reports, key=lambda r: r.avg_f1, reverse=True)
    print(f"\n{'=' * 60}\nCOMPARISON\n{'=' * 60}")
    print("\nStyle         Passed   Avg F1")
    print("-" * 32)
    for r in ranked:
        print(f"{r.style:<13} {r.passed_count:>2}/{case_count}     {r.avg_f1:.3f}")
    print(f"\nWINNER: {ranked[0].style} (F1={ranked[0].avg_f1:.3f})")


async def run(styles: list[str], dry_run: bool = False) -> list[StyleReport]:
    print("Prompt Evaluation Harness")
    print(f"Test cases: {len(EVAL_CASES)}")
    print(f"Prompt styles: {', '.join(PROMPT_TEMPLATES)}")

    if dry_run:
        print("\n[DRY RUN] Showing test cases:\n")
        print_cases(EVAL_CASES)
        return []

    llm = create_llm_service()
    reports = [await evaluate_style(llm, style, EVAL_CASES) for style in styles]
    if len(reports) > 1:
        print_comparison(reports, len(EVAL_CASES))
    return reports


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate relevance-filter prompt styles")
    parser.add_argument("style", nargs="?", choices=list(PROMPT_TEMPLATES), help="Only this style")
    parser.add_argument("--dry-run", action="store_true", help="Show test cases without calling the LLM")
    args = parser.parse_args(argv)

    styles = [args.style] if args.style else list(PROMPT_TEMPLATES)
    try:
        asyncio.run(run(styles, dry_run=args.dry_run))
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
