"""Unit tests for the prompt evaluation harness."""

import pytest

from waypoint_planner.evaluation import (
    EVAL_CASES,
    EvalCase,
    calculate_metrics,
    evaluate_style,
    main,
)
from waypoint_planner.services.llm import LLMService


class ScriptedLLM(LLMService):
    """Answers each call with the next scripted continuation."""

    def __init__(self, replies: list[str]) -> None:
        self._timeout = 1.0
        self.replies = list(replies)

    @property
    def provider_name(self) -> str:
        return "Scripted"

    async def _generate(self, prompt, prefill, max_tokens, temperature, timeout) -> str:
        reply = self.replies.pop(0)
        if reply == "!":
            raise RuntimeError("provider down")
        return reply


class TestCalculateMetrics:
    def test_perfect(self) -> None:
        m = calculate_metrics([0, 2], [0, 2])
        assert (m.precision, m.recall, m.f1) == (1.0, 1.0, 1.0)
        assert m.passed

    def test_partial(self) -> None:
        m = calculate_metrics([0, 1], [0, 2])
        assert m.precision == 0.5
        assert m.recall == 0.5
        assert m.f1 == 0.5
        assert m.false_positives == [1]
        assert m.false_negatives == [2]
        assert not m.passed

    def test_empty_actual(self) -> None:
        m = calculate_metrics([], [0])
        assert (m.precision, m.recall, m.f1) == (0.0, 0.0, 0.0)


class TestEvalCases:
    def test_expected_indices_in_range(self) -> None:
        for case in EVAL_CASES:
            assert all(0 <= i < len(case.places) for i in case.expected), case.name

    def test_case_count(self) -> None:
        assert len(EVAL_CASES) == 12


class TestEvaluateStyle:
    @pytest.mark.asyncio
    async def test_scores_each_case(self) -> None:
        cases = [
            EvalCase("a", "coffee", [("Starbucks", ["cafe"]), ("IHOP", ["restaurant"])], [0]),
            EvalCase("b", "bank", [("Chase", ["bank"]), ("Park", ["park"])], [0]),
            EvalCase("c", "gas", [("Shell", ["gas_station"])], [0]),
        ]
        llm = ScriptedLLM(["0]", "0, 1]", "!"])

        report = await evaluate_style(llm, "pattern", cases, delay=0)

        assert report.passed_count == 1
        assert report.errors == 1
        assert report.metrics[1].precision == 0.5
        assert report.metrics[2].f1 == 0.0


class TestMain:
    def test_dry_run(self, capsys) -> None:
        assert main(["--dry-run"]) == 0
        out = capsys.readouterr().out
        assert "DRY RUN" in out
        assert "brand: World Market" in out

    def test_no_provider_configured(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv("GROQ_API_KEY", "")
        monkeypatch.setenv("GEMINI_API_KEY", "")

        assert main(["pattern"]) == 1
        assert "No LLM provider" in capsys.readouterr().err

    def test_unknown_style_rejected(self) -> None:
        with pytest.raises(SystemExit):
            main(["nope"])
