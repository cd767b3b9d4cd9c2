import sys
import threading
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumatch.config import Settings  # noqa: E402
from resumatch.errors import RemoteScorerUnavailable  # noqa: E402
from resumatch.models import ExtractionResult, JobRecord  # noqa: E402
from resumatch.remote_scorer import RemoteScorer  # noqa: E402
from resumatch.scorer import (  # noqa: E402
    MatchScorer,
    coerce_score,
    fallback_bucket,
    fallback_scores,
    merge_remote_results,
)

JOBS = [
    JobRecord(
        id="j1",
        title="Senior React Developer",
        company="Tech Innovations",
        description="Build UIs with React and TypeScript",
        skills=("React", "TypeScript"),
        employment_type="Full-time",
    ),
    JobRecord(
        id="j2",
        title="Data Engineer",
        company="Pipelines Co",
        description="Python pipelines on AWS",
        skills=("Python", "AWS", "Spark"),
        employment_type="Contract",
    ),
]

EXTRACTION = ExtractionResult(
    raw_text="React and Python developer",
    keywords=("react", "python", "docker", "typescript"),
)


class FakeRemote(RemoteScorer):
    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def score(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


class SlowRemote(RemoteScorer):
    def __init__(self):
        self.release = threading.Event()

    def score(self, prompt):
        self.release.wait(5)
        return '[{"jobId": "j1", "matchScore": 99}]'


class CoerceScoreTests(unittest.TestCase):
    def test_numbers_and_percent_strings(self):
        self.assertEqual(coerce_score(85), 85)
        self.assertEqual(coerce_score("85%"), 85)
        self.assertEqual(coerce_score(72.6), 73)

    def test_clamped_into_range(self):
        self.assertEqual(coerce_score("150%"), 100)
        self.assertEqual(coerce_score("-10"), 0)

    def test_huge_integers_clamped_without_float_conversion(self):
        self.assertEqual(coerce_score(10 ** 400), 100)
        self.assertEqual(coerce_score(-(10 ** 400)), 0)
        self.assertEqual(coerce_score("1" + "0" * 400), 50)

    def test_non_numeric_defaults_to_fifty(self):
        self.assertEqual(coerce_score("high"), 50)
        self.assertEqual(coerce_score(None), 50)
        self.assertEqual(coerce_score(True), 50)


class FallbackScoreTests(unittest.TestCase):
    def test_keyword_overlap_formula(self):
        results = {r.job_id: r for r in fallback_scores(EXTRACTION.keywords, JOBS)}
        self.assertEqual(results["j1"].match_score, 60)
        self.assertEqual(results["j1"].matching_skills, ("react", "typescript"))
        self.assertEqual(results["j2"].match_score, 45)
        self.assertEqual(results["j2"].missing_skills, ("AWS", "Spark"))

    def test_buckets(self):
        self.assertEqual(fallback_bucket(75)[:2], ("strong", "strong"))
        self.assertEqual(fallback_bucket(74)[:2], ("good", "moderate"))
        self.assertEqual(fallback_bucket(45)[:2], ("potential", "moderate"))
        self.assertEqual(fallback_bucket(44)[:2], ("growth opportunity", "weak"))

    def test_empty_keywords_cover_first_six_jobs(self):
        jobs = [JobRecord(id=f"job{i}", title=f"Role {i}") for i in range(8)]
        results = MatchScorer().score(ExtractionResult(raw_text=""), jobs)
        self.assertEqual([r.job_id for r in results], [f"job{i}" for i in range(6)])
        for r in results:
            self.assertGreaterEqual(r.match_score, 30)
            self.assertLessEqual(r.match_score, 95)
            self.assertEqual(r.source, "fallback")
            self.assertTrue(r.notes)

    def test_short_job_list(self):
        self.assertEqual(len(MatchScorer().score(ExtractionResult(raw_text=""), JOBS[:1])), 1)

    def test_no_jobs(self):
        self.assertEqual(MatchScorer().score(EXTRACTION, []), [])

    def test_deterministic(self):
        self.assertEqual(fallback_scores(EXTRACTION.keywords, JOBS), fallback_scores(EXTRACTION.keywords, JOBS))


class RemoteScoringTests(unittest.TestCase):
    def test_unknown_ids_dropped(self):
        remote = FakeRemote('[{"id": "j1", "matchPercentage": "85%"}, {"id": "j9", "matchPercentage": 90}]')
        results = MatchScorer(remote).score(EXTRACTION, JOBS)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].job_id, "j1")
        self.assertEqual(results[0].match_score, 85)
        self.assertEqual(results[0].source, "remote")

    def test_scores_clamped_after_merge(self):
        remote = FakeRemote('[{"jobId": "j1", "matchScore": "150%"}, {"jobId": "j2", "matchScore": "-10"}]')
        scores = {r.job_id: r.match_score for r in MatchScorer(remote).score(EXTRACTION, JOBS)}
        self.assertEqual(scores, {"j1": 100, "j2": 0})

    def test_prose_and_code_fences_tolerated(self):
        remote = FakeRemote(
            'Here is the analysis:\n```json\n[{"jobId": "j2", "matchScore": 70, '
            '"reasons": ["Python"], "recommendation": "Strong"}]\n```\nHope this helps!'
        )
        results = MatchScorer(remote).score(EXTRACTION, JOBS)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].reasons, ("Python",))
        self.assertEqual(results[0].recommendation, "strong")

    def test_remote_fields_merged_over_original_job(self):
        entries = [{"jobId": "j1", "matchScore": 80, "title": "Lead React Dev", "company": ""}]
        result = merge_remote_results(entries, JOBS)[0]
        self.assertEqual(result.job.title, "Lead React Dev")
        self.assertEqual(result.job.company, "Tech Innovations")
        self.assertEqual(result.job.id, "j1")

    def test_invalid_recommendation_and_duplicates(self):
        entries = [
            {"jobId": "j1", "matchScore": 80, "recommendation": "amazing"},
            {"jobId": "j1", "matchScore": 10},
        ]
        results = merge_remote_results(entries, JOBS)
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].recommendation, "moderate")
        self.assertEqual(results[0].match_score, 80)

    def test_non_string_ids_rejected(self):
        self.assertEqual(merge_remote_results([{"jobId": 1, "matchScore": 80}], JOBS), [])

    def test_malformed_output_falls_back(self):
        expected = fallback_scores(EXTRACTION.keywords, JOBS)
        for response in ("no json here", "[not json]", '{"jobId": "j1"}', '[{"jobId": "j9", "matchScore": 90}]', "[]"):
            with self.subTest(response=response):
                self.assertEqual(MatchScorer(FakeRemote(response)).score(EXTRACTION, JOBS), expected)

    def test_huge_integer_score_is_clamped(self):
        remote = FakeRemote('[{"jobId": "j1", "matchScore": 1' + "0" * 400 + "}]")
        results = MatchScorer(remote).score(EXTRACTION, JOBS)
        self.assertEqual([(r.job_id, r.match_score, r.source) for r in results], [("j1", 100, "remote")])

    def test_deeply_nested_json_falls_back(self):
        remote = FakeRemote("[" * 100000 + "]" * 100000)
        self.assertEqual(MatchScorer(remote).score(EXTRACTION, JOBS), fallback_scores(EXTRACTION.keywords, JOBS))

    def test_unexpected_error_while_merging_falls_back(self):
        remote = FakeRemote('[{"jobId": "j1", "matchScore": 80}]')
        with patch("resumatch.scorer.merge_remote_results", side_effect=OverflowError("boom")):
            results = MatchScorer(remote).score(EXTRACTION, JOBS)
        self.assertEqual(results, fallback_scores(EXTRACTION.keywords, JOBS))

    def test_null_job_id_uses_id_key(self):
        results = merge_remote_results([{"jobId": None, "id": "j1", "matchScore": 70}], JOBS)
        self.assertEqual([r.job_id for r in results], ["j1"])

    def test_remote_errors_fall_back(self):
        expected = fallback_scores(EXTRACTION.keywords, JOBS)
        for error in (RemoteScorerUnavailable("blocked"), RuntimeError("boom")):
            with self.subTest(error=error):
                self.assertEqual(MatchScorer(FakeRemote(error=error)).score(EXTRACTION, JOBS), expected)

    def test_timeout_falls_back(self):
        remote = SlowRemote()
        try:
            scorer = MatchScorer(remote, Settings(remote_timeout=0.05))
            results = scorer.score(EXTRACTION, JOBS)
        finally:
            remote.release.set()
        self.assertEqual(results, fallback_scores(EXTRACTION.keywords, JOBS))

    def test_prompt_is_bounded(self):
        jobs = [JobRecord(id=f"job-{i:02d}", title="Engineer") for i in range(12)]
        remote = FakeRemote("[]")
        extraction = ExtractionResult(raw_text="x" * 20000)
        MatchScorer(remote, Settings(prompt_max_chars=8000, prompt_max_jobs=10)).score(extraction, jobs)
        prompt = remote.prompts[0]
        self.assertIn("job-09", prompt)
        self.assertNotIn("job-10", prompt)
        self.assertIn("x" * 8000, prompt)
        self.assertNotIn("x" * 8001, prompt)


if __name__ == "__main__":
    unittest.main()
