import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumatch.analysis import analyze, fetch_jobs  # noqa: E402
from resumatch.config import Settings  # noqa: E402
from resumatch.errors import FormatParseError, NoInput, NoJobs  # noqa: E402
from resumatch.models import Document  # noqa: E402
from resumatch.report import build_match_report  # noqa: E402
from resumatch.sources import JobSource, SampleSource  # noqa: E402

SETTINGS = Settings()


class EmptySource(JobSource):
    def get_jobs(self):
        return []


class BrokenSource(JobSource):
    def get_jobs(self):
        raise RuntimeError("feed down")


class AnalyzeTests(unittest.TestCase):
    def test_no_input(self):
        with self.assertRaises(NoInput):
            analyze(None, "", job_source=SampleSource(), settings=SETTINGS)
        with self.assertRaises(NoInput):
            analyze(Document(b"", "empty.txt"), " , ", job_source=SampleSource(), settings=SETTINGS)

    def test_no_jobs(self):
        for source in (EmptySource(), BrokenSource()):
            with self.subTest(source=source):
                with self.assertRaises(NoJobs):
                    analyze(None, "python", job_source=source, settings=SETTINGS)

    def test_failing_source_counts_as_empty(self):
        self.assertEqual(fetch_jobs(BrokenSource()), [])

    def test_manual_skills_only_uses_fallback(self):
        analysis = analyze(None, "React, AWS", job_source=SampleSource(), settings=SETTINGS)
        self.assertEqual(analysis.extraction.keywords, ("react", "aws"))
        self.assertEqual([r.job_id for r in analysis.results], ["job2", "job1"])
        self.assertEqual([r.match_score for r in analysis.results], [90, 60])
        self.assertTrue(analysis.used_fallback)
        self.assertEqual(analysis.jobs_considered, 2)

    def test_document_keywords_merged_with_manual_skills(self):
        doc = Document(b"Senior developer with 5 years experience in Python and React.", "cv.txt")
        analysis = analyze(doc, "GraphQL", job_source=SampleSource(), settings=SETTINGS)
        keywords = analysis.extraction.keywords
        self.assertIn("python", keywords)
        self.assertIn("react", keywords)
        self.assertEqual(keywords[-1], "graphql")
        self.assertEqual(len(analysis.results), 2)

    def test_format_parse_error_reaches_caller(self):
        with self.assertRaises(FormatParseError):
            analyze(Document(b"not a zip", "cv.docx"), None, job_source=SampleSource(), settings=SETTINGS)


class ReportTests(unittest.TestCase):
    def test_report_lists_top_matches_and_table(self):
        analysis = analyze(None, "React, AWS", job_source=SampleSource(), settings=SETTINGS)
        report = build_match_report(analysis)
        self.assertTrue(report.startswith("# Job Match Report"))
        self.assertIn("## Top Matches", report)
        self.assertIn("### Full Stack Engineer @ Web Solutions LLC", report)
        self.assertNotIn("### Senior React Developer", report)
        self.assertIn("| 2 | Senior React Developer |", report)
        self.assertIn("computed locally", report)


if __name__ == "__main__":
    unittest.main()
