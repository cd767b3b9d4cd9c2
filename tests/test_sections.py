import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumatch.dictionaries import Dictionaries  # noqa: E402
from resumatch.models import Sections  # noqa: E402
from resumatch.sections import SectionParser, parse_sections, years_of_experience  # noqa: E402

RESUME = """Jane Doe
jane.doe@example.com | +1 415-555-0100
linkedin.com/in/janedoe

Summary
Backend engineer with 6+ years of experience building data platforms in Python.

Skills
Python, Django, PostgreSQL
• Docker
- AWS

Experience
2019 - Present Senior Engineer at Acme Corp
Built data pipelines
Led a team of four
2016 - 2019 Software Developer at Beta LLC
Maintained APIs

Education
2012 - 2016 B.S. Computer Science, State University
Graduated with honors
"""


class SectionParserTests(unittest.TestCase):
    def setUp(self):
        self.sections = parse_sections(RESUME)

    def test_contact_scanned_over_whole_text(self):
        contact = self.sections.contact
        self.assertEqual(contact.name, "Jane Doe")
        self.assertEqual(contact.email, "jane.doe@example.com")
        self.assertEqual(contact.phone, "+1 415-555-0100")
        self.assertEqual(contact.linkedin, "janedoe")
        self.assertTrue(contact.has_contact)

    def test_skills_split_on_commas_newlines_and_bullets(self):
        self.assertEqual(self.sections.skills, ("Python", "Django", "PostgreSQL", "Docker", "AWS"))

    def test_experience_split_on_year_ranges(self):
        experience = self.sections.experience
        self.assertEqual(len(experience), 2)
        self.assertEqual(experience[0].title, "Senior Engineer")
        self.assertEqual(experience[0].company, "Acme Corp")
        self.assertEqual(experience[0].description, "Built data pipelines\nLed a team of four")
        self.assertEqual(experience[1].title, "Software Developer")
        self.assertEqual(experience[1].company, "Beta LLC")

    def test_education_extracts_degree(self):
        education = self.sections.education
        self.assertEqual(len(education), 1)
        self.assertEqual(education[0].degree, "B.S.")
        self.assertEqual(education[0].institution, "B.S. Computer Science, State University")
        self.assertEqual(education[0].details, "Graduated with honors")

    def test_summary_uses_labelled_span(self):
        self.assertEqual(
            self.sections.summary,
            "Backend engineer with 6+ years of experience building data platforms in Python.",
        )
        self.assertEqual(self.sections.years_of_experience, 6)

    def test_inline_labels_with_colons(self):
        sections = parse_sections("Skills: Python, React\nEducation: MBA, Wharton School of Business\n")
        self.assertEqual(sections.skills, ("Python", "React"))
        self.assertEqual(len(sections.education), 1)
        self.assertEqual(sections.education[0].degree, "MBA")

    def test_sentence_starting_with_label_word_is_not_a_heading(self):
        sections = parse_sections("Experience with AWS and Docker in production environments.")
        self.assertEqual(sections.experience, ())


class SectionFallbackTests(unittest.TestCase):
    def test_skills_fall_back_to_dictionary_with_word_boundaries(self):
        sections = parse_sections("John Smith\nI build web apps with React and Node.js and Python.\n")
        self.assertEqual(sections.skills, ("Python", "React", "Node.js"))

    def test_skill_literals_with_regex_metacharacters(self):
        sections = parse_sections("Worked mostly in C++ and C# on trading systems.")
        self.assertIn("C++", sections.skills)
        self.assertIn("C#", sections.skills)

    def test_summary_falls_back_to_first_long_paragraph(self):
        text = (
            "Jane\nEmail: jane@example.com\n\n"
            "Experienced data analyst who turns messy spreadsheets into clear dashboards.\n"
        )
        self.assertEqual(
            parse_sections(text).summary,
            "Experienced data analyst who turns messy spreadsheets into clear dashboards.",
        )

    def test_empty_text_yields_empty_sections(self):
        sections = parse_sections("")
        self.assertEqual(sections, Sections())
        self.assertFalse(sections.has_structure)

    def test_name_skips_contact_lines(self):
        sections = parse_sections("a@b.com\n555-123-4567\nMaria Garcia\n")
        self.assertEqual(sections.contact.name, "Maria Garcia")

    def test_injected_dictionaries(self):
        tiny = Dictionaries(
            common_skills=("COBOL",),
            section_labels=(("skills", ("toolbox",)),),
        )
        parser = SectionParser(tiny)
        self.assertEqual(parser.parse("Mainframe work in COBOL").skills, ("COBOL",))
        self.assertEqual(parser.parse("Toolbox: Fortran, Pascal").skills, ("Fortran", "Pascal"))


class YearsOfExperienceTests(unittest.TestCase):
    def test_scenario_text(self):
        text = "5+ years experience in Python and React. Email: a@b.com"
        self.assertEqual(years_of_experience(text), 5)
        self.assertEqual(parse_sections(text).contact.email, "a@b.com")

    def test_largest_figure_wins(self):
        self.assertEqual(years_of_experience("3 years of experience in QA, 8 years experience overall"), 8)

    def test_none_found(self):
        self.assertEqual(years_of_experience("Fresh graduate"), 0)


if __name__ == "__main__":
    unittest.main()
