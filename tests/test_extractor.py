"""
Tests for CV text extraction strategies
"""
import json
from datetime import datetime
from unittest.mock import Mock

from talentbridge.exceptions import ExternalServiceError
from talentbridge.resume.extractor import (
    AIExtractor,
    HeuristicExtractor,
    ProfileData,
    build_extractor,
    coerce_profile_data,
)

SAMPLE_CV = """Jane Doe
jane.doe@example.com
+1 (555) 123-4567

SUMMARY
Backend engineer who likes Python and Docker.

WORK EXPERIENCE

Acme Corp
Senior Software Engineer
Jan 2019 - Present
Built payment APIs in Python
Led migration to Kubernetes

Globex
Developer
2015 - 2018
Maintained React frontends

EDUCATION

Bachelor of Science in Computer Science
Springfield University
2011 - 2015

SKILLS
Python, Docker, Kubernetes, SQL, React
"""


class TestHeuristicExtractor:

    def setup_method(self):
        self.extractor = HeuristicExtractor()

    def test_contact_fields(self):
        data = self.extractor.extract(SAMPLE_CV)
        assert data.name == 'Jane Doe'
        assert data.email == 'jane.doe@example.com'
        assert '555' in data.phone

    def test_skills_follow_reference_order(self):
        data = self.extractor.extract(SAMPLE_CV)
        assert data.skills == ['Python', 'React', 'SQL', 'Docker', 'Kubernetes']

    def test_experience_blocks(self):
        data = self.extractor.extract(SAMPLE_CV)
        assert data.experience[0] == {
            'role': 'Senior Software Engineer',
            'company': 'Acme Corp',
            'years': 1,
            'description': 'Jan 2019 - Present Built payment APIs in Python Led migration to Kubernetes',
        }
        assert data.experience[1]['role'] == 'Developer'
        assert data.experience[1]['company'] == 'Globex'
        assert all(entry['years'] == 1 for entry in data.experience)

    def test_education_block(self):
        data = self.extractor.extract(SAMPLE_CV)
        assert data.education == [{
            'degree': 'Bachelor of Science in Computer Science',
            'institution': 'Springfield University',
            'field': '',
            'graduation_year': 2015,
        }]

    def test_no_education_header_gives_empty_list(self):
        text = "John Smith\n\nWORK EXPERIENCE\n\nInitech\nEngineer\n2010 - 2012\nTPS reports\n"
        assert self.extractor.extract(text).education == []

    def test_education_without_year_uses_current_year(self):
        text = "Name\n\nEDUCATION\n\nDiploma in Design\nArt Academy of Somewhere\n"
        education = self.extractor.extract(text).education
        assert education[0]['graduation_year'] == datetime.now().year
        assert education[0]['institution'] == 'Art Academy of Somewhere'

    def test_short_experience_section_is_ignored(self):
        assert self.extractor.extract("Bob\nEXPERIENCE\nnone\nEDUCATION\n").experience == []

    def test_heuristic_leaves_unknown_fields_empty(self):
        data = self.extractor.extract(SAMPLE_CV)
        assert data.bio == ''
        assert data.projects == []
        assert data.certifications == []
        assert data.total_experience_years == 0

    def test_empty_text(self):
        assert self.extractor.extract('') == ProfileData()


class TestAIExtractor:

    def test_parses_fenced_response(self):
        payload = {
            'name': 'Jane Doe',
            'bio': '',
            'summary': 'Seasoned engineer',
            'totalYears': 7.5,
            'skills': ['Python', 'Go', 3],
            'experience': [{'role': 'Engineer', 'company': 'Acme', 'years': '2.5'}, 'junk'],
            'education': [{'degree': 'BSc', 'institution': 'MIT', 'graduationYear': 2012}],
            'projects': [{'title': 'Site', 'technologies': ['React']}],
            'certifications': [{'name': 'CKA', 'issuer': 'CNCF'}, 'AWS SA'],
        }
        llm = Mock()
        llm.generate.return_value = "Here you go:\n```json\n" + json.dumps(payload) + "\n```"

        data = AIExtractor(llm).extract(SAMPLE_CV)

        assert data.name == 'Jane Doe'
        assert data.bio == 'Seasoned engineer'
        assert data.total_experience_years == 7.5
        assert data.skills == ['Python', 'Go']
        assert data.experience == [{'role': 'Engineer', 'company': 'Acme', 'years': 2.5, 'description': ''}]
        assert data.education[0]['graduation_year'] == 2012
        assert data.projects[0]['name'] == 'Site'
        assert data.certifications == ['CKA', 'AWS SA']

    def test_prompt_is_truncated(self):
        llm = Mock()
        llm.generate.return_value = '{}'
        AIExtractor(llm).extract('x' * 20000)
        prompt = llm.generate.call_args[0][0]
        assert 'x' * 10000 in prompt
        assert 'x' * 10001 not in prompt

    def test_service_error_falls_back_to_heuristics(self):
        llm = Mock()
        llm.generate.side_effect = ExternalServiceError("timeout")
        data = AIExtractor(llm).extract(SAMPLE_CV)
        assert data == HeuristicExtractor().extract(SAMPLE_CV)

    def test_malformed_response_falls_back_to_heuristics(self):
        llm = Mock()
        llm.generate.return_value = 'I could not read this resume, sorry.'
        data = AIExtractor(llm).extract(SAMPLE_CV)
        assert data.email == 'jane.doe@example.com'
        assert data.experience


def test_build_extractor_selects_strategy():
    assert isinstance(build_extractor(None), HeuristicExtractor)
    assert isinstance(build_extractor(Mock()), AIExtractor)


def test_coerce_defaults_every_field():
    data = coerce_profile_data({})
    assert data.to_dict() == ProfileData().to_dict()
